"""Testing helpers: stub collaborators and migration file generation."""

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from migreg.exceptions import MigrationClassNotFound
from migreg.finder import MigrationFinder


class StaticFinder:
    """Finder answering from a fixed directory -> identifiers mapping."""

    def __init__(self, migrations_by_directory: Mapping[str, Iterable[str]]):
        self.migrations_by_directory = {str(k): list(v) for k, v in migrations_by_directory.items()}

    def find_migrations(self, directory: str | Path, namespace: str | None = None) -> list[str]:
        return list(self.migrations_by_directory.get(str(directory), []))


class CountingFinder:
    """Wraps a finder and records every call made to it."""

    def __init__(self, finder: MigrationFinder):
        self.finder = finder
        self.calls: list[tuple[str, str | None]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def find_migrations(self, directory: str | Path, namespace: str | None = None) -> list[str]:
        self.calls.append((str(directory), namespace))
        return self.finder.find_migrations(directory, namespace)


class DictMigrationFactory:
    """Factory handing out pre-built migration objects by identifier."""

    def __init__(self, migrations: Mapping[str, Any]):
        self.migrations = dict(migrations)
        self.created: list[str] = []

    def create_version(self, identifier: str) -> Any:
        if identifier not in self.migrations:
            raise MigrationClassNotFound(identifier)
        self.created.append(identifier)
        return self.migrations[identifier]


def write_migration_module(
    directory: Path,
    file_name: str,
    class_names: Iterable[str] | None = None,
    *,
    extra_code: str = "",
) -> Path:
    """Write a Python file defining `AbstractMigration` subclasses.

    Args:
        directory: Where to write the file (created if missing)
        file_name: File stem, e.g. "Version20250101120000"
        class_names: Classes to define, defaults to a single class named like the file
        extra_code: Appended verbatim after the class definitions

    Returns:
        Path to the written file
    """
    directory.mkdir(parents=True, exist_ok=True)
    names = list(class_names) if class_names is not None else [file_name]

    code_lines = [
        f'"""Migration module {file_name}."""',
        "",
        "from migreg.migration import AbstractMigration",
        "",
    ]
    for name in names:
        code_lines.extend(
            [
                "",
                f"class {name}(AbstractMigration):",
                f'    """Migration {name}."""',
                "",
                "    def up(self) -> None:",
                "        pass",
                "",
            ]
        )
    if extra_code:
        code_lines.extend(["", extra_code])

    path = directory / f"{file_name}.py"
    path.write_text("\n".join(code_lines) + "\n")
    return path
