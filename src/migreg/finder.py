"""Discover migration classes in directories of Python files."""

import importlib.util
import inspect
import logging
import re
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, runtime_checkable

from migreg.exceptions import InvalidDirectory, MigrationFileLoadError
from migreg.migration import AbstractMigration

logger = logging.getLogger(__name__)

DEFAULT_VERSION_PATTERN = r"^Version.*\.py$"


@runtime_checkable
class MigrationFinder(Protocol):
    """Finds the identifiers of the migrations stored under a directory."""

    def find_migrations(self, directory: str | Path, namespace: str | None = None) -> list[str]:
        """Return migration identifiers found in `directory`, in discovery order."""
        ...


class Finder:
    """Shared machinery: import files as modules and collect migration classes."""

    def find_migrations(self, directory: str | Path, namespace: str | None = None) -> list[str]:
        root = self._get_real_path(directory)
        identifiers: list[str] = []
        for path in self._migration_files(root):
            module_name = self._module_name(root, path, namespace)
            identifiers.extend(self._load_migrations(path, module_name))
        logger.debug(f"Found {len(identifiers)} migrations in {root}")
        return identifiers

    def _migration_files(self, root: Path) -> Iterable[Path]:
        raise NotImplementedError

    @staticmethod
    def _get_real_path(directory: str | Path) -> Path:
        path = Path(directory)
        if not path.is_dir():
            raise InvalidDirectory(directory)
        return path.resolve()

    @staticmethod
    def _module_name(root: Path, path: Path, namespace: str | None) -> str:
        parts = list(path.relative_to(root).with_suffix("").parts)
        if namespace:
            parts.insert(0, namespace.strip("."))
        return ".".join(parts)

    @staticmethod
    def _load_migrations(path: Path, module_name: str) -> list[str]:
        """Import `path` as `module_name` and return its migration class paths.

        The module is kept in `sys.modules` so the returned identifiers can be
        imported by a factory later on.
        """
        logger.debug(f"Loading migration file {path} as {module_name}")

        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise MigrationFileLoadError(path, "could not create a module spec")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except SyntaxError as e:
            del sys.modules[module_name]
            raise MigrationFileLoadError(path, f"Line {e.lineno}: {e.msg}") from e
        except Exception as e:
            del sys.modules[module_name]
            raise MigrationFileLoadError(path, str(e)) from e

        # vars() keeps definition order, inspect.getmembers() would sort by name
        return [
            f"{module_name}.{obj.__name__}"
            for obj in vars(module).values()
            if inspect.isclass(obj)
            and issubclass(obj, AbstractMigration)
            and obj is not AbstractMigration
            and not inspect.isabstract(obj)
            and obj.__module__ == module_name
        ]


class GlobFinder(Finder):
    """Looks at the Python files directly inside the directory.

    Files are visited in name order; `__init__.py` and other files starting
    with an underscore are ignored.
    """

    def _migration_files(self, root: Path) -> Iterable[Path]:
        return sorted(p for p in root.glob("*.py") if p.is_file() and not p.name.startswith("_"))


class RecursiveRegexFinder(Finder):
    """Walks the directory tree and keeps files whose name matches a pattern.

    Sub-directories become sub-packages of the namespace, so
    `migrations/2025/Version1.py` in namespace `app` yields module
    `app.2025.Version1`.
    """

    def __init__(self, pattern: str = DEFAULT_VERSION_PATTERN):
        self.pattern = re.compile(pattern)

    def _migration_files(self, root: Path) -> Iterable[Path]:
        files = [
            p
            for p in root.rglob("*.py")
            if p.is_file() and self.pattern.match(p.name) and not p.name.startswith("_")
        ]
        return sorted(files, key=lambda p: p.relative_to(root).parts)
