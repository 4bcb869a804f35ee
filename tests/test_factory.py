"""Tests for resolving identifiers into migration instances."""

from pathlib import Path

import pytest

from migreg._testing import write_migration_module
from migreg.exceptions import MigrationClassNotFound
from migreg.factory import ClassMigrationFactory, MigrationFactory, import_migration_class
from migreg.finder import GlobFinder
from migreg.migration import AbstractMigration


def test_import_migration_class() -> None:
    from collections import OrderedDict

    assert import_migration_class("collections.OrderedDict") is OrderedDict


@pytest.mark.parametrize(
    "identifier",
    [
        "no_dots_at_all",
        "migreg_missing_module.Version1",
        "collections.MissingClass",
        "collections.abc.__name__",
        ".Version1",
        "collections.",
    ],
)
def test_import_migration_class_not_found(identifier: str) -> None:
    with pytest.raises(MigrationClassNotFound) as exc_info:
        import_migration_class(identifier)

    assert exc_info.value.identifier == identifier


def test_factory_passes_init_kwargs(migrations_dir: Path, namespace: str) -> None:
    write_migration_module(migrations_dir, "Version1")
    (identifier,) = GlobFinder().find_migrations(migrations_dir, namespace)
    connection = object()

    migration = ClassMigrationFactory(connection=connection).create_version(identifier)

    assert isinstance(migration, AbstractMigration)
    assert migration.context == {"connection": connection}
    assert migration.description == "Migration Version1."


def test_factory_unknown_identifier() -> None:
    with pytest.raises(MigrationClassNotFound):
        ClassMigrationFactory().create_version("migreg_missing_module.Version1")


def test_factory_satisfies_protocol() -> None:
    assert isinstance(ClassMigrationFactory(), MigrationFactory)


def test_down_is_irreversible_by_default() -> None:
    class Version1(AbstractMigration):
        def up(self) -> None:
            pass

    with pytest.raises(NotImplementedError, match="irreversible"):
        Version1().down()
    assert Version1().description == ""
