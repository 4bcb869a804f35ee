"""Tests for versions, comparators and available migration lists."""

import pydantic
import pytest

from migreg.exceptions import MigrationNotAvailable, NoMigrationsFoundWithCriteria
from migreg.metadata import AvailableMigration, AvailableMigrationsList
from migreg.version import AlphabeticalComparator, Comparator, Version


def available(identifier: str) -> AvailableMigration:
    return AvailableMigration(version=Version(identifier), migration=object())


@pytest.fixture
def migrations() -> AvailableMigrationsList:
    return AvailableMigrationsList([available("app.Version1"), available("app.Version2"), available("app.Version3")])


class TestVersion:
    def test_string_form_is_identifier(self):
        assert str(Version("app.migrations.Version1")) == "app.migrations.Version1"

    def test_equality_and_hash(self):
        assert Version("a.B") == Version("a.B")
        assert Version("a.B") != Version("a.C")
        assert {Version("a.B"): 1}[Version("a.B")] == 1

    def test_is_immutable(self):
        version = Version("a.B")
        with pytest.raises(pydantic.ValidationError):
            version.root = "a.C"  # pyright: ignore[reportAttributeAccessIssue]

    def test_rejects_empty_identifier(self):
        with pytest.raises(pydantic.ValidationError):
            Version("")


class TestAlphabeticalComparator:
    def test_orders_by_identifier(self):
        comparator = AlphabeticalComparator()

        assert comparator.compare(Version("m.Version20250101"), Version("m.Version20250102")) < 0
        assert comparator.compare(Version("m.Version20250102"), Version("m.Version20250101")) > 0
        assert comparator.compare(Version("m.Version1"), Version("m.Version1")) == 0

    def test_satisfies_protocol(self):
        assert isinstance(AlphabeticalComparator(), Comparator)


class TestAvailableMigration:
    def test_is_frozen(self):
        migration = available("app.Version1")
        with pytest.raises(pydantic.ValidationError):
            migration.version = Version("app.Version2")  # pyright: ignore[reportAttributeAccessIssue]

    def test_keeps_migration_instance(self):
        instance = object()
        migration = AvailableMigration(version=Version("app.Version1"), migration=instance)

        assert migration.migration is instance
        assert str(migration) == "app.Version1"


class TestAvailableMigrationsList:
    def test_iteration_and_length(self, migrations: AvailableMigrationsList):
        assert len(migrations) == 3
        assert [str(m.version) for m in migrations] == ["app.Version1", "app.Version2", "app.Version3"]
        assert migrations.versions == [Version("app.Version1"), Version("app.Version2"), Version("app.Version3")]

    def test_first_and_last(self, migrations: AvailableMigrationsList):
        assert str(migrations.first()) == "app.Version1"
        assert str(migrations.first(1)) == "app.Version2"
        assert str(migrations.last()) == "app.Version3"
        assert str(migrations.last(2)) == "app.Version1"

    @pytest.mark.parametrize("offset", [3, -1])
    def test_first_out_of_range(self, migrations: AvailableMigrationsList, offset: int):
        with pytest.raises(NoMigrationsFoundWithCriteria):
            migrations.first(offset)

    def test_last_on_empty_list(self):
        with pytest.raises(NoMigrationsFoundWithCriteria, match="last"):
            AvailableMigrationsList([]).last()

    def test_has_and_get_migration(self, migrations: AvailableMigrationsList):
        assert migrations.has_migration("app.Version2")
        assert migrations.has_migration(Version("app.Version3"))
        assert not migrations.has_migration("app.Version4")
        assert str(migrations.get_migration(Version("app.Version2"))) == "app.Version2"

    def test_get_missing_migration(self, migrations: AvailableMigrationsList):
        with pytest.raises(MigrationNotAvailable) as exc_info:
            migrations.get_migration("app.Version4")

        assert exc_info.value.version == "app.Version4"

    def test_new_subset_keeps_order(self, migrations: AvailableMigrationsList):
        subset = migrations.new_subset(["app.Version3", Version("app.Version1"), "app.Unknown"])

        assert [str(m) for m in subset] == ["app.Version1", "app.Version3"]
        assert len(migrations) == 3

    def test_empty_list_is_falsy(self):
        assert not AvailableMigrationsList([])
