"""Registered migrations and ordered snapshots of them."""

from collections.abc import Iterable, Iterator
from typing import Any

import pydantic

from migreg.exceptions import MigrationNotAvailable, NoMigrationsFoundWithCriteria
from migreg.version import Version


class AvailableMigration(pydantic.BaseModel):
    """A version paired with the migration definition registered under it."""

    model_config = pydantic.ConfigDict(frozen=True, arbitrary_types_allowed=True)

    version: Version
    migration: Any

    def __str__(self) -> str:
        return str(self.version)


class AvailableMigrationsList:
    """Immutable, ordered view of available migrations.

    Order is whatever the producer handed in; `MigrationRepository` hands in
    comparator order.
    """

    def __init__(self, items: Iterable[AvailableMigration]):
        self._items: tuple[AvailableMigration, ...] = tuple(items)

    @property
    def items(self) -> tuple[AvailableMigration, ...]:
        return self._items

    def __iter__(self) -> Iterator[AvailableMigration]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AvailableMigrationsList):
            return NotImplemented
        return self._items == other._items

    __hash__ = None  # pyright: ignore[reportAssignmentType]

    def __repr__(self) -> str:
        return f"AvailableMigrationsList({[str(m.version) for m in self._items]})"

    @property
    def versions(self) -> list[Version]:
        return [m.version for m in self._items]

    def first(self, offset: int = 0) -> AvailableMigration:
        """Return the migration `offset` positions from the start.

        Raises:
            NoMigrationsFoundWithCriteria: If there is no migration at that position
        """
        if offset < 0 or offset >= len(self._items):
            raise NoMigrationsFoundWithCriteria(f"first{f'+{offset}' if offset else ''}")
        return self._items[offset]

    def last(self, offset: int = 0) -> AvailableMigration:
        """Return the migration `offset` positions from the end.

        Raises:
            NoMigrationsFoundWithCriteria: If there is no migration at that position
        """
        if offset < 0 or offset >= len(self._items):
            raise NoMigrationsFoundWithCriteria(f"last{f'-{offset}' if offset else ''}")
        return self._items[-1 - offset]

    def has_migration(self, version: Version | str) -> bool:
        key = str(version)
        return any(str(m.version) == key for m in self._items)

    def get_migration(self, version: Version | str) -> AvailableMigration:
        key = str(version)
        for migration in self._items:
            if str(migration.version) == key:
                return migration
        raise MigrationNotAvailable(key)

    def new_subset(self, versions: Iterable[Version | str]) -> "AvailableMigrationsList":
        """Keep only the migrations whose version is in `versions`, preserving order."""
        wanted = {str(v) for v in versions}
        return AvailableMigrationsList(m for m in self._items if str(m.version) in wanted)
