"""Registry of available migrations.

Migrations come from two places: an explicit list of identifiers, registered
as soon as the repository is created, and a mapping of namespaces to
directories, scanned lazily the first time the repository is queried. Both
paths go through `MigrationRepository.register_migration`, so a version can
only ever be registered once.
"""

import bisect
import functools
import logging
import threading
from collections.abc import Mapping, Sequence
from enum import Enum
from pathlib import Path

import pydantic

from migreg.exceptions import DuplicateMigrationVersion, MigrationClassNotFound
from migreg.factory import MigrationFactory
from migreg.finder import MigrationFinder
from migreg.metadata import AvailableMigration, AvailableMigrationsList
from migreg.version import Comparator, Version

logger = logging.getLogger(__name__)


class LoadState(Enum):
    """Progress of the one-time directory scan."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class MigrationRepository:
    """Collects migrations, rejects duplicate versions and keeps them ordered.

    Args:
        classes: Migration identifiers to register immediately, in order
        migration_directories: Namespace to directory mapping, scanned on first query
        finder: Lists the migration identifiers inside a directory
        factory: Instantiates the migration behind an identifier
        comparator: Ordering policy for versions

    Raises:
        MigrationClassNotFound: If one of `classes` does not resolve
        DuplicateMigrationVersion: If `classes` contains the same identifier twice

    Once a directory scan has failed the repository is not rescanned: it keeps
    whatever was registered before the failure. Build a new repository to try
    again.

    Example:
        ```py
        from migreg._testing import DictMigrationFactory, StaticFinder
        from migreg.repository import MigrationRepository
        from migreg.version import AlphabeticalComparator, Version

        repository = MigrationRepository(
            classes=["app.Version2"],
            migration_directories={"app": "migrations"},
            finder=StaticFinder({"migrations": ["app.Version1"]}),
            factory=DictMigrationFactory({"app.Version1": object(), "app.Version2": object()}),
            comparator=AlphabeticalComparator(),
        )

        assert repository.has_migration("app.Version1")
        assert [str(m.version) for m in repository.get_migrations()] == ["app.Version1", "app.Version2"]
        assert repository.get_migration(Version("app.Version2")).version == Version("app.Version2")
        ```
    """

    def __init__(
        self,
        classes: Sequence[str],
        migration_directories: Mapping[str, str | Path],
        finder: MigrationFinder,
        factory: MigrationFactory,
        comparator: Comparator,
    ):
        self._migration_directories: dict[str, str | Path] = dict(migration_directories)
        self._finder = finder
        self._factory = factory
        self._comparator = comparator

        self._migrations: dict[str, AvailableMigration] = {}
        self._sorted: AvailableMigrationsList | None = None
        self._load_state = LoadState.NOT_STARTED
        self._lock = threading.RLock()

        self._register_migrations(classes)

    @property
    def migration_directories(self) -> Mapping[str, str | Path]:
        return dict(self._migration_directories)

    @property
    def load_state(self) -> LoadState:
        return self._load_state

    def register_migration(self, identifier: str) -> AvailableMigration:
        """Register the migration behind `identifier`.

        Raises:
            MigrationClassNotFound: If the factory cannot resolve the identifier
            DuplicateMigrationVersion: If the version is already registered
        """
        try:
            version = Version(identifier)
        except pydantic.ValidationError as e:
            raise MigrationClassNotFound(identifier) from e

        with self._lock:
            if str(version) in self._migrations:
                raise DuplicateMigrationVersion(str(version), identifier)
            migration = self._factory.create_version(identifier)
            return self._register_migration_instance(version, migration)

    def has_migration(self, version: str) -> bool:
        self._load_migrations_from_directories()
        return version in self._migrations

    def get_migration(self, version: Version) -> AvailableMigration:
        """Look up a registered migration.

        Raises:
            MigrationClassNotFound: If no migration is registered under `version`
        """
        self._load_migrations_from_directories()
        try:
            return self._migrations[str(version)]
        except KeyError:
            raise MigrationClassNotFound(str(version)) from None

    def get_migrations(self) -> AvailableMigrationsList:
        """All registered migrations, in comparator order once loading succeeded."""
        self._load_migrations_from_directories()
        with self._lock:
            if self._sorted is None:
                # Scan still running (nested query) or failed: registration order
                return AvailableMigrationsList(self._migrations.values())
            return self._sorted

    def _register_migration_instance(self, version: Version, migration: object) -> AvailableMigration:
        key = str(version)
        # The factory may have registered this version itself
        if key in self._migrations:
            raise DuplicateMigrationVersion(key, key)

        available = AvailableMigration(version=version, migration=migration)

        if self._sorted is None:
            self._migrations[key] = available
        else:
            self._insert_sorted(available)

        logger.debug(f"Registered migration {key}")
        return available

    def _register_migrations(self, identifiers: Sequence[str]) -> list[AvailableMigration]:
        return [self.register_migration(identifier) for identifier in identifiers]

    def _insert_sorted(self, available: AvailableMigration) -> None:
        """Place a late registration at its comparator position, after its equals."""
        assert self._sorted is not None
        items = list(self._sorted)
        position = bisect.bisect_right(items, self._sort_key(available), key=self._sort_key)
        items.insert(position, available)
        self._set_order(items)

    def _sort_key(self, available: AvailableMigration):
        return functools.cmp_to_key(self._comparator.compare)(available.version)

    def _set_order(self, items: list[AvailableMigration]) -> None:
        self._migrations = {str(m.version): m for m in items}
        self._sorted = AvailableMigrationsList(items)

    def _load_migrations_from_directories(self) -> None:
        if self._load_state is LoadState.DONE:
            return

        with self._lock:
            # Another thread finished the scan while we waited, or this thread
            # is already scanning and a finder or factory queried us
            if self._load_state is not LoadState.NOT_STARTED:
                return

            self._load_state = LoadState.IN_PROGRESS
            logger.info(f"Loading migrations from {len(self._migration_directories)} directories")
            try:
                for namespace, path in self._migration_directories.items():
                    identifiers = self._finder.find_migrations(path, namespace)
                    logger.debug(f"Discovered {len(identifiers)} migrations in {path} ({namespace})")
                    self._register_migrations(identifiers)

                # sorted() is stable: versions comparing equal keep discovery order
                self._set_order(sorted(self._migrations.values(), key=self._sort_key))
            except Exception:
                logger.error(
                    f"Loading migrations from directories failed with {len(self._migrations)} "
                    f"migrations registered; the repository will not retry"
                )
                raise
            finally:
                self._load_state = LoadState.DONE

            logger.info(f"Loaded {len(self._migrations)} migrations")
