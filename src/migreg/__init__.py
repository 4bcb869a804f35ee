from pathlib import Path

from migreg.config import MigregConfig, build_repository
from migreg.exceptions import (
    DuplicateMigrationVersion,
    InvalidDirectory,
    MigrationClassNotFound,
    MigrationException,
    MigrationFileLoadError,
    MigrationNotAvailable,
    NoMigrationsFoundWithCriteria,
)
from migreg.factory import ClassMigrationFactory, MigrationFactory, import_migration_class
from migreg.finder import GlobFinder, MigrationFinder, RecursiveRegexFinder
from migreg.metadata import AvailableMigration, AvailableMigrationsList
from migreg.migration import AbstractMigration
from migreg.repository import LoadState, MigrationRepository
from migreg.version import AlphabeticalComparator, Comparator, Version

__version__ = "0.1.0"


def init_migreg(config_file: Path | None = None, search_parents: bool = True) -> MigrationRepository:
    """Load the configuration and build the migration repository it describes.

    Args:
        config_file (Path | None, optional): Path to the configuration file. Defaults to None.
        search_parents (bool, optional): Whether to search parent directories for configuration files. Defaults to True.

    Returns:
        MigrationRepository: Repository with the explicit migrations registered; directories are scanned on first use.
    """
    cfg = MigregConfig.load(config_file=config_file, search_parents=search_parents)
    return build_repository(cfg)


__all__ = [
    "AbstractMigration",
    "AlphabeticalComparator",
    "AvailableMigration",
    "AvailableMigrationsList",
    "ClassMigrationFactory",
    "Comparator",
    "DuplicateMigrationVersion",
    "GlobFinder",
    "InvalidDirectory",
    "LoadState",
    "MigrationClassNotFound",
    "MigrationException",
    "MigrationFactory",
    "MigrationFileLoadError",
    "MigrationFinder",
    "MigrationNotAvailable",
    "MigrationRepository",
    "MigregConfig",
    "NoMigrationsFoundWithCriteria",
    "RecursiveRegexFinder",
    "Version",
    "build_repository",
    "import_migration_class",
    "init_migreg",
]
