"""Exceptions raised while collecting and looking up migrations."""

from pathlib import Path


class MigrationException(Exception):
    """Base exception for migration registry errors."""

    pass


class MigrationClassNotFound(MigrationException):
    """Raised when an identifier does not resolve to a migration class,
    or when a lookup targets a version that was never registered."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(
            f"Migration class '{identifier}' was not found. "
            f"Is the module importable and the class defined?"
        )


class DuplicateMigrationVersion(MigrationException):
    """Raised when a second migration is registered under an existing version."""

    def __init__(self, version: str, class_name: str):
        self.version = version
        self.class_name = class_name
        super().__init__(
            f"Migration version '{version}' is already registered "
            f"(while registering class '{class_name}'). "
            f"Migration versions must be unique."
        )


class MigrationNotAvailable(MigrationException):
    """Raised when a version is missing from an AvailableMigrationsList."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Migration '{version}' is not available.")


class NoMigrationsFoundWithCriteria(MigrationException):
    """Raised when no migration sits at the requested position."""

    def __init__(self, criteria: str):
        self.criteria = criteria
        super().__init__(f"Could not find any migrations matching your criteria ({criteria}).")


class InvalidDirectory(MigrationException):
    """Raised when a finder is pointed at something that is not a directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        super().__init__(f"Cannot load migrations from '{directory}' because it is not a valid directory")


class MigrationFileLoadError(MigrationException):
    """Raised when a migration file cannot be imported."""

    def __init__(self, path: str | Path, reason: str):
        self.path = Path(path)
        super().__init__(f"Failed to load migration file {path}:\n  {reason}")
