"""Turning migration identifiers into migration instances."""

import importlib
import inspect
import logging
from typing import Any, Protocol, runtime_checkable

from migreg.exceptions import MigrationClassNotFound

logger = logging.getLogger(__name__)


@runtime_checkable
class MigrationFactory(Protocol):
    """Creates the migration definition registered under an identifier."""

    def create_version(self, identifier: str) -> Any:
        """Instantiate the migration behind `identifier`.

        Raises:
            MigrationClassNotFound: If the identifier cannot be resolved
        """
        ...


def import_migration_class(identifier: str) -> type:
    """Import a class from its dotted path.

    Args:
        identifier: Full import path like "app.migrations.Version20250101120000"

    Returns:
        The imported class

    Raises:
        MigrationClassNotFound: If the module or the class cannot be imported,
            or the attribute is not a class
    """
    module_path, _, class_name = identifier.rpartition(".")
    if not module_path or not class_name:
        raise MigrationClassNotFound(identifier)

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise MigrationClassNotFound(identifier) from e

    try:
        cls = getattr(module, class_name)
    except AttributeError as e:
        raise MigrationClassNotFound(identifier) from e

    if not inspect.isclass(cls):
        raise MigrationClassNotFound(identifier)

    return cls


class ClassMigrationFactory:
    """Factory that imports the migration class and calls it.

    Every instance receives the same keyword arguments, e.g. a database
    connection shared by all migrations.

    Example:
        ```py
        from migreg.factory import ClassMigrationFactory

        factory = ClassMigrationFactory()
        instance = factory.create_version("collections.OrderedDict")
        assert instance == {}
        ```
    """

    def __init__(self, **init_kwargs: Any):
        self.init_kwargs = init_kwargs

    def create_version(self, identifier: str) -> Any:
        migration_class = import_migration_class(identifier)
        logger.debug(f"Instantiating migration {identifier}")
        return migration_class(**self.init_kwargs)
