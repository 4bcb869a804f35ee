"""Base class for migration definitions."""

from abc import ABC, abstractmethod
from typing import Any


class AbstractMigration(ABC):
    """Base class for migrations discovered by the bundled finders.

    The registry treats instances as opaque: it stores whatever the factory
    returns and never calls into it. Execution belongs to the caller.

    Subclasses implement `up()` and may implement `down()`. The class
    docstring's first line doubles as the description unless `description`
    is overridden.

    Example:
        ```py
        from migreg.migration import AbstractMigration


        class Version20250101120000(AbstractMigration):
            \"\"\"Create the users table.\"\"\"

            def up(self) -> None:
                ...


        assert Version20250101120000().description == "Create the users table."
        ```
    """

    def __init__(self, **context: Any):
        # Whatever the factory was configured to pass (connections, loggers, ...)
        self.context = context

    @property
    def description(self) -> str:
        doc = type(self).__doc__
        if not doc:
            return ""
        return doc.strip().splitlines()[0].strip()

    @abstractmethod
    def up(self) -> None:
        """Apply the migration."""
        pass

    def down(self) -> None:
        """Revert the migration."""
        raise NotImplementedError(f"{type(self).__name__} is irreversible")

    def __repr__(self) -> str:
        return f"<{type(self).__module__}.{type(self).__qualname__}>"
