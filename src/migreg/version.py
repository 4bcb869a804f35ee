"""Migration version identity and ordering."""

from typing import Protocol, runtime_checkable

import pydantic


class Version(pydantic.RootModel[str]):
    """Unique identity of a migration, derived from its identifier.

    The identifier is the fully qualified dotted path of the migration class.
    Versions compare, hash and print by that identifier:

    ```python
    from migreg.version import Version

    version = Version("app.migrations.Version20250101120000")
    assert str(version) == "app.migrations.Version20250101120000"
    assert version == Version("app.migrations.Version20250101120000")
    assert len({version, Version("app.migrations.Version20250101120000")}) == 1
    ```
    """

    model_config = pydantic.ConfigDict(frozen=True)

    root: str = pydantic.Field(min_length=1)

    def __str__(self) -> str:
        return self.root

    def __repr__(self) -> str:
        return f"Version({self.root!r})"


@runtime_checkable
class Comparator(Protocol):
    """Ordering policy over versions.

    Must be a strict weak ordering and give the same answer for the same pair
    on every call.
    """

    def compare(self, a: Version, b: Version) -> int:
        """Return a negative number, zero or a positive number when `a` sorts
        before, together with, or after `b`."""
        ...


class AlphabeticalComparator:
    """Orders versions by their identifier string.

    Timestamped class names (`Version20250101120000`) therefore sort
    chronologically:

    ```python
    from migreg.version import AlphabeticalComparator, Version

    comparator = AlphabeticalComparator()
    assert comparator.compare(Version("m.Version2"), Version("m.Version1")) > 0
    assert comparator.compare(Version("m.Version1"), Version("m.Version1")) == 0
    ```
    """

    def compare(self, a: Version, b: Version) -> int:
        left, right = str(a), str(b)
        return (left > right) - (left < right)
