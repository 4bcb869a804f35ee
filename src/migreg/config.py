"""Configuration system for migreg using pydantic-settings."""

import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

try:
    import tomllib  # Python 3.11+  # pyright: ignore[reportMissingImports]
except ImportError:
    import tomli as tomllib  # Fallback for Python 3.10

import warnings
from contextvars import ContextVar

from pydantic import Field as PydanticField
from pydantic import field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from migreg.finder import DEFAULT_VERSION_PATTERN

if TYPE_CHECKING:
    from migreg.factory import MigrationFactory
    from migreg.finder import MigrationFinder
    from migreg.repository import MigrationRepository
    from migreg.version import Comparator

CONFIG_FILE_NAME = "migreg.toml"


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source for TOML configuration files.

    Auto-discovers configuration in this order:
    1. Explicit file path if provided
    2. migreg.toml in current directory (preferred)
    3. pyproject.toml [tool.migreg] section (fallback)
    4. No config (returns empty dict)

    Relative `migrations_paths` entries are resolved against the directory
    holding the TOML file.
    """

    def __init__(self, settings_cls: type[BaseSettings], toml_file: Path | None = None):
        super().__init__(settings_cls)
        self.toml_file = toml_file or self._discover_config_file()
        self.toml_data = self._load_toml()

    def _discover_config_file(self) -> Path | None:
        """Auto-discover config file."""
        if Path(CONFIG_FILE_NAME).exists():
            return Path(CONFIG_FILE_NAME)

        if Path("pyproject.toml").exists():
            return Path("pyproject.toml")

        return None

    def _load_toml(self) -> dict[str, Any]:
        """Load TOML file and extract migreg config."""
        if self.toml_file is None:
            return {}

        with open(self.toml_file, "rb") as f:
            data = tomllib.load(f)

        # Extract [tool.migreg] from pyproject.toml or root from migreg.toml
        if self.toml_file.name == "pyproject.toml":
            data = data.get("tool", {}).get("migreg", {})

        paths = data.get("migrations_paths")
        if isinstance(paths, dict):
            base_dir = self.toml_file.resolve().parent
            data["migrations_paths"] = {
                namespace: str(base_dir / path) if not Path(path).is_absolute() else path
                for namespace, path in paths.items()
            }

        return data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get field value from TOML data."""
        field_value = self.toml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from TOML."""
        return self.toml_data


_migreg_config: ContextVar["MigregConfig | None"] = ContextVar("_migreg_config", default=None)


class MigregConfig(BaseSettings):
    """Main migreg configuration.

    Loads from:
    1. TOML file (migreg.toml or pyproject.toml [tool.migreg])
    2. Environment variables (MIGREG_*)
    3. Init arguments

    Priority: init > env vars > TOML

    Example:
        ```py
        from migreg.config import MigregConfig

        config = MigregConfig(
            migrations=["app.migrations.Version20250101120000"],
            migrations_paths={"app.migrations": "src/app/migrations"},
        )
        assert config.finder == "glob"
        ```
    """

    model_config = SettingsConfigDict(
        env_prefix="MIGREG_",
        env_nested_delimiter="__",
        frozen=True,
    )

    # Identifiers registered before any directory is scanned
    migrations: list[str] = PydanticField(default_factory=list)

    # Namespace -> directory, scanned in this order
    migrations_paths: dict[str, str] = PydanticField(default_factory=dict)

    finder: Literal["glob", "recursive"] = PydanticField(
        default="glob",
        description="Directory finder: top-level files only, or the whole tree filtered by `version_pattern`.",
    )

    version_pattern: str = PydanticField(
        default=DEFAULT_VERSION_PATTERN,
        description="File name pattern used by the recursive finder.",
    )

    @field_validator("version_pattern")
    @classmethod
    def validate_version_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"version_pattern is not a valid regular expression: {e}") from e
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources: init → env → TOML."""
        toml_settings = TomlConfigSettingsSource(settings_cls)
        return (init_settings, env_settings, toml_settings)

    @classmethod
    def get(cls) -> "MigregConfig":
        """Get the current migreg configuration."""
        cfg = _migreg_config.get()
        if cfg is None:
            warnings.warn(
                UserWarning(
                    "Global migreg configuration not initialized. It can be set with MigregConfig.set(config) "
                    "typically after loading it from a toml file. Returning default configuration."
                ),
                stacklevel=2,
            )
            return cls()
        return cfg

    @classmethod
    def set(cls, config: "MigregConfig | None") -> None:
        """Set the current migreg configuration."""
        _migreg_config.set(config)

    @classmethod
    def reset(cls) -> None:
        """Reset the current migreg configuration to None."""
        _migreg_config.set(None)

    @classmethod
    def load(cls, config_file: str | Path | None = None, *, search_parents: bool = True) -> "MigregConfig":
        """Load config with auto-discovery and parent directory search.

        Args:
            config_file: Optional config file path (overrides auto-discovery)
            search_parents: Search parent directories for config file (default: True)

        Returns:
            Loaded config (TOML + env vars merged), also set as the current config
        """
        if config_file is None and search_parents:
            config_file = cls._discover_config_with_parents()

        if config_file:
            toml_path = Path(config_file)

            class CustomTomlSource(TomlConfigSettingsSource):
                def __init__(self, settings_cls: type[BaseSettings]):
                    super().__init__(settings_cls, toml_file=toml_path)

            original_method = cls.settings_customise_sources

            @classmethod  # type: ignore[misc]
            def custom_sources(
                cls_inner,
                settings_cls,
                init_settings,
                env_settings,
                dotenv_settings,
                file_secret_settings,
            ):
                toml_settings = CustomTomlSource(settings_cls)
                return (init_settings, env_settings, toml_settings)

            # Temporarily replace method
            cls.settings_customise_sources = custom_sources  # type: ignore[assignment]
            try:
                config = cls()
            finally:
                cls.settings_customise_sources = original_method  # type: ignore[method-assign]
        else:
            config = cls()

        cls.set(config)

        return config

    @staticmethod
    def _discover_config_with_parents() -> Path | None:
        """Search the current and parent directories for migreg.toml or pyproject.toml."""
        current = Path.cwd()

        while True:
            migreg_toml = current / CONFIG_FILE_NAME
            if migreg_toml.exists():
                return migreg_toml

            pyproject_toml = current / "pyproject.toml"
            if pyproject_toml.exists():
                return pyproject_toml

            parent = current.parent
            if parent == current:
                break
            current = parent

        return None

    def get_finder(self) -> "MigrationFinder":
        from migreg.finder import GlobFinder, RecursiveRegexFinder

        if self.finder == "recursive":
            return RecursiveRegexFinder(self.version_pattern)
        return GlobFinder()


def build_repository(
    config: MigregConfig | None = None,
    *,
    factory: "MigrationFactory | None" = None,
    comparator: "Comparator | None" = None,
) -> "MigrationRepository":
    """Create a MigrationRepository from configuration.

    Args:
        config: Configuration to use (defaults to `MigregConfig.get()`)
        factory: Migration factory (defaults to `ClassMigrationFactory()`)
        comparator: Version ordering (defaults to `AlphabeticalComparator()`)

    Raises:
        MigrationClassNotFound: If an explicit migration does not resolve
        DuplicateMigrationVersion: If an explicit migration is listed twice
    """
    from migreg.factory import ClassMigrationFactory
    from migreg.repository import MigrationRepository
    from migreg.version import AlphabeticalComparator

    config = config or MigregConfig.get()

    return MigrationRepository(
        classes=config.migrations,
        migration_directories=config.migrations_paths,
        finder=config.get_finder(),
        factory=factory or ClassMigrationFactory(),
        comparator=comparator or AlphabeticalComparator(),
    )
