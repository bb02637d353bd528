"""localstore configuration settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from localstore.infrastructure.logging_setup import configure_logging
from localstore.kernel.fs.filesystem import NATIVE_FILESYSTEM
from localstore.kernel.fs.path import Path
from localstore.kernel.lancedb.store_opener import (
    TESTING_DIRECTORY_NAME,
    ClearingStoreOpener,
    LanceDBStore,
    create_testing_store_opener,
    open_for_testing,
)


class Settings(BaseSettings):
    """Process-wide settings, resolved once at startup.

    Every field can be set with a ``LOCALSTORE_`` prefixed environment
    variable. Components never read these globals themselves; callers pass
    the values they need (for example ``temp_path``) explicitly.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOCALSTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_json: bool = False

    # Scratch space; TMPDIR (or the Windows equivalents) unless overridden.
    temp_dir: str = Field(default_factory=lambda: NATIVE_FILESYSTEM.temp_dir().native_value)
    testing_directory_name: str = TESTING_DIRECTORY_NAME

    @property
    def temp_path(self) -> Path:
        return Path.from_native(self.temp_dir)

    def setup_logging(self) -> None:
        configure_logging(level=self.log_level, json_logs=self.log_json)

    def testing_store_opener(self) -> ClearingStoreOpener:
        """Clearing opener for ``testing_directory_name`` under ``temp_path``."""
        return create_testing_store_opener(self.temp_path, name=self.testing_directory_name)

    def open_testing_store(self) -> LanceDBStore:
        return open_for_testing(self.temp_path, name=self.testing_directory_name)


# Global settings instance
settings = Settings()
