import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mediator.core.logging import get_logger
from mediator.exceptions import MediatorError

from .logging import LoggingSettings


__all__ = [
    "ConfigurationError",
    "DispatchSettings",
    "MediatorSettings",
    "get_settings",
]


ENV_PREFIX = "MEDIATOR_"
DEFAULT_CONFIG_FILE = ".mediator.toml"


class ConfigurationError(MediatorError):
    """Raised when configuration loading or validation fails."""

    pass


class DispatchSettings(BaseModel):
    """Request dispatcher behaviour."""

    model_config = ConfigDict(validate_assignment=True)

    log_requests: bool = Field(
        default=True,
        description="Emit debug events when a request enters and leaves the pipeline",
    )


class MediatorSettings(BaseSettings):
    """
    Configuration settings for the mediator.

    Settings are loaded from environment variables (prefixed with ``MEDIATOR_``),
    .env files and an optional TOML configuration file. Environment variables
    take precedence over TOML values; explicit overrides passed to
    :meth:`from_config` take precedence over both.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    dispatch: DispatchSettings = Field(
        default_factory=DispatchSettings,
        description="Request dispatcher configuration",
    )

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file."""
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read TOML config file {toml_path}: {e}"
            ) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def load_config_file(cls, config_path: Path) -> dict[str, Any]:
        """Load configuration from a file based on its extension."""
        suffix = config_path.suffix.lower()

        if suffix in [".toml"]:
            return cls.load_toml_config(config_path)
        else:
            raise ConfigurationError(
                f"Unsupported config file format: {suffix}. "
                "Only TOML (.toml) files are supported."
            )

    @classmethod
    def from_config(
        cls,
        config_path: Path | str | None = None,
        **kwargs: Any,
    ) -> "MediatorSettings":
        """Create settings from a TOML file, the environment and overrides."""
        if config_path is None:
            config_path_env = os.environ.get(f"{ENV_PREFIX}CONFIG_FILE")
            if config_path_env:
                config_path = Path(config_path_env)

        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            default_path = Path.cwd() / DEFAULT_CONFIG_FILE
            if default_path.exists():
                config_path = default_path

        config_data: dict[str, Any] = {}
        if config_path and config_path.exists():
            config_data = cls.load_config_file(config_path)
            logger = get_logger(__name__)

            logger.info(
                "config_file_loaded",
                path=str(config_path),
                category="config",
            )

        settings = cls()

        for key, value in config_data.items():
            if key not in type(settings).model_fields or not isinstance(value, dict):
                continue
            nested_obj = getattr(settings, key)
            for nested_key, nested_value in value.items():
                # Unknown keys are ignored, like extra="ignore" does for the env
                if nested_key not in type(nested_obj).model_fields:
                    get_logger(__name__).warning(
                        "config_key_ignored",
                        key=f"{key}.{nested_key}",
                        category="config",
                    )
                    continue
                env_key = f"{ENV_PREFIX}{key.upper()}__{nested_key.upper()}"
                if os.getenv(env_key) is None:
                    setattr(nested_obj, nested_key, nested_value)

        def _apply_overrides(target: Any, overrides: dict[str, Any]) -> None:
            for k, v in overrides.items():
                if (
                    isinstance(v, dict)
                    and hasattr(target, k)
                    and isinstance(getattr(target, k), BaseModel)
                ):
                    _apply_overrides(getattr(target, k), v)
                else:
                    setattr(target, k, v)

        if kwargs:
            _apply_overrides(settings, kwargs)

        return settings


@lru_cache(maxsize=1)
def get_settings() -> MediatorSettings:
    """Get the process-wide settings instance."""
    return MediatorSettings.from_config()
