"""
devrestart - Configuration

Structured configuration for the restart subsystem, built from environment
variables with sensible defaults. Values from a ``.env`` file are merged
into the environment when the configuration is first requested.

The Starting-phase restart override (``DEVRESTART_RESTART_ENABLED``) is not
part of this configuration. It is only ever read from the process
environment, so a ``.env`` entry for it is skipped.
"""
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from dotenv import dotenv_values, find_dotenv

from core.errors import ConfigurationError
from core.types import HIGHEST_PRECEDENCE
from observability.logging import LoggingConfig
from observability.tracing import TracingConfig
from restart.policy import ENABLED_VARIABLE


class Environment(Enum):
    """Deployment environments."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be an integer",
            config_key=name,
            actual_value=raw,
            cause=e,
        ) from e


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass
class RestartConfig:
    """Restart subsystem configuration."""
    # Dispatch order of the lifecycle router (lower runs earlier)
    listener_order: int = field(
        default_factory=lambda: _env_int("DEVRESTART_LISTENER_ORDER", HIGHEST_PRECEDENCE)
    )
    # Modules whose presence means an agent-based reloader is active
    agent_reloader_modules: List[str] = field(
        default_factory=lambda: _env_list("DEVRESTART_AGENT_RELOADERS", "reloadium,jurigged")
    )
    # Path segments marking installed distributions (watch-only code)
    library_markers: List[str] = field(
        default_factory=lambda: _env_list("DEVRESTART_LIBRARY_MARKERS", "site-packages,dist-packages")
    )
    # Abort lifecycle delivery on the first listener failure
    fail_fast: bool = field(
        default_factory=lambda: os.getenv("DEVRESTART_FAIL_FAST", "false").lower() == "true"
    )


@dataclass
class Config:
    """Main configuration class combining all sub-configs."""
    env: Environment = field(default_factory=lambda: Environment(os.getenv("ENVIRONMENT", "development")))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    restart: RestartConfig = field(default_factory=RestartConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)

    @property
    def is_production(self) -> bool:
        return self.env == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        return self.env == Environment.DEVELOPMENT

    def validate(self) -> None:
        """Raise ConfigurationError on the first invalid value."""
        if not self.restart.library_markers:
            raise ConfigurationError(
                "At least one library path marker is required",
                config_key="DEVRESTART_LIBRARY_MARKERS",
                actual_value=self.restart.library_markers,
            )
        if self.logging.level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigurationError(
                f"Unknown log level {self.logging.level!r}",
                config_key="LOG_LEVEL",
                actual_value=self.logging.level,
            )
        if not 0.0 <= self.tracing.sample_rate <= 1.0:
            raise ConfigurationError(
                "Trace sample rate must be between 0 and 1",
                config_key="OTEL_TRACES_SAMPLER_ARG",
                actual_value=self.tracing.sample_rate,
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "env": self.env.value,
            "debug": self.debug,
            "restart": {
                "listener_order": self.restart.listener_order,
                "agent_reloader_modules": list(self.restart.agent_reloader_modules),
                "library_markers": list(self.restart.library_markers),
                "fail_fast": self.restart.fail_fast,
            },
            "logging": {
                "level": self.logging.level,
                "json_format": self.logging.json_format,
            },
            "tracing": {
                "enabled": self.tracing.enabled,
                "sample_rate": self.tracing.sample_rate,
            },
        }


# Singleton configuration instance
_config: Optional[Config] = None


def load_environment(dotenv_path: Optional[str] = None, override: bool = False) -> Dict[str, str]:
    """
    Merge ``.env`` values into ``os.environ``.

    Args:
        dotenv_path: File to read; searched upwards from the working
            directory when omitted
        override: Replace variables that are already set

    Returns:
        The variables that were written
    """
    path = dotenv_path or find_dotenv(usecwd=True)
    if not path:
        return {}

    applied: Dict[str, str] = {}
    for key, value in dotenv_values(path).items():
        if key == ENABLED_VARIABLE or value is None:
            continue
        if override or key not in os.environ:
            os.environ[key] = value
            applied[key] = value
    return applied


def get_config(dotenv_path: Optional[str] = None) -> Config:
    """Get or create configuration singleton."""
    global _config
    if _config is None:
        load_environment(dotenv_path)
        _config = Config()
    return _config


def reload_config(dotenv_path: Optional[str] = None) -> Config:
    """Reload configuration from environment."""
    global _config
    load_environment(dotenv_path, override=True)
    _config = Config()
    return _config
