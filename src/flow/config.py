"""
Configuration — typed, validated settings loaded from environment/.env.

Uses pydantic-settings so an application embedding flow can tune it without
code changes:

  FLOW_LOG_LEVEL=DEBUG                         → show flet short circuits
  FLOW_IGNORED_EXCEPTIONS='["asyncio.CancelledError"]'
                                               → re-raise instead of returning
  FLOW_CONFIGURE_LOGGING=false                 → leave the "flow" logger to the host

Settings are applied once at startup with `configure()`. The classification
registry is treated as read-only after that.
"""

from __future__ import annotations

import importlib
import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from flow.classify import ClassifierRegistry, default_registry
from flow.log import configure_structlog, get_logger


def resolve_exception_type(path: str) -> type[BaseException]:
    """Import an exception class from a dotted path such as "asyncio.CancelledError"."""
    module_name, _, attr = path.rpartition(".")
    if not module_name:
        module_name = "builtins"
    try:
        obj = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as e:
        raise ValueError(f"Cannot import exception type {path!r}: {e}") from e
    if not (isinstance(obj, type) and issubclass(obj, BaseException)):
        raise ValueError(f"{path!r} is not an exception type")
    return obj


class FlowSettings(BaseSettings):
    """
    Library settings.

    Load order (highest priority first):
      1. Environment variables (FLOW_ prefix)
      2. .env file in the working directory
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="FLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="WARNING", description="Minimum level of the 'flow' logger")
    ignored_exceptions: list[str] = Field(
        default_factory=list,
        description="Dotted paths of exception types the default handler re-raises",
    )
    configure_logging: bool = Field(default=True, description="Attach a stderr handler to the 'flow' logger")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @field_validator("ignored_exceptions")
    @classmethod
    def validate_ignored_exceptions(cls, value: list[str]) -> list[str]:
        """Fail at startup, not at the first failure, on a bad dotted path."""
        for path in value:
            resolve_exception_type(path)
        return value

    def exception_types(self) -> tuple[type[BaseException], ...]:
        return tuple(resolve_exception_type(path) for path in self.ignored_exceptions)


@lru_cache(maxsize=1)
def get_settings() -> FlowSettings:
    return FlowSettings()


def configure(
    settings: FlowSettings | None = None,
    registry: ClassifierRegistry | None = None,
) -> FlowSettings:
    """
    Apply settings once at startup.

    Marks the configured exception types as ignored on the registry (the
    default one unless given) and, unless disabled, sends the "flow" logger
    to stderr at the configured level.
    """
    settings = settings if settings is not None else get_settings()
    registry = registry if registry is not None else default_registry

    if settings.configure_logging:
        configure_structlog(settings.log_level)
    registry.ignore(*settings.exception_types())

    get_logger().info(
        "flow.configured",
        log_level=settings.log_level,
        ignored_exceptions=settings.ignored_exceptions,
    )
    return settings
