"""
Runtime settings — everything the engine reads from the environment.

    EXT_DEPENDENCIES           mode directive (unset → no-op,
                               "+" → package myself,
                               "+<manifest>" → compile with dev packages,
                               "<manifest>" → apply prebuilt dependencies)
    EXTDEPS_LOG_LEVEL          console log level (default WARNING)
    EXTDEPS_LOG_FILE           optional log file path
    EXTDEPS_LOG_FILE_LEVEL     optional separate level for the log file
    EXTDEPS_FETCH_TIMEOUT      network fetch timeout in seconds (default 60)
    EXTDEPS_INSTALL_TIMEOUT    OS package install timeout in seconds (default none)
"""

from __future__ import annotations

import os
from typing import Mapping

from pydantic import BaseModel, Field, ValidationError

from extdeps.core.errors import ConfigError

DIRECTIVE_ENV = "EXT_DEPENDENCIES"
ENV_PREFIX = "EXTDEPS_"

DEFAULT_FETCH_TIMEOUT = 60.0


class Settings(BaseModel):
    """Validated engine settings."""

    directive: str | None = None
    log_level: str = "WARNING"
    log_file: str | None = None
    log_file_level: str | None = None
    fetch_timeout: float = Field(default=DEFAULT_FETCH_TIMEOUT, gt=0)
    install_timeout: float | None = Field(default=None, gt=0)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Empty values count as unset.

        Raises:
            ConfigError: If a numeric setting is not a positive number.
        """
        env = os.environ if environ is None else environ

        def _get(key: str) -> str | None:
            value = env.get(key, "")
            return value if value.strip() else None

        values: dict[str, object] = {"directive": _get(DIRECTIVE_ENV)}
        for field_name in ("log_level", "log_file", "log_file_level",
                           "fetch_timeout", "install_timeout"):
            value = _get(ENV_PREFIX + field_name.upper())
            if value is not None:
                values[field_name] = value

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise ConfigError(f"Invalid {ENV_PREFIX}* environment settings: {e}") from e
