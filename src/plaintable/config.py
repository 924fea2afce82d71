"""Environment-driven render settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .border import BorderStyle
from .exceptions import ConfigurationError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class RenderSettings:
    """Defaults for command line rendering.

    Explicit command line options always win over these settings.
    """

    border_style: BorderStyle = BorderStyle.ASCII_DOUBLE
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.log_level not in _LOG_LEVELS:
            raise ConfigurationError(
                "log level", self.log_level, f"expected one of: {', '.join(_LOG_LEVELS)}"
            )

    @classmethod
    def from_environment(cls) -> RenderSettings:
        """Create RenderSettings from environment variables."""
        return cls(
            border_style=BorderStyle.parse(
                os.environ.get("PLAINTABLE_BORDER_STYLE", BorderStyle.ASCII_DOUBLE.value)
            ),
            log_level=os.environ.get("PLAINTABLE_LOG_LEVEL", "WARNING").strip().upper(),
        )
