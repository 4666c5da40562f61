"""Runtime logging helpers."""

from __future__ import annotations

import sys
from typing import Literal

from loguru import logger

LogProfile = Literal["default", "plain"]

_PROFILE_FORMATS: dict[LogProfile, str] = {
    "plain": "{message}",
    "default": "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {name}:{function}:{line} | {message}",
}
_CONFIGURED: tuple[LogProfile, str] | None = None


def configure_logging(*, level: str = "WARNING", profile: LogProfile = "default") -> None:
    """Configure process-level logging once per profile and level."""

    global _CONFIGURED
    level = level.upper()
    if _CONFIGURED == (profile, level):
        return

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=_PROFILE_FORMATS[profile],
        backtrace=False,
        diagnose=False,
    )
    _CONFIGURED = (profile, level)
