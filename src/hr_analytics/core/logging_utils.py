"""Central logging utilities for the HR Analytics backend.

Key Features
------------
1. configure_logging(): idempotent initialization of the root logger.
2. level_for_environment(env): maps the API environment to a log level.

Modules that only need a logger keep using ``logging.getLogger(__name__)``;
the application entry point calls ``configure_logging`` once at startup.
"""

from __future__ import annotations

import logging
from typing import Final

from beartype import beartype

__all__: Final = [
    "configure_logging",
    "level_for_environment",
]

_DEFAULT_LOG_FORMAT: Final = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_ENVIRONMENT_LEVELS: Final = {
    "development": logging.DEBUG,
    "staging": logging.INFO,
    "production": logging.WARNING,
}
_is_configured: bool = False


@beartype
def level_for_environment(env: str) -> int:
    """Return the log level used for an API environment name."""
    return _ENVIRONMENT_LEVELS.get(env, logging.INFO)


@beartype
def configure_logging(
    *, level: int = logging.INFO, fmt: str = _DEFAULT_LOG_FORMAT
) -> None:
    """Configure the root logger exactly once.

    Calling this function multiple times is safe; configuration will only
    be applied on the first invocation.
    """
    global _is_configured
    if _is_configured:
        return

    logging.basicConfig(level=level, format=fmt)
    # asyncpg pool reconnects stay at WARNING and above
    logging.getLogger("asyncpg").setLevel(max(level, logging.WARNING))
    _is_configured = True

