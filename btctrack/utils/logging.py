"""Rich logging utilities."""

from __future__ import annotations

import logging
from typing import Optional

from rich.logging import RichHandler

PACKAGE_LOGGER = "btctrack"


def setup_logging(level: str | int = "INFO") -> None:
    """Configure root logger with Rich handler."""

    if isinstance(level, str):
        numeric_level = logging.getLevelName(level.upper())
    else:
        numeric_level = level
    logging.basicConfig(
        level=numeric_level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, markup=False, show_path=False)],
        force=True,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the package namespace.

    Handlers are left to :func:`setup_logging`, which the CLI calls; library
    use stays silent unless the application configures logging itself.
    """

    if name is None or name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name or PACKAGE_LOGGER)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


__all__ = ["setup_logging", "get_logger"]
