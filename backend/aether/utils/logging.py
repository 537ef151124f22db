from __future__ import annotations

import logging
import sys

from aether.config import settings

# Chatty client libraries used by the cloud vault
_QUIET_LOGGERS = ("httpx", "httpcore", "hpack", "postgrest")


def setup_logging(level: str | None = None) -> None:
    """Configure root logging for the vault service.

    ``level`` overrides ``settings.log_level``; unknown names fall back to INFO.
    """
    level_name = (level or settings.log_level).upper()

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout
    )

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info("Logging configured", extra={"level": level_name, "vault_dir": str(settings.vault_dir)})


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
