from __future__ import annotations

import logging

from .config import env_str


def get_logger(name: str) -> logging.Logger:
    """Logger configured once from DOCVEC_LOG_LEVEL (env or .env)."""
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        level = env_str("DOCVEC_LOG_LEVEL", "INFO").upper()
        logging.basicConfig(
            level=getattr(logging, level, logging.INFO),
            format="%(levelname)s | %(name)s | %(message)s",
        )
    return logger
