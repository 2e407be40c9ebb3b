from __future__ import annotations

import logging

ROOT_LOGGER = "irshad_admin"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_service_logger(name: str) -> logging.Logger:
    """Child logger bound to one service, e.g. ``irshad_admin.attendance``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


def kv(**fields) -> str:
    """Render context as ``key=value`` pairs for log lines."""
    return " ".join(f"{k}={v}" for k, v in fields.items() if v is not None)
