"""Centralized logging configuration."""

import sys

from loguru import logger

from seat_booking.config import settings


log_format = " | ".join(
    (
        "<lk>{time:YYYY-MM-DD HH:mm:ss.SSS}</>",
        "<lvl>{level:<8}</>",
        "<c>{name}::{function}:{line}</>",
        "{message}",
    )
)


def configure_logging(level=None, log_dir=None):
    level = level or settings.LOG_LEVEL
    log_dir = log_dir if log_dir is not None else settings.LOG_DIR

    logger.remove()  # drop loguru's default stderr handler
    logger.add(sys.stdout, format=log_format, level=level)

    if log_dir:
        logger.add(
            f"{log_dir}/{{time:YYYY-MM-DD}}.log",
            format=log_format,
            level=level,
            rotation="1 day",
            retention="30 days",
            compression="zip",
            enqueue=True,
        )
    return logger
