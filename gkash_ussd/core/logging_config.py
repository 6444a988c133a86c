# gkash_ussd/core/logging_config.py

import logging
import re
import sys

from loguru import logger

from gkash_ussd.core.config import settings

_PHONE_TAIL = re.compile(r"\d(?=\d{3})")


def mask_phone(phone: str | None) -> str:
    """Mask all but the last three digits of a phone number for log lines."""
    if not phone:
        return ""
    return _PHONE_TAIL.sub("•", phone)


def setup_logging() -> None:
    """
    Configure loguru as the main logger with colored, structured logs.
    Also redirect stdlib logging (uvicorn, httpx, module loggers) to loguru.
    """
    # Remove default loguru handler
    logger.remove()

    level = (settings.LOG_LEVEL or "INFO").upper()

    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
        "<level>{message}</level>",
        level=level,
        colorize=True,
        backtrace=False,
        diagnose=settings.DEBUG,
    )

    # Redirect stdlib logging to loguru
    class InterceptHandler(logging.Handler):
        def emit(self, record):
            level = record.levelname
            try:
                level = logger.level(level).name
            except ValueError:
                level = record.levelno

            frame, depth = logging.currentframe(), 2
            while frame and frame.f_code.co_filename == logging.__file__:
                frame = frame.f_back
                depth += 1

            logger.opt(depth=depth, exception=record.exc_info).log(
                level, record.getMessage()
            )

    logging.basicConfig(handlers=[InterceptHandler()], level=logging.getLevelName(level), force=True)
    logging.getLogger("uvicorn").handlers = [InterceptHandler()]
    logging.getLogger("uvicorn.error").handlers = [InterceptHandler()]
    logging.getLogger("uvicorn.access").handlers = [InterceptHandler()]
    # Quieten noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
