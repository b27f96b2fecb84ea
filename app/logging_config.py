"""
Logging setup for the API process.
Console output plus rotating error/combined log files.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

from .config import IS_PRODUCTION, LOG_DIR, LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def configure_logging(log_dir: Optional[str] = None) -> None:
    """Configure root logging once per process"""
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    # Production consoles only carry errors; full detail goes to combined.log
    console.setLevel(logging.ERROR if IS_PRODUCTION else logging.DEBUG)
    root.addHandler(console)

    target_dir = log_dir or LOG_DIR
    try:
        os.makedirs(target_dir, exist_ok=True)

        error_file = RotatingFileHandler(
            os.path.join(target_dir, "error.log"), maxBytes=5 * 1024 * 1024, backupCount=5
        )
        error_file.setLevel(logging.ERROR)
        error_file.setFormatter(formatter)
        root.addHandler(error_file)

        combined_file = RotatingFileHandler(
            os.path.join(target_dir, "combined.log"), maxBytes=5 * 1024 * 1024, backupCount=10
        )
        combined_file.setFormatter(formatter)
        root.addHandler(combined_file)
    except OSError as e:
        root.warning(f"File logging disabled, cannot write to {target_dir}: {e}")

    # Reduce verbosity of third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("playwright").setLevel(logging.WARNING)

    _configured = True


def _format_details(details: dict[str, Any]) -> str:
    if not details:
        return ""
    return " | " + ", ".join(f"{key}={value}" for key, value in details.items())


def log_email(logger: logging.Logger, action: str, **details: Any) -> None:
    logger.info(f"📧 Email {action}{_format_details(details)}")


def log_pdf(logger: logging.Logger, action: str, **details: Any) -> None:
    logger.info(f"📄 PDF {action}{_format_details(details)}")


def log_api(logger: logging.Logger, endpoint: str, method: str, **details: Any) -> None:
    logger.info(f"🔗 API {method} {endpoint}{_format_details(details)}")
