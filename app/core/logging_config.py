"""
Logging configuration.
"""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

from app.core.config import settings

LOG_FILE_NAME = "smart_osh.log"

# RequestLoggingMiddleware already logs every request with its trace id
QUIET_LOGGERS = ("uvicorn.access", "httpx", "openai")


def setup_logging():
    """Configure root logging once: stdout plus a rotating file under LOG_DIR."""
    root = logging.getLogger()
    if getattr(root, "_smart_osh_configured", False):
        return

    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    root.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))
    root.addHandler(console_handler)

    log_dir = Path(settings.LOG_DIR)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5
        )
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        ))
        root.addHandler(file_handler)
    except OSError as e:
        # Read-only filesystems on some hosts: keep stdout logging only
        root.warning(f"File logging disabled, cannot write to {log_dir}: {e}")

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    root._smart_osh_configured = True
