"""
Booking relay entry point.

Run with ``uvicorn booking_relay.main:app`` or ``python run.py``. Startup
fails with exit status 1 when the Razorpay credentials are missing.
"""
import logging
import sys
from pathlib import Path

import uvicorn
from fastapi import FastAPI

from .config import Settings, get_settings
from .errors import ConfigurationError
from .server import create_app


def setup_logging(settings: Settings) -> logging.Logger:
    """Configure logging with file and console handlers."""
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    # Console handler (always)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler (if configured)
    if settings.LOG_PATH:
        try:
            log_path = Path(settings.LOG_PATH)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            root_logger.info("Logging to file: %s", log_path)
        except OSError as e:
            root_logger.error("Failed to set up file logging: %s", e)

    return logging.getLogger(__name__)


settings = get_settings()
logger = setup_logging(settings)


def build_app() -> FastAPI:
    """Create the production app or exit if the gateway is not configured."""
    try:
        return create_app(settings)
    except ConfigurationError as e:
        for error in e.errors:
            logger.error("Configuration error: %s", error)
        logger.error("RAZORPAY_KEY_ID or RAZORPAY_SECRET is missing, refusing to start")
        sys.exit(1)


app = build_app()


def main():
    logger.info("Server will be available at: http://%s:%s", settings.HOST, settings.PORT)
    uvicorn.run(
        "booking_relay.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info" if not settings.DEBUG else "debug",
    )


if __name__ == "__main__":
    main()
