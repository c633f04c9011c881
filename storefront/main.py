"""Storefront client state layer - bootstrap entry point."""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from storefront.buyer.state import Store
from storefront.shared.core.configuration import LoggingConfig, SystemConfig, ValidationLevel, get_config
from storefront.shared.core.event_bus import EventBus

PROJECT_ROOT = Path(__file__).parent.parent.resolve()

logger = logging.getLogger(__name__)

log_level_map = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """Rotating file handler for everything, console for warnings and errors."""
    config = config or LoggingConfig()
    file_log_level = log_level_map.get(config.level.upper(), logging.DEBUG)

    log_file_path = Path(config.log_file)
    if not log_file_path.is_absolute():
        log_file_path = PROJECT_ROOT / log_file_path
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(file_log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(file_log_level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s - %(name)s - %(message)s"))
    root_logger.addHandler(console_handler)

    # Silence noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def bootstrap(config_dir: Optional[Path] = None) -> Store:
    """Load .env and configuration, set up logging and build the stores."""
    load_dotenv(dotenv_path=PROJECT_ROOT / ".env")

    config: SystemConfig = get_config(config_dir or PROJECT_ROOT / "config", ValidationLevel.LENIENT)
    configure_logging(config.logging)

    store = Store.create(EventBus(), config)
    logger.info(
        f"Storefront state ready (storage={config.storage.db_path}, "
        f"cart lines={len(store.cart.items)}, wishlist items={len(store.wishlist.wishlist_items)}, "
        f"authenticated={store.auth.is_authenticated()})"
    )
    return store


def main() -> None:
    store = bootstrap()
    try:
        store.auth.check_expiry()
    finally:
        store.close()


if __name__ == "__main__":
    os.environ.setdefault("LOG_LEVEL", "INFO")
    main()
