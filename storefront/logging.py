import logging
import logging.config
import os

from .core.config import settings


def setup_logging() -> None:
    """Configure logging from the INI file named by LOG_CONFIG."""
    if os.path.exists(settings.LOG_CONFIG):
        logging.config.fileConfig(settings.LOG_CONFIG, disable_existing_loggers=False)
    else:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")


logger = logging.getLogger("storefront")
