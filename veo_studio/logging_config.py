import copy
import logging
import logging.config
from typing import Dict, Optional

from veo_studio.config import settings


LOGGING_CONFIG: Dict = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "level": "DEBUG",
        }
    },
    "root": {
        "handlers": ["console"],
        "level": "INFO",
    },
}


def configure_logging(level: Optional[str] = None) -> None:
    config = copy.deepcopy(LOGGING_CONFIG)
    config["root"]["level"] = (level or settings.log_level).upper()
    logging.config.dictConfig(config)
