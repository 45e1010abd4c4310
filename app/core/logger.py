import os
import logging
from logging.handlers import TimedRotatingFileHandler

from app.core.config import settings

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str = "app"):
    logger = logging.getLogger(name)
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.DEBUG
    logger.setLevel(level)

    # Console + daily rotating file, attached once per logger name
    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(formatter)
        logger.addHandler(console)

        if settings.LOG_DIR:
            os.makedirs(settings.LOG_DIR, exist_ok=True)
            file_handler = TimedRotatingFileHandler(
                filename=os.path.join(settings.LOG_DIR, f"{name}.log"),
                when="midnight",
                interval=1,
                backupCount=7,
                encoding="utf-8",
            )
            file_handler.suffix = "%Y-%m-%d"
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
