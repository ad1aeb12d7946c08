import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_LEVEL_ENV = "TENSORMETA_LOG_LEVEL"


def _resolve_level(name: str) -> int:
    # Library modules log at debug only, so WARNING keeps them silent;
    # the CLI reports progress at INFO.
    default_level = logging.INFO if name.endswith(".cli") else logging.WARNING

    level_name = os.getenv(LOG_LEVEL_ENV)
    if not level_name:
        return default_level
    level = logging.getLevelName(level_name.upper())
    return level if isinstance(level, int) else default_level


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a tensormeta module, with a single stream handler attached.

    The level comes from TENSORMETA_LOG_LEVEL when it names a valid level.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(_resolve_level(name))
    return logger
