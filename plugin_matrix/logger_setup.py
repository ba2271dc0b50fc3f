import logging
import coloredlogs

LOGGER_NAME = "plugin_matrix"
CONSOLE_FORMAT = '%(asctime)s %(name)s %(levelname)s %(message)s'

def setup_global_logger(level: str = 'INFO'):
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # coloredlogs installs its own stream handler on 'logger'; the 'level'
    # argument sets the threshold for that handler only.
    coloredlogs.install(level=level, logger=logger, fmt=CONSOLE_FORMAT)
    return logger

def set_console_level(level: str):
    """Re-installs the console handler at a new threshold (used by --verbose)."""
    return setup_global_logger(level)

# Initialize global logger
logger = setup_global_logger()
