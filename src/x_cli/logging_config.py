"""Configure logging for the x-cli command.

Results and errors reach the user through ``click.echo``; the ``x_cli``
logger only carries diagnostics, so it stays at WARNING unless ``-v`` is
given.
"""

import logging
import sys

LOGGER_NAME = "x_cli"
TRANSPORT_LOGGERS = ("httpx", "httpcore")

DEBUG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
QUIET_FORMAT = "x-cli: %(levelname)s: %(message)s"


def setup_logging(debug: bool = False) -> logging.Logger:
    if debug:
        level = logging.DEBUG
        formatter = logging.Formatter(DEBUG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    else:
        level = logging.WARNING
        formatter = logging.Formatter(QUIET_FORMAT)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    # Repeated CLI invocations in one process (tests) must not stack handlers
    logger.handlers.clear()
    logger.addHandler(handler)

    # httpx logs every request at INFO; show those only with -v
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(level)

    return logger
