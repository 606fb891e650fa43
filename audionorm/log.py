"""Minimal logging setup for audionorm, stdlib only."""

import logging
import os

LOG_FORMAT = '%(asctime)s %(levelname)-8s %(name)s - %(message)s'


def level_from_flags(verbose=False, quiet=False):
    """Map the CLI verbosity flags to a level name; verbose wins over quiet."""
    if verbose:
        return 'DEBUG'
    if quiet:
        return 'ERROR'
    return 'INFO'


def setup_logging(level='INFO', log_file=None):
    """Configure the 'audionorm' root logger with console and optional file output.

    Safe to call more than once: handlers are only added the first time a
    given destination is requested, later calls just change the level.
    """
    logger = logging.getLogger('audionorm')
    fmt = logging.Formatter(LOG_FORMAT)

    has_console = any(
        type(h) is logging.StreamHandler for h in logger.handlers
    )
    if not has_console:
        ch = logging.StreamHandler()
        ch.setFormatter(fmt)
        logger.addHandler(ch)

    if log_file:
        target = os.path.abspath(str(log_file))
        has_file = any(
            isinstance(h, logging.FileHandler) and h.baseFilename == target
            for h in logger.handlers
        )
        if not has_file:
            fh = logging.FileHandler(target)
            fh.setFormatter(fmt)
            logger.addHandler(fh)

    logger.setLevel(level.upper())
    return logger


def get_logger(name):
    """Return a child logger under the 'audionorm' namespace."""
    return logging.getLogger(f'audionorm.{name}')
