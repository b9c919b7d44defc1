"""Logging utilities for lit-ipfs.

lit-ipfs is used as a library as well as through its CLI, so the package
logger gets a no-op handler and only the CLI installs real output. Modules
log through logging.getLogger(__name__).

The LITIPFS_LOG environment variable (a level name such as DEBUG) overrides
the level the CLI asks for.
"""

import logging
import os
import sys

getLogger = logging.getLogger

LOG_ENV_VAR = 'LITIPFS_LOG'

_LITIPFS_LOGGER = getLogger('litipfs')
_LITIPFS_LOGGER.addHandler(logging.NullHandler())


def _level_from_env():
    value = os.environ.get(LOG_ENV_VAR, '').strip()
    if not value:
        return None
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else None


def default_logging_config(level: int = logging.WARNING) -> None:
    """Send lit-ipfs log records to stderr at `level`, unless LITIPFS_LOG says otherwise."""
    env_level = _level_from_env()
    if env_level is not None:
        level = env_level

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(levelname)s %(name)s: %(message)s'))

    for existing in list(_LITIPFS_LOGGER.handlers):
        if not isinstance(existing, logging.NullHandler):
            _LITIPFS_LOGGER.removeHandler(existing)
    _LITIPFS_LOGGER.addHandler(handler)
    _LITIPFS_LOGGER.setLevel(level)
