"""Runtime configuration for stream-inspector.

Settings are read from environment variables on every call so tests and
long-running hosts can change them without reloading the package.
"""

import logging
import os

logger = logging.getLogger(__name__)

# Environment variable names
MAX_DEPTH_ENV_VAR = "STREAM_INSPECTOR_MAX_DEPTH"
SNIFF_LENGTH_ENV_VAR = "STREAM_INSPECTOR_SNIFF_LENGTH"
LOG_LEVEL_ENV_VAR = "STREAM_INSPECTOR_LOG_LEVEL"

DEFAULT_MAX_DEPTH = 256
DEFAULT_SNIFF_LENGTH = 200
DEFAULT_LOG_LEVEL = "INFO"


def _get_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid integer for %s: %r, using default %d", name, raw, default)
        return default


def get_max_depth() -> int | None:
    """Get the deep-field traversal bound from STREAM_INSPECTOR_MAX_DEPTH.

    Default: 256. Zero or a negative value disables the bound.

    Returns:
        Maximum nesting depth to traverse, or None for unbounded
    """
    depth = _get_int(MAX_DEPTH_ENV_VAR, DEFAULT_MAX_DEPTH)
    return depth if depth > 0 else None


def get_sniff_length() -> int:
    """Get how many leading characters the classifier inspects.

    Returns:
        Sample length (default 200, never below 1)
    """
    return max(1, _get_int(SNIFF_LENGTH_ENV_VAR, DEFAULT_SNIFF_LENGTH))


def get_log_level() -> int:
    """Get the log level from STREAM_INSPECTOR_LOG_LEVEL.

    Accepts level names (``DEBUG``, ``info``...). Unknown names fall back to INFO.

    Returns:
        Numeric logging level
    """
    name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        logger.warning("Unknown log level %r, using %s", name, DEFAULT_LOG_LEVEL)
        return logging.INFO
    return level
