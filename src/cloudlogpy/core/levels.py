"""Logging levels and their Cloud Logging severities.

Levels are plain integers compatible with the standard library ``logging``
module.  Any unnamed level maps to the next-higher severity; for example
every level in the half-open interval (LEVEL_WARN, LEVEL_ERROR] maps to
ERROR.

See https://cloud.google.com/logging/docs/reference/v2/rest/v2/LogEntry#logseverity
"""

import logging

LEVEL_DEBUG = logging.DEBUG
LEVEL_INFO = logging.INFO
LEVEL_WARN = logging.WARNING
LEVEL_ERROR = logging.ERROR

# Spacing between the severities above ERROR.
_STEP = 10

LEVEL_NOTICE = (LEVEL_INFO + LEVEL_WARN) // 2
LEVEL_CRITICAL = LEVEL_ERROR + _STEP
LEVEL_ALERT = LEVEL_ERROR + 2 * _STEP
LEVEL_EMERGENCY = LEVEL_ERROR + 3 * _STEP

# Ascending thresholds; the first one that is >= the level wins.
_THRESHOLDS = (
    (LEVEL_DEBUG, "DEBUG"),
    (LEVEL_INFO, "INFO"),
    (LEVEL_NOTICE, "NOTICE"),
    (LEVEL_WARN, "WARNING"),
    (LEVEL_ERROR, "ERROR"),
    (LEVEL_CRITICAL, "CRITICAL"),
    (LEVEL_ALERT, "ALERT"),
)

logging.addLevelName(LEVEL_NOTICE, "NOTICE")
logging.addLevelName(LEVEL_ALERT, "ALERT")
logging.addLevelName(LEVEL_EMERGENCY, "EMERGENCY")


def severity_for_level(level: int) -> str:
    """Return the Cloud Logging severity name for a numeric level."""
    for threshold, severity in _THRESHOLDS:
        if level <= threshold:
            return severity
    return "EMERGENCY"


def parse_level(value: int | str) -> int:
    """Resolve a level given as an integer or a level name.

    Names are case-insensitive and include ``WARN`` as well as the extra
    names registered by this module.

    Raises:
        ValueError: If the name is unknown.
        TypeError: If the value is neither an int nor a str.
    """
    if isinstance(value, bool):
        raise TypeError(f"invalid logging level: {value!r}")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise TypeError(f"invalid logging level: {value!r}")
    levels = logging.getLevelNamesMapping()
    name = value.strip().upper()
    if name not in levels:
        raise ValueError(f"unknown logging level: {value!r}")
    return levels[name]
