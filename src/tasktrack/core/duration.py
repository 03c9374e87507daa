"""Duration parsing for configuration values."""

import re
from datetime import timedelta

from tasktrack.core.errors import ConfigurationError

_UNITS = {
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
}

# "ms" must come before "m" so the alternation does not stop early
_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h|d)")
_FULL = re.compile(r"(?:\d+(?:\.\d+)?(?:ms|s|m|h|d))+")

# Longest accepted lifetime, far below the datetime range limit
MAX_DURATION = timedelta(days=3650)


def parse_duration(value: str | timedelta) -> timedelta:
    """
    Parse a duration such as ``24h``, ``1h30m`` or ``90s``.

    Args:
        value: Duration string or an existing timedelta

    Returns:
        The duration as a timedelta

    Raises:
        ConfigurationError: If the value is malformed, not positive or
            longer than ``MAX_DURATION``
    """
    if isinstance(value, timedelta):
        duration = value
    elif isinstance(value, str):
        text = value.strip().lower()
        if not text or not _FULL.fullmatch(text):
            raise ConfigurationError(f"Invalid duration: {value!r}")
        duration = timedelta()
        try:
            for amount, unit in _PART.findall(text):
                duration += _UNITS[unit] * float(amount)
        except OverflowError as e:
            raise ConfigurationError(f"Duration is too long: {value!r}") from e
    else:
        raise ConfigurationError(f"Invalid duration: {value!r}")

    if duration <= timedelta():
        raise ConfigurationError(f"Duration must be positive: {value!r}")
    if duration > MAX_DURATION:
        raise ConfigurationError(f"Duration is too long: {value!r}")

    return duration
