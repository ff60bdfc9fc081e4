"""Duration parsing for ``scan_interval``.

Accepts short unit strings ("30m", "1h", "1h30m") and ISO-8601 durations
("PT30M", "PT1H", "P1D").
"""

import re

UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}

_SHORT_PART = re.compile(r"(\d+)([smhd])")
_SHORT_FULL = re.compile(r"^(?:\d+[smhd])+$")
_ISO_PATTERN = re.compile(r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?$")


class DurationParseError(ValueError):
    """Raised when a duration string cannot be parsed or is out of range."""


def parse_duration(value: str) -> int:
    """Parse a duration string to whole seconds.

    Raises:
        DurationParseError: If the string is empty, malformed, or zero

    Examples:
        >>> parse_duration("1h30m")
        5400
        >>> parse_duration("PT15M")
        900
    """
    text = re.sub(r"\s+", "", value or "").lower()
    if not text:
        raise DurationParseError("Duration string cannot be empty")

    if text.startswith("p"):
        seconds = _parse_iso(text.upper(), value)
    elif _SHORT_FULL.match(text):
        seconds = sum(int(num) * UNIT_SECONDS[unit] for num, unit in _SHORT_PART.findall(text))
    else:
        raise DurationParseError(
            f"Invalid duration format: '{value}'. "
            "Expected something like '30m', '1h', '1h30m' or 'PT1H'"
        )

    if seconds == 0:
        raise DurationParseError(f"Duration cannot be zero: '{value}'")
    return seconds


def _parse_iso(text: str, original: str) -> int:
    match = _ISO_PATTERN.match(text)
    if not match or text in ("P", "PT") or text.endswith("T"):
        raise DurationParseError(
            f"Invalid ISO-8601 duration format: '{original}'. Expected e.g. 'PT1H' or 'P1D'"
        )

    days, hours, minutes, seconds = (int(group or 0) for group in match.groups())
    return days * 86400 + hours * 3600 + minutes * 60 + seconds


def validate_duration_range(seconds: int, min_seconds: int = 300, max_seconds: int = 86400) -> None:
    """Raise DurationParseError unless ``min_seconds <= seconds <= max_seconds``."""
    if seconds < min_seconds:
        raise DurationParseError(
            f"Scan interval too short: {format_seconds(seconds)}. Minimum is {format_seconds(min_seconds)}."
        )
    if seconds > max_seconds:
        raise DurationParseError(
            f"Scan interval too long: {format_seconds(seconds)}. Maximum is {format_seconds(max_seconds)}."
        )


def format_seconds(seconds: int) -> str:
    """Render a duration with its largest whole unit, e.g. '5 minutes'."""
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}{'s' if count != 1 else ''}"
    return f"{seconds} second{'s' if seconds != 1 else ''}"
