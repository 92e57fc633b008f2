import re
from datetime import datetime, timezone
from typing import Optional, Union

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)

_UNIT_SECONDS = {
    "": 1,
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
}


def now_utc() -> datetime:
    """Get current UTC datetime - always use this for token timestamps"""
    return datetime.now(timezone.utc)


def parse_duration(value: Union[str, int]) -> int:
    """
    Parse a short duration into seconds.

    Accepts bare seconds (``3600``) or a number with a unit suffix:
    ``30s``, ``15m``, ``2h``, ``7d``.
    """
    if isinstance(value, int):
        return value

    match = _DURATION_RE.match(value)
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")

    amount, unit = match.groups()
    return int(amount) * _UNIT_SECONDS[unit.lower()]


def to_iso(value: Optional[Union[datetime, str]]) -> Optional[str]:
    """Format a datetime (or a driver-provided string) for JSON output."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)
