"""Parsing of human-friendly token lifetimes such as ``"1d"`` or ``"16m"``."""

from __future__ import annotations

import re
from datetime import timedelta

from authgate.services._shared.errors import InvalidTTLError

_UNITS: dict[str, timedelta] = {
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
}

_PATTERN = re.compile(r"^\s*(?P<amount>-?\d+)\s*(?P<unit>[smhdw]?)\s*$", re.IGNORECASE)


def parse_duration(value: str | int | timedelta) -> timedelta:
    """
    Convert a lifetime into a positive :class:`~datetime.timedelta`.

    Accepted forms are a ``timedelta``, an integer number of seconds, a string
    of digits (seconds) or digits followed by one of ``s``, ``m``, ``h``,
    ``d``, ``w``.

    :param value: Lifetime to parse.
    :returns: Equivalent positive duration.
    :raises InvalidTTLError: If the value is malformed, zero or negative.
    """
    if isinstance(value, timedelta):
        duration = value
    elif isinstance(value, bool):
        raise InvalidTTLError(f"Invalid token lifetime: {value!r}")
    elif isinstance(value, int):
        duration = timedelta(seconds=value)
    elif isinstance(value, str):
        match = _PATTERN.match(value)
        if match is None:
            raise InvalidTTLError(f"Invalid token lifetime: {value!r}")
        unit = _UNITS[(match["unit"] or "s").lower()]
        duration = unit * int(match["amount"])
    else:
        raise InvalidTTLError(f"Invalid token lifetime: {value!r}")

    if duration <= timedelta(0):
        raise InvalidTTLError(f"Token lifetime must be positive: {value!r}")
    return duration
