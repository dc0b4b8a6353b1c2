"""Compact duration tokens ("500ms", "2s", "1m") used by scripts and runtime."""

from __future__ import annotations

import asyncio
import re

_DURATION_RE = re.compile(r"(?P<digits>\d+)(?P<unit>ms|s|m)?")

_UNIT_FACTORS = {
    "ms": 1,
    "s": 1000,
    "m": 60 * 1000,
}


def parse_timeout(token: str | int) -> int:
    """
    Convert a duration token into milliseconds.

    A bare number, or a number with an unrecognised unit, is read as
    milliseconds.
    """
    if isinstance(token, int):
        return token
    match = _DURATION_RE.search(str(token))
    if match is None:
        raise ValueError(f"Invalid duration: {token!r}")
    return int(match.group("digits")) * _UNIT_FACTORS.get(match.group("unit") or "ms", 1)


async def sleep(token: str | int) -> None:
    await asyncio.sleep(parse_timeout(token) / 1000)
