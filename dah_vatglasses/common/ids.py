"""Identifier helpers."""

from __future__ import annotations

import random

from dah_vatglasses.common.time_utils import epoch_millis, utc_now

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    if value < 0:
        return "-" + to_base36(-value)
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_id(prefix: str) -> str:
    """Return ``<PREFIX>_<base36 ms timestamp>_<5 base36 random chars>`` in upper case."""
    timestamp = to_base36(epoch_millis())
    suffix = "".join(random.choice(_BASE36) for _ in range(5))
    return f"{prefix}_{timestamp}_{suffix}".upper()


def generate_run_id() -> str:
    return utc_now().strftime("run-%Y%m%dT%H%M%S%fZ")
