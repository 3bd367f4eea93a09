"""Nibble helpers shared by the instruction decoder and the machine."""

from __future__ import annotations

from collections.abc import Iterable

NIBBLE_MAX = 15
BYTE_MAX = 255


def check_nibble(num: int) -> int:
    """Return ``num`` unchanged if it is a nibble (0..15), else raise ValueError."""
    if not 0 <= num <= NIBBLE_MAX:
        raise ValueError(
            f"nibble must satisfy 0 <= nibble <= 15. Actual value = {num}"
        )
    return num


def byte_to_nibbles(b: int) -> tuple[int, int]:
    """Split a byte into its high and low nibbles."""
    if not 0 <= b <= BYTE_MAX:
        raise ValueError(f"byte must satisfy 0 <= byte <= 255. Actual value = {b}")
    return divmod(b, 16)


def mk_un(nibbles: Iterable[int]) -> int:
    """Combine nibbles, most significant first, into one unsigned number."""
    result = 0
    for nibble in nibbles:
        result = result * 16 + nibble
    return result