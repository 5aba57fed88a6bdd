# src/taskpad/accounts/hashing.py

from __future__ import annotations


def demo_hash(password: str) -> str:
    """
    Deterministic demo password hash. NOT SECURE.

    hash = hash * 31 + code_unit over the UTF-16 code units, wrapped to a
    signed 32-bit integer, rendered as decimal text. Same input gives the same
    output; collisions are possible and tolerated.
    """
    h = 0
    data = password.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return str(h)
