"""
Hex encoding helpers for JSON-RPC quantities and byte strings.

Quantities are minimal big-endian hex (``0x0``, ``0x5b1d``); byte strings
are ``0x``-prefixed hex of the raw bytes.
"""

from __future__ import annotations

from typing import Union

from eth_utils import add_0x_prefix, decode_hex, encode_hex, is_hex, remove_0x_prefix

HexLike = Union[str, bytes, bytearray]


def quantity_to_hex(value: int) -> str:
    """Encode a non-negative integer as a JSON-RPC quantity."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"quantity must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"quantity must be non-negative, got {value}")
    return hex(value)


def hex_to_quantity(value: Union[str, int]) -> int:
    """Decode a JSON-RPC quantity (hex string or int) into an int."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if not isinstance(value, str) or not is_hex(value):
        raise ValueError(f"invalid hex quantity: {value!r}")
    stripped = remove_0x_prefix(value)
    return int(stripped, 16) if stripped else 0


def to_hex_data(value: HexLike) -> str:
    """Normalize bytes or a hex string to ``0x``-prefixed lowercase hex."""
    if isinstance(value, (bytes, bytearray)):
        return encode_hex(bytes(value))
    if not isinstance(value, str) or not is_hex(value):
        raise ValueError(f"invalid hex data: {value!r}")
    return add_0x_prefix(value.lower())


def to_bytes(value: HexLike) -> bytes:
    """Decode bytes or a hex string into raw bytes."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not isinstance(value, str) or not is_hex(value):
        raise ValueError(f"invalid hex data: {value!r}")
    return decode_hex(value)
