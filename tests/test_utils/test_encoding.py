"""
Tests for hex encoding helpers.
"""

import pytest

from swisstronik.utils.encoding import hex_to_quantity, quantity_to_hex, to_bytes, to_hex_data


class TestQuantities:
    """JSON-RPC quantity encoding."""

    @pytest.mark.parametrize(
        "value, encoded",
        [(0, "0x0"), (23325, "0x5b1d"), (1291, "0x50b"), (10**18, "0xde0b6b3a7640000")],
    )
    def test_encode(self, value: int, encoded: str) -> None:
        assert quantity_to_hex(value) == encoded
        assert hex_to_quantity(encoded) == value

    def test_empty_hex_is_zero(self) -> None:
        assert hex_to_quantity("0x") == 0

    def test_int_passes_through(self) -> None:
        assert hex_to_quantity(5) == 5

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            quantity_to_hex(-1)

    def test_bool_rejected(self) -> None:
        with pytest.raises(TypeError):
            quantity_to_hex(True)

    def test_garbage_rejected(self) -> None:
        with pytest.raises(ValueError, match="invalid hex quantity"):
            hex_to_quantity("twelve")


class TestData:
    """Byte string encoding."""

    def test_bytes_to_hex(self) -> None:
        assert to_hex_data(b"\x61\xbc\x22\x1a") == "0x61bc221a"

    def test_hex_is_normalized(self) -> None:
        assert to_hex_data("61BC221A") == "0x61bc221a"

    def test_to_bytes(self) -> None:
        assert to_bytes("0x61bc221a") == b"\x61\xbc\x22\x1a"
        assert to_bytes(bytearray(b"\x01")) == b"\x01"

    def test_invalid_data(self) -> None:
        with pytest.raises(ValueError, match="invalid hex data"):
            to_hex_data("0xzz")
