"""
Tests for call-data sealing.

Tests cover:
- Shared key derivation symmetry
- Sealed payload layout and round-trip
- Response decryption, empty responses and tampering
- EncryptionGateway key fetching
"""

import hashlib
import hmac
from unittest.mock import AsyncMock

import pytest
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey

from swisstronik.crypto import (
    ENCRYPTION_KEY_PREFIX,
    KEY_LENGTH,
    NONCE_LENGTH,
    TAG_LENGTH,
    EncryptionGateway,
    NodeKeyMaterial,
    decrypt_node_response,
    derive_shared_key,
    encrypt_data_field,
    public_key_from_private,
)
from swisstronik.errors import EncryptionError
from swisstronik.utils.encoding import to_bytes, to_hex_data

from .conftest import COUNTER_SELECTOR, NONCE_SIZE, TAG_SIZE, USER_KEY_SIZE, FakeNode


# =============================================================================
# Key Derivation Tests
# =============================================================================


class TestDeriveSharedKey:
    """Tests for derive_shared_key."""

    def test_both_sides_derive_same_key(self) -> None:
        """Client and node derive the same symmetric key."""
        client_private = bytes([7]) * 32
        node_private = bytes([9]) * 32

        client_side = derive_shared_key(client_private, public_key_from_private(node_private))
        node_side = derive_shared_key(node_private, public_key_from_private(client_private))

        assert client_side == node_side
        assert len(client_side) == KEY_LENGTH

    def test_different_peers_give_different_keys(self) -> None:
        own = bytes([7]) * 32
        first = derive_shared_key(own, public_key_from_private(bytes([1]) * 32))
        second = derive_shared_key(own, public_key_from_private(bytes([2]) * 32))
        assert first != second

    def test_key_is_hmac_sha256_of_shared_secret(self) -> None:
        """Symmetric key is HMAC-SHA256 keyed with IOEncryptionKeyV1 over the X25519 secret."""
        own = bytes([7]) * 32
        peer = public_key_from_private(bytes([9]) * 32)
        secret = X25519PrivateKey.from_private_bytes(own).exchange(X25519PublicKey.from_public_bytes(peer))

        expected = hmac.new(b"IOEncryptionKeyV1", secret, hashlib.sha256).digest()

        assert ENCRYPTION_KEY_PREFIX == b"IOEncryptionKeyV1"
        assert derive_shared_key(own, peer) == expected
        assert derive_shared_key(own, peer) != secret


# =============================================================================
# Sealing Tests
# =============================================================================


class TestEncryptDataField:
    """Tests for encrypt_data_field / decrypt_node_response."""

    def test_sealed_data_differs_from_plaintext(self) -> None:
        node = FakeNode()
        sealed, _ = encrypt_data_field(node.public_key, COUNTER_SELECTOR)

        assert sealed != COUNTER_SELECTOR
        assert sealed.startswith("0x")
        assert len(sealed) > len(COUNTER_SELECTOR)

    def test_sealed_layout(self) -> None:
        """user_public_key || nonce || ciphertext+tag"""
        node = FakeNode()
        plaintext = to_bytes(COUNTER_SELECTOR)
        sealed, key = encrypt_data_field(node.public_key, plaintext)

        raw = to_bytes(sealed)
        assert len(raw) == KEY_LENGTH + NONCE_LENGTH + len(plaintext) + TAG_LENGTH
        assert raw[:KEY_LENGTH] == public_key_from_private(key)

    def test_wire_sizes_match_node(self) -> None:
        """32-byte user key, 15-byte Deoxys-II nonce, 16-byte tag."""
        assert (KEY_LENGTH, NONCE_LENGTH, TAG_LENGTH) == (USER_KEY_SIZE, NONCE_SIZE, TAG_SIZE) == (32, 15, 16)

    def test_explicit_key_gives_known_public_prefix(self) -> None:
        node = FakeNode()
        key = bytes([5]) * 32
        sealed, _ = encrypt_data_field(node.public_key, COUNTER_SELECTOR, encryption_key=key)

        raw = to_bytes(sealed)
        expected_public = X25519PrivateKey.from_private_bytes(key).public_key().public_bytes_raw()
        assert raw[:USER_KEY_SIZE] == expected_public
        assert node.shared_key(expected_public) == derive_shared_key(key, to_bytes(node.public_key))

    def test_node_can_open_sealed_data(self) -> None:
        node = FakeNode()
        sealed, _ = encrypt_data_field(node.public_key, COUNTER_SELECTOR)

        plaintext, _ = node.open(sealed)

        assert to_hex_data(plaintext) == COUNTER_SELECTOR

    def test_fresh_key_per_seal(self) -> None:
        node = FakeNode()
        first, first_key = encrypt_data_field(node.public_key, COUNTER_SELECTOR)
        second, second_key = encrypt_data_field(node.public_key, COUNTER_SELECTOR)

        assert first != second
        assert first_key != second_key

    def test_explicit_key_is_used(self) -> None:
        node = FakeNode()
        key = bytes([5]) * 32
        _, used = encrypt_data_field(node.public_key, COUNTER_SELECTOR, encryption_key=key)
        assert used == key

    def test_rejects_short_public_key(self) -> None:
        with pytest.raises(EncryptionError, match="32 bytes"):
            encrypt_data_field("0x1234", COUNTER_SELECTOR)

    def test_rejects_non_hex_public_key(self) -> None:
        with pytest.raises(EncryptionError, match="not valid hex"):
            encrypt_data_field("0xzz", COUNTER_SELECTOR)


class TestDecryptNodeResponse:
    """Tests for decrypt_node_response."""

    def _sealed_response(self, node: FakeNode, sealed_request: str, result: str) -> str:
        node.call_result = result
        return node._answer_call({"to": "0x" + "00" * 20, "data": sealed_request})

    def test_round_trip(self) -> None:
        node = FakeNode()
        sealed, key = encrypt_data_field(node.public_key, COUNTER_SELECTOR)
        response = self._sealed_response(node, sealed, "0x" + "00" * 30 + "050b")

        plaintext = decrypt_node_response(node.public_key, response, key)

        assert to_hex_data(plaintext) == "0x" + "00" * 30 + "050b"

    def test_empty_response(self) -> None:
        node = FakeNode()
        assert decrypt_node_response(node.public_key, "0x", bytes([1]) * 32) == b""

    def test_truncated_response(self) -> None:
        node = FakeNode()
        with pytest.raises(EncryptionError, match="too short"):
            decrypt_node_response(node.public_key, "0x" + "00" * NONCE_LENGTH, bytes([1]) * 32)

    def test_response_shorter_than_nonce_and_tag(self) -> None:
        node = FakeNode()
        payload = "0x" + "00" * (NONCE_SIZE + TAG_SIZE - 1)
        with pytest.raises(EncryptionError, match="too short"):
            decrypt_node_response(node.public_key, payload, bytes([1]) * 32)

    def test_tag_only_response_decrypts_to_empty(self) -> None:
        node = FakeNode()
        sealed, key = encrypt_data_field(node.public_key, COUNTER_SELECTOR)
        response = self._sealed_response(node, sealed, "0x")

        assert len(to_bytes(response)) == NONCE_SIZE + TAG_SIZE
        assert decrypt_node_response(node.public_key, response, key) == b""

    def test_wrong_key_fails_authentication(self) -> None:
        node = FakeNode()
        sealed, _ = encrypt_data_field(node.public_key, COUNTER_SELECTOR)
        response = self._sealed_response(node, sealed, "0x01")

        with pytest.raises(EncryptionError, match="authentication failed"):
            decrypt_node_response(node.public_key, response, bytes([3]) * 32)

    def test_tampered_response_fails(self) -> None:
        node = FakeNode()
        sealed, key = encrypt_data_field(node.public_key, COUNTER_SELECTOR)
        response = bytearray(to_bytes(self._sealed_response(node, sealed, "0x01")))
        response[-1] ^= 0xFF

        with pytest.raises(EncryptionError):
            decrypt_node_response(node.public_key, bytes(response), key)


# =============================================================================
# Gateway Tests
# =============================================================================


class TestEncryptionGateway:
    """Tests for EncryptionGateway."""

    @pytest.mark.asyncio
    async def test_fetches_key_every_time(self) -> None:
        node = FakeNode()
        fetch = AsyncMock(return_value=node.public_key)
        gateway = EncryptionGateway(fetch)

        first = await gateway.get_node_public_key()
        second = await gateway.get_node_public_key()

        assert first == second == NodeKeyMaterial(public_key=node.public_key)
        assert fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_rejects_malformed_key(self) -> None:
        gateway = EncryptionGateway(AsyncMock(return_value="0xdead"))
        with pytest.raises(EncryptionError):
            await gateway.get_node_public_key()

    def test_seal_and_unseal(self) -> None:
        node = FakeNode()
        gateway = EncryptionGateway(AsyncMock(return_value=node.public_key))
        key = NodeKeyMaterial(public_key=node.public_key)

        envelope = gateway.seal(key, COUNTER_SELECTOR)
        response = node._answer_call({"to": "0x" + "00" * 20, "data": envelope.ciphertext})

        assert to_hex_data(gateway.unseal(key, response, envelope.encryption_key)) == node.call_result

    def test_envelope_repr_hides_key(self) -> None:
        node = FakeNode()
        gateway = EncryptionGateway(AsyncMock(return_value=node.public_key))
        envelope = gateway.seal(NodeKeyMaterial(public_key=node.public_key), COUNTER_SELECTOR)

        assert envelope.encryption_key.hex() not in repr(envelope)
        assert "redacted" in repr(envelope)
