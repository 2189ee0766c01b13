"""
Call-data sealing for confidential transactions.

Each sealed payload uses a fresh X25519 key pair. The symmetric key is
HMAC-SHA256 keyed with ``IOEncryptionKeyV1`` over the X25519 shared secret
with the node's public key, and the payload is Deoxys-II-256-128 without
associated data:

    sealed call data:  user_public_key(32) || nonce(15) || ciphertext+tag(16)
    node response:     nonce(15) || ciphertext+tag(16)

The node derives the same symmetric key from its private key and the
user public key carried in the payload, and encrypts its ``eth_call``
result under it. The private half (the "encryption key") never leaves the
client.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple

from cryptography.hazmat.primitives import hashes, hmac, serialization
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey
from sapphirepy.deoxysii import DeoxysII

from swisstronik.errors import EncryptionError
from swisstronik.utils.encoding import HexLike, to_bytes, to_hex_data
from swisstronik.utils.logging import get_logger

ENCRYPTION_KEY_PREFIX = b"IOEncryptionKeyV1"
KEY_LENGTH = 32
NONCE_LENGTH = 15
TAG_LENGTH = 16

_logger = get_logger(__name__)


def _decode_key(value: HexLike, name: str) -> bytes:
    try:
        raw = to_bytes(value)
    except ValueError as exc:
        raise EncryptionError(f"{name} is not valid hex") from exc
    if len(raw) != KEY_LENGTH:
        raise EncryptionError(
            f"{name} must be {KEY_LENGTH} bytes, got {len(raw)}",
            details={"length": len(raw)},
        )
    return raw


def _seal(key: bytes, nonce: bytes, plaintext: bytes) -> bytes:
    sealed = bytearray(len(plaintext) + TAG_LENGTH)
    DeoxysII(key).encrypt(nonce=nonce, dst=sealed, ad=None, msg=plaintext)
    return bytes(sealed)


def _open(key: bytes, nonce: bytes, ciphertext: bytes) -> Optional[bytes]:
    plaintext = bytearray(len(ciphertext) - TAG_LENGTH)
    if not DeoxysII(key).decrypt(nonce=nonce, dst=plaintext, ad=None, ciphertext=ciphertext):
        return None
    return bytes(plaintext)


def public_key_from_private(private_key: bytes) -> bytes:
    """Raw X25519 public key for a raw private key."""
    return (
        X25519PrivateKey.from_private_bytes(private_key)
        .public_key()
        .public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
    )


def derive_shared_key(private_key: bytes, peer_public_key: bytes) -> bytes:
    """
    Derive the Deoxys-II key shared between two X25519 parties.

    Args:
        private_key: Own raw 32-byte X25519 private key
        peer_public_key: Peer raw 32-byte X25519 public key

    Returns:
        32-byte symmetric key, HMAC-SHA256(IOEncryptionKeyV1, shared secret)
    """
    shared_secret = X25519PrivateKey.from_private_bytes(private_key).exchange(
        X25519PublicKey.from_public_bytes(peer_public_key)
    )
    mac = hmac.HMAC(ENCRYPTION_KEY_PREFIX, hashes.SHA256())
    mac.update(shared_secret)
    return mac.finalize()


def encrypt_data_field(
    node_public_key: HexLike,
    data: HexLike,
    encryption_key: Optional[bytes] = None,
) -> Tuple[str, bytes]:
    """
    Seal call data for the node.

    Args:
        node_public_key: Node X25519 public key
        data: Plaintext call data
        encryption_key: Private key to use; a fresh one is generated if None

    Returns:
        Tuple of (sealed data as 0x hex, encryption key)
    """
    node_key = _decode_key(node_public_key, "node public key")
    encryption_key = encryption_key or os.urandom(KEY_LENGTH)
    user_public_key = public_key_from_private(encryption_key)

    nonce = os.urandom(NONCE_LENGTH)
    ciphertext = _seal(derive_shared_key(encryption_key, node_key), nonce, to_bytes(data))
    return to_hex_data(user_public_key + nonce + ciphertext), encryption_key


def decrypt_node_response(
    node_public_key: HexLike,
    response: HexLike,
    encryption_key: bytes,
) -> bytes:
    """
    Open a node response sealed under the key pair used for the request.

    An empty response decrypts to empty bytes.

    Raises:
        EncryptionError: If the response is truncated or fails authentication
    """
    node_key = _decode_key(node_public_key, "node public key")
    payload = to_bytes(response)
    if not payload:
        return b""
    if len(payload) < NONCE_LENGTH + TAG_LENGTH:
        raise EncryptionError(
            "Encrypted response is too short",
            details={"length": len(payload)},
        )

    nonce, ciphertext = payload[:NONCE_LENGTH], payload[NONCE_LENGTH:]
    plaintext = _open(derive_shared_key(encryption_key, node_key), nonce, ciphertext)
    if plaintext is None:
        raise EncryptionError("Decryption failed: authentication failed or corrupted data")
    return plaintext

@dataclass(frozen=True)
class NodeKeyMaterial:
    """Node public key as published by the RPC endpoint."""

    public_key: str


@dataclass(frozen=True)
class EncryptionEnvelope:
    """Sealed call data plus the key needed to open the matching response."""

    ciphertext: str
    encryption_key: bytes

    def __repr__(self) -> str:
        return f"EncryptionEnvelope(ciphertext={self.ciphertext[:18]}..., encryption_key=<redacted>)"


class EncryptionGateway:
    """
    Seals outgoing call data and unseals node responses.

    The node public key is fetched on every ``get_node_public_key`` call;
    nothing is cached.

    Example:
        ```python
        gateway = EncryptionGateway(client.get_node_public_key)
        key = await gateway.get_node_public_key()
        envelope = gateway.seal(key, "0x61bc221a")
        ```
    """

    def __init__(self, fetch_public_key: Callable[[], Awaitable[str]]) -> None:
        self._fetch_public_key = fetch_public_key

    async def get_node_public_key(self) -> NodeKeyMaterial:
        public_key = await self._fetch_public_key()
        _decode_key(public_key, "node public key")
        _logger.debug("Fetched node public key")
        return NodeKeyMaterial(public_key=to_hex_data(public_key))

    def seal(self, node_key: NodeKeyMaterial, plaintext: HexLike) -> EncryptionEnvelope:
        ciphertext, encryption_key = encrypt_data_field(node_key.public_key, plaintext)
        return EncryptionEnvelope(ciphertext=ciphertext, encryption_key=encryption_key)

    def unseal(
        self,
        node_key: NodeKeyMaterial,
        ciphertext: HexLike,
        encryption_key: bytes,
    ) -> bytes:
        return decrypt_node_response(node_key.public_key, ciphertext, encryption_key)
