"""
Call-data encryption for Swisstronik confidential transactions.
"""

from swisstronik.crypto.encryption import (
    ENCRYPTION_KEY_PREFIX,
    KEY_LENGTH,
    NONCE_LENGTH,
    TAG_LENGTH,
    EncryptionEnvelope,
    EncryptionGateway,
    NodeKeyMaterial,
    decrypt_node_response,
    derive_shared_key,
    encrypt_data_field,
    public_key_from_private,
)

__all__ = [
    "ENCRYPTION_KEY_PREFIX",
    "KEY_LENGTH",
    "NONCE_LENGTH",
    "TAG_LENGTH",
    "EncryptionEnvelope",
    "EncryptionGateway",
    "NodeKeyMaterial",
    "decrypt_node_response",
    "derive_shared_key",
    "encrypt_data_field",
    "public_key_from_private",
]
