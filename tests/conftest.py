"""
Shared fixtures: an in-memory Swisstronik node and test accounts.
"""

import hashlib
import hmac
import os
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey
from eth_account import Account as EthAccount
from eth_keys import keys
from eth_utils import to_checksum_address
from sapphirepy.deoxysii import DeoxysII

from swisstronik.client import SwisstronikClient
from swisstronik.config import SWISSTRONIK_TESTNET
from swisstronik.types import AuthorizationEntry
from swisstronik.utils.encoding import to_bytes, to_hex_data


# =============================================================================
# Test Constants
# =============================================================================

TEST_PRIVATE_KEY = "0x" + "11" * 32
AUTHORITY_PRIVATE_KEY = "0x" + "22" * 32

SENDER = EthAccount.from_key(TEST_PRIVATE_KEY).address
AUTHORITY = EthAccount.from_key(AUTHORITY_PRIVATE_KEY).address

COUNTER_CONTRACT = to_checksum_address("0xf8beb8c8be514772097103e39c2cce057117cc92")
RECIPIENT = to_checksum_address("0x0497cc339c0397b7addd591b2160dd2f5371ea3b")
DELEGATE_CONTRACT = to_checksum_address("0x" + "de" * 20)
OTHER_DELEGATE_CONTRACT = to_checksum_address("0x" + "ad" * 20)

COUNTER_SELECTOR = "0x61bc221a"
COUNTER_RESULT = "0x" + "00" * 30 + "050b"

CHAIN_ID = 1291
BASE_FEE = 1_000_000_000
PRIORITY_FEE = 1_500_000_000
GAS_PRICE = 20_000_000_000
GAS_ESTIMATE = 23325
PENDING_NONCE = 5
BALANCE = 10**18

LONDON_BLOCK: Dict[str, Any] = {
    "number": "0x10",
    "hash": "0x" + "ab" * 32,
    "timestamp": "0x6553f100",
    "gasLimit": "0x1c9c380",
    "gasUsed": "0x0",
    "baseFeePerGas": hex(BASE_FEE),
}

PRE_LONDON_BLOCK: Dict[str, Any] = {
    key: value for key, value in LONDON_BLOCK.items() if key != "baseFeePerGas"
}

# Node-side sealing layout
USER_KEY_SIZE = 32
NONCE_SIZE = 15
TAG_SIZE = 16


# =============================================================================
# Fake node
# =============================================================================


class FakeNode:
    """
    Transport double answering JSON-RPC like a Swisstronik node.

    Holds an X25519 key pair: sealed ``eth_call`` data is opened with it
    and the result is sealed back under the caller's key.
    """

    def __init__(self) -> None:
        self.private_key = bytes(range(1, 33))
        self.public_key = to_hex_data(
            X25519PrivateKey.from_private_bytes(self.private_key)
            .public_key()
            .public_bytes(serialization.Encoding.Raw, serialization.PublicFormat.Raw)
        )
        self.calls: List[Tuple[str, list]] = []
        self.block: Optional[Dict[str, Any]] = dict(LONDON_BLOCK)
        self.call_result = COUNTER_RESULT
        self.opened_plaintexts: List[bytes] = []
        self.failures: Dict[str, Exception] = {}
        self.estimate_gas_handler: Optional[Callable[[list], str]] = None
        self.responses: Dict[str, Any] = {
            "eth_chainId": hex(CHAIN_ID),
            "eth_gasPrice": hex(GAS_PRICE),
            "eth_maxPriorityFeePerGas": hex(PRIORITY_FEE),
            "eth_estimateGas": hex(GAS_ESTIMATE),
            "eth_getTransactionCount": hex(PENDING_NONCE),
            "eth_getBalance": hex(BALANCE),
            "eth_sendTransaction": "0x" + "aa" * 32,
            "eth_sendRawTransaction": "0x" + "bb" * 32,
        }

    async def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        params = list(params or [])
        self.calls.append((method, params))
        if method in self.failures:
            raise self.failures[method]
        if method == "eth_getNodePublicKey":
            return self.public_key
        if method == "eth_getBlockByNumber":
            return self.block
        if method == "eth_call":
            return self._answer_call(params[0])
        if method == "eth_estimateGas" and self.estimate_gas_handler is not None:
            return self.estimate_gas_handler(params)
        return self.responses[method]

    def shared_key(self, user_public_key: bytes) -> bytes:
        secret = X25519PrivateKey.from_private_bytes(self.private_key).exchange(
            X25519PublicKey.from_public_bytes(user_public_key)
        )
        return hmac.new(b"IOEncryptionKeyV1", secret, hashlib.sha256).digest()

    def open(self, sealed: str) -> Tuple[bytes, bytes]:
        """Decrypt sealed call data; returns (plaintext, shared key)."""
        raw = to_bytes(sealed)
        user_public_key = raw[:USER_KEY_SIZE]
        nonce = raw[USER_KEY_SIZE:USER_KEY_SIZE + NONCE_SIZE]
        ciphertext = raw[USER_KEY_SIZE + NONCE_SIZE:]
        key = self.shared_key(user_public_key)
        plaintext = bytearray(len(ciphertext) - TAG_SIZE)
        if not DeoxysII(key).decrypt(nonce=nonce, dst=plaintext, ad=None, ciphertext=ciphertext):
            raise ValueError("sealed call data failed authentication")
        return bytes(plaintext), key

    def _answer_call(self, request: Dict[str, Any]) -> str:
        if not (request.get("to") and request.get("data")):
            return self.call_result
        plaintext, key = self.open(request["data"])
        self.opened_plaintexts.append(plaintext)
        result = to_bytes(self.call_result)
        nonce = os.urandom(NONCE_SIZE)
        sealed = bytearray(len(result) + TAG_SIZE)
        DeoxysII(key).encrypt(nonce=nonce, dst=sealed, ad=None, msg=result)
        return to_hex_data(nonce + bytes(sealed))

    def methods(self) -> List[str]:
        return [method for method, _ in self.calls]

    def params_of(self, method: str) -> List[list]:
        return [params for called, params in self.calls if called == method]

    def count(self, method: str) -> int:
        return self.methods().count(method)


def sign_authorization(
    private_key: str,
    contract_address: str,
    *,
    chain_id: int = CHAIN_ID,
    nonce: int = 0,
) -> AuthorizationEntry:
    """Build an EIP-7702 authorization signed by ``private_key``."""
    unsigned = AuthorizationEntry(
        contract_address=contract_address, chain_id=chain_id, nonce=nonce, r=0, s=0, y_parity=0
    )
    signature = keys.PrivateKey(to_bytes(private_key)).sign_msg_hash(unsigned.signing_hash())
    return AuthorizationEntry(
        contract_address=contract_address,
        chain_id=chain_id,
        nonce=nonce,
        r=signature.r,
        s=signature.s,
        y_parity=signature.v,
    )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture
def client(node: FakeNode) -> SwisstronikClient:
    """Client on the testnet chain definition, JSON-RPC account."""
    return SwisstronikClient(SWISSTRONIK_TESTNET, account=SENDER, transport=node)


@pytest.fixture
def anonymous_client(node: FakeNode) -> SwisstronikClient:
    return SwisstronikClient(SWISSTRONIK_TESTNET, transport=node)


@pytest.fixture
def local_account():
    return EthAccount.from_key(TEST_PRIVATE_KEY)


@pytest.fixture
def local_client(node: FakeNode, local_account) -> SwisstronikClient:
    return SwisstronikClient(SWISSTRONIK_TESTNET, account=local_account, transport=node)
