"""
Swisstronik Python SDK - confidential transactions for Swisstronik.

Prepares EVM transactions (chain id, nonce, fees, gas, blob commitments,
EIP-7702 recipients) and seals contract call data under the node's public
key, so call data and constructor arguments never leave the client in
plaintext. ``eth_call`` results are unsealed transparently.

Quick Start:
    >>> import asyncio
    >>> from swisstronik import create_swisstronik_client
    >>>
    >>> async def main():
    ...     async with create_swisstronik_client(
    ...         account="0x1234567890123456789012345678901234567890"
    ...     ) as client:
    ...         gas = await client.estimate_gas(
    ...             to="0xF8bEB8c8Be514772097103e39C2ccE057117CC92",
    ...             data="0x61bc221a",
    ...         )
    ...         print(f"Gas: {gas}")
    ...
    >>> asyncio.run(main())

Modules:
- `client`: SwisstronikClient and request interceptors
- `actions`: preparation, gas estimation, fees, nonces, blobs, calls
- `crypto`: call-data sealing
- `config`: chains and client configuration
- `errors`: exception hierarchy
- `utils`: encoding, validation, logging and retry helpers
"""

from swisstronik.version import __version__, __version_info__

# Client
from swisstronik.client import (
    EncryptionInterceptor,
    RequestInterceptor,
    RpcCall,
    SwisstronikClient,
    create_swisstronik_client,
)

# Configuration
from swisstronik.config import (
    CHAINS,
    SWISSTRONIK_TESTNET,
    Chain,
    ClientConfig,
    FeeConfig,
    NativeCurrency,
    get_chain,
)

# Actions
from swisstronik.actions import (
    AUTHORIZATION_GAS_MULTIPLIER,
    DEFAULT_PARAMETERS,
    FALLBACK_AUTHORIZATION_GAS,
    BlobCommitmentSet,
    CkzgSetup,
    FeeResolver,
    JsonRpcNonceManager,
    Kzg,
    NonceManager,
    TransactionRequestBuilder,
    build_blob_commitments,
    call,
    estimate_fees_per_gas,
    estimate_gas,
    estimate_max_priority_fee_per_gas,
    prepare_transaction_request,
    resolve_to,
    send_transaction,
)

# Encryption
from swisstronik.crypto import EncryptionEnvelope, EncryptionGateway, NodeKeyMaterial

# Types
from swisstronik.types import (
    Account,
    AuthorizationEntry,
    Block,
    Eip1559TransactionRequest,
    Eip2930TransactionRequest,
    Eip4844TransactionRequest,
    Eip7702TransactionRequest,
    LegacyTransactionRequest,
    PreparedTransactionRequest,
    TransactionRequest,
    UntypedTransactionRequest,
)

# Errors
from swisstronik.errors import (
    AuthorizationRecoveryError,
    Eip1559FeesNotSupportedError,
    EncryptionError,
    EstimationError,
    FeeCapTooHighError,
    FeeConflictError,
    FeeModelConflictError,
    InvalidAddressError,
    InvalidRequestError,
    MaxFeePerGasTooLowError,
    RpcResponseError,
    SwisstronikError,
    TipAboveFeeCapError,
    TransportError,
)

# Transport
from swisstronik.transport import HttpTransport, Transport

# Logging
from swisstronik.utils.logging import configure_logging, disable_logging, get_logger, set_level

__all__ = [
    "__version__",
    "__version_info__",
    # Client
    "SwisstronikClient",
    "create_swisstronik_client",
    "RequestInterceptor",
    "EncryptionInterceptor",
    "RpcCall",
    # Configuration
    "Chain",
    "FeeConfig",
    "NativeCurrency",
    "ClientConfig",
    "SWISSTRONIK_TESTNET",
    "CHAINS",
    "get_chain",
    # Actions
    "prepare_transaction_request",
    "TransactionRequestBuilder",
    "DEFAULT_PARAMETERS",
    "estimate_gas",
    "estimate_fees_per_gas",
    "estimate_max_priority_fee_per_gas",
    "FeeResolver",
    "NonceManager",
    "JsonRpcNonceManager",
    "Kzg",
    "CkzgSetup",
    "BlobCommitmentSet",
    "build_blob_commitments",
    "resolve_to",
    "AUTHORIZATION_GAS_MULTIPLIER",
    "FALLBACK_AUTHORIZATION_GAS",
    "call",
    "send_transaction",
    # Encryption
    "EncryptionGateway",
    "EncryptionEnvelope",
    "NodeKeyMaterial",
    # Types
    "Account",
    "AuthorizationEntry",
    "Block",
    "TransactionRequest",
    "LegacyTransactionRequest",
    "Eip2930TransactionRequest",
    "Eip1559TransactionRequest",
    "Eip4844TransactionRequest",
    "Eip7702TransactionRequest",
    "UntypedTransactionRequest",
    "PreparedTransactionRequest",
    # Errors
    "SwisstronikError",
    "InvalidRequestError",
    "InvalidAddressError",
    "FeeConflictError",
    "FeeCapTooHighError",
    "TipAboveFeeCapError",
    "FeeModelConflictError",
    "MaxFeePerGasTooLowError",
    "Eip1559FeesNotSupportedError",
    "AuthorizationRecoveryError",
    "EstimationError",
    "EncryptionError",
    "TransportError",
    "RpcResponseError",
    # Transport
    "HttpTransport",
    "Transport",
    # Logging
    "get_logger",
    "configure_logging",
    "set_level",
    "disable_logging",
]
