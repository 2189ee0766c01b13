"""
Actions run against a SwisstronikClient.

Each action is a plain async function taking the client as its first
argument; the client exposes the common ones as methods.
"""

from swisstronik.actions.authorization import (
    AUTHORIZATION_GAS_MULTIPLIER,
    FALLBACK_AUTHORIZATION_GAS,
    estimate_authorization_surcharge,
    resolve_to,
)
from swisstronik.actions.blobs import (
    BlobCommitmentSet,
    CkzgSetup,
    Kzg,
    blobs_to_commitments,
    blobs_to_proofs,
    build_blob_commitments,
    commitment_to_versioned_hash,
    commitments_to_versioned_hashes,
    to_blob_sidecars,
)
from swisstronik.actions.call import call, send_transaction, to_signable_transaction
from swisstronik.actions.estimate_gas import estimate_gas
from swisstronik.actions.fees import (
    FeeResolver,
    apply_base_fee_multiplier,
    estimate_fees_per_gas,
    estimate_max_priority_fee_per_gas,
    get_transaction_type,
)
from swisstronik.actions.nonce import JsonRpcNonceManager, NonceManager, resolve_nonce
from swisstronik.actions.prepare import (
    ALL_PARAMETERS,
    DEFAULT_PARAMETERS,
    TransactionRequestBuilder,
    assert_request,
    prepare_transaction_request,
)
from swisstronik.actions.public import (
    get_balance,
    get_block,
    get_chain_id,
    get_gas_price,
    get_max_priority_fee_per_gas,
    get_transaction_count,
)

__all__ = [
    # Public
    "get_chain_id",
    "get_block",
    "get_balance",
    "get_transaction_count",
    "get_gas_price",
    "get_max_priority_fee_per_gas",
    # Fees
    "FeeResolver",
    "get_transaction_type",
    "apply_base_fee_multiplier",
    "estimate_fees_per_gas",
    "estimate_max_priority_fee_per_gas",
    # Nonces
    "NonceManager",
    "JsonRpcNonceManager",
    "resolve_nonce",
    # Blobs
    "Kzg",
    "CkzgSetup",
    "BlobCommitmentSet",
    "blobs_to_commitments",
    "blobs_to_proofs",
    "build_blob_commitments",
    "commitment_to_versioned_hash",
    "commitments_to_versioned_hashes",
    "to_blob_sidecars",
    # Authorizations
    "AUTHORIZATION_GAS_MULTIPLIER",
    "FALLBACK_AUTHORIZATION_GAS",
    "resolve_to",
    "estimate_authorization_surcharge",
    # Gas and preparation
    "estimate_gas",
    "DEFAULT_PARAMETERS",
    "ALL_PARAMETERS",
    "TransactionRequestBuilder",
    "assert_request",
    "prepare_transaction_request",
    # Calls
    "call",
    "send_transaction",
    "to_signable_transaction",
]
