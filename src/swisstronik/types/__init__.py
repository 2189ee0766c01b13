"""
Data model for the Swisstronik SDK.
"""

from swisstronik.types.account import Account, AccountLike, AccountType, parse_account
from swisstronik.types.authorization import AuthorizationEntry
from swisstronik.types.block import Block
from swisstronik.types.transaction import (
    TRANSACTION_TYPE_CODES,
    BlobSidecar,
    Eip1559TransactionRequest,
    Eip2930TransactionRequest,
    Eip4844TransactionRequest,
    Eip7702TransactionRequest,
    LegacyTransactionRequest,
    PreparedTransactionRequest,
    TransactionRequest,
    TransactionType,
    TypedTransactionRequest,
    UntypedTransactionRequest,
)

__all__ = [
    # Accounts
    "Account",
    "AccountLike",
    "AccountType",
    "parse_account",
    # Authorizations
    "AuthorizationEntry",
    # Blocks
    "Block",
    # Requests
    "TransactionRequest",
    "TransactionType",
    "TRANSACTION_TYPE_CODES",
    "BlobSidecar",
    "LegacyTransactionRequest",
    "Eip2930TransactionRequest",
    "Eip1559TransactionRequest",
    "Eip4844TransactionRequest",
    "Eip7702TransactionRequest",
    "TypedTransactionRequest",
    "UntypedTransactionRequest",
    "PreparedTransactionRequest",
]
