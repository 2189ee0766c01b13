"""
Exception hierarchy for the Swisstronik SDK.

    SwisstronikError
    ├── InvalidRequestError
    │   ├── InvalidAddressError
    │   ├── FeeConflictError
    │   ├── FeeCapTooHighError
    │   └── TipAboveFeeCapError
    ├── FeeModelConflictError
    │   ├── MaxFeePerGasTooLowError
    │   └── Eip1559FeesNotSupportedError
    ├── AuthorizationRecoveryError
    ├── EstimationError
    ├── EncryptionError
    └── TransportError
        └── RpcResponseError
"""

from swisstronik.errors.base import SwisstronikError
from swisstronik.errors.crypto import EncryptionError
from swisstronik.errors.request import (
    AuthorizationRecoveryError,
    Eip1559FeesNotSupportedError,
    FeeCapTooHighError,
    FeeConflictError,
    FeeModelConflictError,
    InvalidAddressError,
    InvalidRequestError,
    MaxFeePerGasTooLowError,
    TipAboveFeeCapError,
)
from swisstronik.errors.rpc import EstimationError, RpcResponseError, TransportError

__all__ = [
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
]
