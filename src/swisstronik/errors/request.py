"""
Transaction request exceptions.

Raised while resolving and validating a transaction request, before
anything is dispatched to the network.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from swisstronik.errors.base import SwisstronikError


class InvalidRequestError(SwisstronikError):
    """
    Raised when a transaction request is structurally invalid.

    Example:
        >>> raise InvalidRequestError("blobs require a recipient", field="to")
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field

        super().__init__(
            message,
            code="INVALID_REQUEST",
            details=details,
        )
        self.field = field


class InvalidAddressError(InvalidRequestError):
    """
    Raised when an address field is not a valid 20-byte hex address.

    Example:
        >>> raise InvalidAddressError("0xinvalid", field="to")
    """

    def __init__(
        self,
        address: str,
        *,
        field: str = "address",
        reason: Optional[str] = None,
    ) -> None:
        message = f"Invalid {field}: {address!r}"
        if reason:
            message += f" ({reason})"

        super().__init__(
            message,
            field=field,
            details={"address": address},
        )
        self.code = "INVALID_ADDRESS"
        self.address = address
        self.reason = reason


class FeeConflictError(InvalidRequestError):
    """Raised when both `gasPrice` and fee-market fields are set."""

    def __init__(self) -> None:
        super().__init__(
            "Cannot specify both a gasPrice and a maxFeePerGas/maxPriorityFeePerGas. "
            "Use maxFeePerGas/maxPriorityFeePerGas for EIP-1559 compatible networks, "
            "and gasPrice for others.",
            field="gasPrice",
        )
        self.code = "FEE_CONFLICT"


class FeeCapTooHighError(InvalidRequestError):
    """Raised when `maxFeePerGas` does not fit in a uint256."""

    def __init__(self, max_fee_per_gas: int) -> None:
        super().__init__(
            "maxFeePerGas cannot be higher than 2^256-1 (maximum of a 256-bit unsigned integer)",
            field="maxFeePerGas",
            details={"max_fee_per_gas": max_fee_per_gas},
        )
        self.code = "FEE_CAP_TOO_HIGH"
        self.max_fee_per_gas = max_fee_per_gas


class TipAboveFeeCapError(InvalidRequestError):
    """Raised when `maxPriorityFeePerGas` exceeds `maxFeePerGas`."""

    def __init__(self, max_fee_per_gas: int, max_priority_fee_per_gas: int) -> None:
        super().__init__(
            f"maxPriorityFeePerGas ({max_priority_fee_per_gas}) cannot be higher "
            f"than maxFeePerGas ({max_fee_per_gas})",
            field="maxPriorityFeePerGas",
            details={
                "max_fee_per_gas": max_fee_per_gas,
                "max_priority_fee_per_gas": max_priority_fee_per_gas,
            },
        )
        self.code = "TIP_ABOVE_FEE_CAP"
        self.max_fee_per_gas = max_fee_per_gas
        self.max_priority_fee_per_gas = max_priority_fee_per_gas


class FeeModelConflictError(SwisstronikError):
    """
    Raised when caller-supplied fee fields do not fit the resolved
    transaction type.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            code="FEE_MODEL_CONFLICT",
            details=details,
        )


class MaxFeePerGasTooLowError(FeeModelConflictError):
    """
    Raised when a supplied `maxFeePerGas` is below the estimated priority fee.

    Example:
        >>> raise MaxFeePerGasTooLowError(max_priority_fee_per_gas=1_500_000_000)
    """

    def __init__(self, *, max_priority_fee_per_gas: int) -> None:
        super().__init__(
            "maxFeePerGas cannot be lower than maxPriorityFeePerGas "
            f"({max_priority_fee_per_gas} wei)",
            details={"max_priority_fee_per_gas": max_priority_fee_per_gas},
        )
        self.code = "MAX_FEE_PER_GAS_TOO_LOW"
        self.max_priority_fee_per_gas = max_priority_fee_per_gas


class Eip1559FeesNotSupportedError(FeeModelConflictError):
    """Raised when fee-market fields are used where the chain or type has none."""

    def __init__(self) -> None:
        super().__init__("Chain does not support EIP-1559 fees.")
        self.code = "EIP1559_FEES_NOT_SUPPORTED"


class AuthorizationRecoveryError(SwisstronikError):
    """
    Raised when `to` is missing and cannot be recovered from the first
    entry of the authorization list.
    """

    def __init__(self, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            "to is required; could not infer from authorizationList",
            code="AUTHORIZATION_RECOVERY_FAILED",
            details=details,
        )
