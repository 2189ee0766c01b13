"""
RPC, transport and estimation exceptions.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from swisstronik.errors.base import SwisstronikError


class TransportError(SwisstronikError):
    """
    Raised when the underlying RPC transport fails.

    Example:
        >>> raise TransportError("HTTP 502", url="https://rpc.example", status_code=502)
    """

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        method: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if url:
            details["url"] = url
        if method:
            details["method"] = method
        if status_code is not None:
            details["status_code"] = status_code

        super().__init__(
            message,
            code="TRANSPORT_ERROR",
            details=details,
        )
        self.url = url
        self.method = method
        self.status_code = status_code


class RpcResponseError(TransportError):
    """
    Raised when the node answers with a JSON-RPC error object.

    Attributes:
        rpc_code: JSON-RPC error code returned by the node.
        data: Optional error payload (e.g. revert data).
    """

    def __init__(
        self,
        message: str,
        *,
        rpc_code: Optional[int] = None,
        data: Any = None,
        url: Optional[str] = None,
        method: Optional[str] = None,
    ) -> None:
        details: Dict[str, Any] = {"rpc_code": rpc_code}
        if data is not None:
            details["data"] = data

        super().__init__(
            message,
            url=url,
            method=method,
            details=details,
        )
        self.code = "RPC_ERROR"
        self.rpc_code = rpc_code
        self.data = data


class EstimationError(SwisstronikError):
    """
    Raised when `eth_estimateGas` fails.

    Carries the account, chain and request arguments that were being
    estimated so callers do not have to re-derive them.
    """

    def __init__(
        self,
        cause: Exception,
        *,
        account: Optional[str] = None,
        chain: Optional[str] = None,
        request: Optional[Dict[str, Any]] = None,
    ) -> None:
        reason = cause.message if isinstance(cause, SwisstronikError) else str(cause)
        super().__init__(
            f"Gas estimation failed: {reason}",
            code="ESTIMATION_FAILED",
            details={
                "account": account,
                "chain": chain,
                "request": request or {},
                "cause": cause.__class__.__name__,
            },
        )
        self.cause = cause
        self.account = account
        self.chain = chain
        self.request = request or {}
