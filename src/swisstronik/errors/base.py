"""
Base exception class for the Swisstronik SDK.

All SDK exceptions inherit from SwisstronikError, which provides
structured error information: a machine-readable code plus a details
dictionary carrying the request context needed for diagnostics.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class SwisstronikError(Exception):
    """
    Base exception for all Swisstronik SDK errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code (e.g., "ESTIMATION_FAILED").
        details: Dictionary with additional error context.

    Example:
        >>> raise SwisstronikError(
        ...     "Gas estimation failed",
        ...     code="ESTIMATION_FAILED",
        ...     details={"method": "eth_estimateGas"}
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "SWISSTRONIK_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to a dictionary for JSON serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }
