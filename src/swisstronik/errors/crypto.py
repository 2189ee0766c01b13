"""
Encryption exceptions.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from swisstronik.errors.base import SwisstronikError


class EncryptionError(SwisstronikError):
    """
    Raised when call data cannot be sealed or a node response cannot be
    unsealed (bad key material, tampered ciphertext, truncated payload).
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            code="ENCRYPTION_ERROR",
            details=details,
        )
