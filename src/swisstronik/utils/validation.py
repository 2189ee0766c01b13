"""
Validation utilities for the Swisstronik SDK.

Provides input validation for:
- Ethereum addresses
- Block selectors (tags and numbers)
- RPC endpoint URLs

All validation functions raise InvalidRequestError (or subclasses) on failure.
"""

from __future__ import annotations

import re
from typing import Optional, Union
from urllib.parse import urlparse

from eth_utils import to_checksum_address

from swisstronik.errors import InvalidAddressError, InvalidRequestError
from swisstronik.utils.encoding import quantity_to_hex

MAX_UINT256 = 2**256 - 1
BLOCK_TAGS = frozenset({"latest", "earliest", "pending", "safe", "finalized"})

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def validate_address(address: str, field_name: str = "address") -> str:
    """
    Validate Ethereum address format.

    Mixed-case addresses must carry a valid EIP-55 checksum.

    Args:
        address: Address to validate
        field_name: Field name for error messages

    Returns:
        Checksummed address

    Raises:
        InvalidAddressError: If address is invalid
    """
    if not address:
        raise InvalidAddressError(
            "",
            field=field_name,
            reason=f"{field_name} is required",
        )

    if not isinstance(address, str):
        raise InvalidAddressError(
            str(address),
            field=field_name,
            reason=f"{field_name} must be a string",
        )

    if not _ADDRESS_RE.match(address):
        raise InvalidAddressError(
            address,
            field=field_name,
            reason="must be 0x followed by 40 hex characters",
        )

    checksummed = to_checksum_address(address)
    body = address[2:]
    if body != body.lower() and body != body.upper() and address != checksummed:
        raise InvalidAddressError(
            address,
            field=field_name,
            reason="invalid EIP-55 checksum",
        )

    return checksummed


def resolve_block_selector(
    block_number: Optional[int] = None,
    block_tag: Optional[str] = None,
    default: str = "latest",
) -> str:
    """
    Resolve the block parameter sent to the node.

    Args:
        block_number: Explicit block number (takes precedence)
        block_tag: Symbolic tag ("latest", "pending", ...)
        default: Tag used when neither is given

    Returns:
        Hex block number or block tag

    Raises:
        InvalidRequestError: If both are given or the tag is unknown
    """
    if block_number is not None and block_tag is not None:
        raise InvalidRequestError(
            "block_number and block_tag are mutually exclusive",
            field="block",
        )
    if block_number is not None:
        return quantity_to_hex(block_number)

    tag = block_tag or default
    if tag not in BLOCK_TAGS:
        raise InvalidRequestError(
            f"Unknown block tag: {tag!r}",
            field="block_tag",
        )
    return tag


def validate_rpc_url(url: Union[str, None], field_name: str = "rpc_url") -> str:
    """
    Validate an RPC endpoint URL.

    Args:
        url: URL to validate
        field_name: Field name for error messages

    Returns:
        The URL unchanged

    Raises:
        InvalidRequestError: If the URL is not http(s) or has no host
    """
    if not url:
        raise InvalidRequestError(f"{field_name} is required", field=field_name)

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise InvalidRequestError(
            f"{field_name} must use http or https (got: {parsed.scheme or 'none'})",
            field=field_name,
        )
    if not parsed.netloc:
        raise InvalidRequestError(f"{field_name} has no host", field=field_name)

    return url
