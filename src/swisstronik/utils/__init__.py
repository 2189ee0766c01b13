"""
Swisstronik SDK utilities.

Request/state-override formatters live in ``swisstronik.utils.formatters``
and are imported from there directly.
"""

from swisstronik.utils.encoding import hex_to_quantity, quantity_to_hex, to_bytes, to_hex_data
from swisstronik.utils.lazy import AsyncLazy
from swisstronik.utils.logging import configure_logging, disable_logging, get_logger, set_level
from swisstronik.utils.result import Err, Ok, Result, attempt
from swisstronik.utils.retry import RetryConfig, calculate_delay, retry_async
from swisstronik.utils.validation import (
    BLOCK_TAGS,
    MAX_UINT256,
    resolve_block_selector,
    validate_address,
    validate_rpc_url,
)

__all__ = [
    # Encoding
    "quantity_to_hex",
    "hex_to_quantity",
    "to_hex_data",
    "to_bytes",
    # Validation
    "MAX_UINT256",
    "BLOCK_TAGS",
    "validate_address",
    "validate_rpc_url",
    "resolve_block_selector",
    # Structured logging
    "get_logger",
    "configure_logging",
    "set_level",
    "disable_logging",
    # Retry
    "RetryConfig",
    "calculate_delay",
    "retry_async",
    # Results and memoization
    "Ok",
    "Err",
    "Result",
    "attempt",
    "AsyncLazy",
]
