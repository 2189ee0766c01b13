"""
Read-only JSON-RPC actions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from swisstronik.errors import InvalidRequestError
from swisstronik.types.block import Block
from swisstronik.utils.encoding import hex_to_quantity
from swisstronik.utils.validation import resolve_block_selector, validate_address

if TYPE_CHECKING:
    from swisstronik.client.client import SwisstronikClient


async def get_chain_id(client: "SwisstronikClient") -> int:
    return hex_to_quantity(await client.request("eth_chainId"))


async def get_block(
    client: "SwisstronikClient",
    *,
    block_number: Optional[int] = None,
    block_tag: Optional[str] = None,
) -> Block:
    """
    Fetch a block header (transactions not included).

    Raises:
        InvalidRequestError: If the node does not know the block
    """
    block = resolve_block_selector(block_number, block_tag)
    result = await client.request("eth_getBlockByNumber", [block, False])
    if result is None:
        raise InvalidRequestError(f"Block {block} not found", field="block")
    return Block.model_validate(result)


async def get_transaction_count(
    client: "SwisstronikClient",
    address: str,
    *,
    block_number: Optional[int] = None,
    block_tag: Optional[str] = None,
) -> int:
    address = validate_address(address)
    block = resolve_block_selector(block_number, block_tag, default="pending")
    return hex_to_quantity(await client.request("eth_getTransactionCount", [address, block]))


async def get_balance(
    client: "SwisstronikClient",
    address: str,
    *,
    block_number: Optional[int] = None,
    block_tag: Optional[str] = None,
) -> int:
    """Balance of ``address`` in wei."""
    address = validate_address(address)
    block = resolve_block_selector(block_number, block_tag)
    return hex_to_quantity(await client.request("eth_getBalance", [address, block]))


async def get_gas_price(client: "SwisstronikClient") -> int:
    return hex_to_quantity(await client.request("eth_gasPrice"))


async def get_max_priority_fee_per_gas(client: "SwisstronikClient") -> int:
    return hex_to_quantity(await client.request("eth_maxPriorityFeePerGas"))
