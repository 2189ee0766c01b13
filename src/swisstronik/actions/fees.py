"""
Fee model resolution.

Decides between legacy (``gasPrice``) and fee-market
(``maxFeePerGas``/``maxPriorityFeePerGas``) pricing and fills in the
missing price fields from network estimates. Caller-supplied values are
always kept.
"""

from __future__ import annotations

from decimal import ROUND_CEILING, Decimal
from typing import TYPE_CHECKING, Dict, Optional, Union

from swisstronik.actions.public import (
    get_block,
    get_gas_price,
    get_max_priority_fee_per_gas,
)
from swisstronik.config.chains import Chain
from swisstronik.errors import (
    Eip1559FeesNotSupportedError,
    InvalidRequestError,
    MaxFeePerGasTooLowError,
    RpcResponseError,
)
from swisstronik.types.block import Block
from swisstronik.types.transaction import TransactionRequest, TransactionType
from swisstronik.utils.lazy import AsyncLazy
from swisstronik.utils.logging import get_logger
from swisstronik.utils.result import Ok, attempt

if TYPE_CHECKING:
    from swisstronik.client.client import SwisstronikClient

_logger = get_logger(__name__)

FEE_MARKET_TYPES = frozenset({"eip1559", "eip4844", "eip7702"})


def get_transaction_type(request: TransactionRequest) -> Optional[TransactionType]:
    """
    Classify a request by the fields it carries.

    Returns:
        The explicit or inferred type, or None when the fields alone do
        not determine it
    """
    if request.type is not None:
        return request.type
    if (
        request.max_fee_per_blob_gas is not None
        or request.blobs is not None
        or request.blob_versioned_hashes is not None
        or request.sidecars is not None
    ):
        return "eip4844"
    if request.authorization_list is not None:
        return "eip7702"
    if request.has_fee_market_fields:
        return "eip1559"
    if request.gas_price is not None:
        return "eip2930" if request.access_list is not None else "legacy"
    return None


def apply_base_fee_multiplier(value: int, multiplier: Union[float, Decimal, str]) -> int:
    """
    Scale ``value`` by ``multiplier`` using integer arithmetic.

    The multiplier is rounded up at its own decimal precision, then the
    product is floored: ``value * ceil(m * 10**d) // 10**d``.

    Raises:
        InvalidRequestError: If the multiplier is below 1
    """
    factor = Decimal(str(multiplier))
    if factor < 1:
        raise InvalidRequestError(
            f"base_fee_multiplier must be greater than or equal to 1 (got {multiplier})",
            field="base_fee_multiplier",
        )
    decimals = max(0, -factor.as_tuple().exponent)
    denominator = 10 ** decimals
    numerator = int((factor * denominator).to_integral_value(rounding=ROUND_CEILING))
    return value * numerator // denominator


async def estimate_max_priority_fee_per_gas(
    client: "SwisstronikClient",
    *,
    chain: Optional[Chain] = None,
    block: Optional[Block] = None,
) -> int:
    """
    Estimate the priority fee (tip) per gas.

    Order: the chain's configured default, then ``eth_maxPriorityFeePerGas``,
    then ``eth_gasPrice - baseFee`` clamped at zero for nodes that do not
    implement the former.

    Raises:
        Eip1559FeesNotSupportedError: If the block has no base fee
    """
    chain = chain or client.chain
    if chain.fees.default_priority_fee is not None:
        return chain.fees.default_priority_fee

    block = block or await get_block(client)
    if block.base_fee_per_gas is None:
        raise Eip1559FeesNotSupportedError()

    result = await attempt(get_max_priority_fee_per_gas(client), errors=(RpcResponseError,))
    if isinstance(result, Ok):
        return result.value

    _logger.debug(
        "eth_maxPriorityFeePerGas unavailable, deriving tip from gas price",
        extra={"error": type(result.error).__name__},
    )
    gas_price = await get_gas_price(client)
    return max(gas_price - block.base_fee_per_gas, 0)


async def estimate_fees_per_gas(
    client: "SwisstronikClient",
    *,
    type: TransactionType = "eip1559",
    chain: Optional[Chain] = None,
    block: Optional[Block] = None,
    request: Optional[TransactionRequest] = None,
) -> Dict[str, int]:
    """
    Estimate fee fields for ``type``.

    Returns:
        ``{"max_fee_per_gas", "max_priority_fee_per_gas"}`` for fee-market
        types, ``{"gas_price"}`` otherwise

    Raises:
        InvalidRequestError: If the chain's base fee multiplier is below 1
        Eip1559FeesNotSupportedError: If a fee-market type is requested
            on a chain whose blocks have no base fee
    """
    chain = chain or client.chain
    multiplier = chain.fees.base_fee_multiplier
    if Decimal(str(multiplier)) < 1:
        raise InvalidRequestError(
            f"base_fee_multiplier must be greater than or equal to 1 (got {multiplier})",
            field="base_fee_multiplier",
        )

    if type in FEE_MARKET_TYPES:
        block = block or await get_block(client)
        if block.base_fee_per_gas is None:
            raise Eip1559FeesNotSupportedError()

        max_priority_fee_per_gas = (
            request.max_priority_fee_per_gas
            if request is not None and request.max_priority_fee_per_gas is not None
            else await estimate_max_priority_fee_per_gas(client, chain=chain, block=block)
        )
        base_fee_per_gas = apply_base_fee_multiplier(block.base_fee_per_gas, multiplier)
        max_fee_per_gas = (
            request.max_fee_per_gas
            if request is not None and request.max_fee_per_gas is not None
            else base_fee_per_gas + max_priority_fee_per_gas
        )
        return {
            "max_fee_per_gas": max_fee_per_gas,
            "max_priority_fee_per_gas": max_priority_fee_per_gas,
        }

    if request is not None and request.gas_price is not None:
        return {"gas_price": request.gas_price}
    return {"gas_price": apply_base_fee_multiplier(await get_gas_price(client), multiplier)}


class FeeResolver:
    """
    Resolves ``type`` and fee fields for one preparation call.

    Shares the caller's memoized latest block so the block is fetched at
    most once per preparation.
    """

    def __init__(
        self,
        client: "SwisstronikClient",
        *,
        chain: Optional[Chain] = None,
        block: Optional[AsyncLazy[Block]] = None,
    ) -> None:
        self._client = client
        self._chain = chain or client.chain
        self._block = block or AsyncLazy(lambda: get_block(client))

    async def resolve_type(self, request: TransactionRequest) -> TransactionType:
        inferred = get_transaction_type(request)
        if inferred is not None:
            return inferred
        block = await self._block.get()
        return "eip1559" if block.supports_eip1559 else "legacy"

    async def resolve_fees(self, request: TransactionRequest) -> None:
        """
        Fill missing fee fields on ``request`` in place.

        Raises:
            MaxFeePerGasTooLowError: If a caller-supplied ``maxFeePerGas``
                (without a tip) is below the estimated priority fee
            Eip1559FeesNotSupportedError: If fee-market fields are given for
                a legacy/EIP-2930 request, or the chain has no base fee
        """
        tx_type = request.type or await self.resolve_type(request)

        if tx_type in FEE_MARKET_TYPES:
            if request.max_fee_per_gas is not None and request.max_priority_fee_per_gas is not None:
                return
            caller_max_fee = request.max_fee_per_gas
            caller_set_tip = request.max_priority_fee_per_gas is not None
            fees = await estimate_fees_per_gas(
                self._client,
                type=tx_type,
                chain=self._chain,
                block=await self._block.get(),
                request=request,
            )
            if (
                not caller_set_tip
                and caller_max_fee is not None
                and caller_max_fee < fees["max_priority_fee_per_gas"]
            ):
                raise MaxFeePerGasTooLowError(
                    max_priority_fee_per_gas=fees["max_priority_fee_per_gas"]
                )
            request.max_fee_per_gas = fees["max_fee_per_gas"]
            request.max_priority_fee_per_gas = fees["max_priority_fee_per_gas"]
            _logger.debug("Resolved fee-market fees", extra={"type": tx_type})
            return

        if request.has_fee_market_fields:
            raise Eip1559FeesNotSupportedError()
        if request.gas_price is None:
            fees = await estimate_fees_per_gas(
                self._client,
                type=tx_type,
                chain=self._chain,
                block=await self._block.get(),
                request=request,
            )
            request.gas_price = fees["gas_price"]
            _logger.debug("Resolved gas price", extra={"type": tx_type})
