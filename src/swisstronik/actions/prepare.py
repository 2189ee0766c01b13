"""
Transaction request preparation.

    start -> account -> seal data (to + data)
          -> [blob commitments | chain id]
          -> nonce -> type -> fees -> gas
          -> validate -> frozen request

Each step runs only when its parameter is enabled and the caller left the
field empty. The latest block and the chain id are memoized per call.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, AbstractSet, Any, FrozenSet, Iterable, Mapping, Optional, Union

from swisstronik.actions.blobs import Kzg, build_blob_commitments
from swisstronik.actions.estimate_gas import estimate_gas
from swisstronik.actions.fees import FeeResolver
from swisstronik.actions.nonce import NonceManager, resolve_nonce
from swisstronik.actions.public import get_block, get_chain_id
from swisstronik.config.chains import Chain
from swisstronik.errors import (
    FeeCapTooHighError,
    FeeConflictError,
    InvalidRequestError,
    TipAboveFeeCapError,
)
from swisstronik.types.account import Account, AccountLike, parse_account
from swisstronik.types.transaction import (
    PreparedTransactionRequest,
    TransactionRequest,
    _RequestFields,
)
from swisstronik.utils.lazy import AsyncLazy
from swisstronik.utils.logging import get_logger
from swisstronik.utils.validation import MAX_UINT256, validate_address

if TYPE_CHECKING:
    from swisstronik.client.client import SwisstronikClient

_logger = get_logger(__name__)

DEFAULT_PARAMETERS: FrozenSet[str] = frozenset(
    {"blobVersionedHashes", "chainId", "fees", "gas", "nonce", "type"}
)
ALL_PARAMETERS: FrozenSet[str] = DEFAULT_PARAMETERS | {"sidecars"}
_BLOB_PARAMETERS = frozenset({"blobVersionedHashes", "sidecars"})


def assert_request(request: _RequestFields) -> None:
    """
    Structural checks on a resolved request.

    Raises:
        InvalidAddressError: If ``from`` or ``to`` is malformed
        FeeConflictError: If ``gasPrice`` is mixed with fee-market fields
        FeeCapTooHighError: If ``maxFeePerGas`` exceeds 2**256 - 1
        TipAboveFeeCapError: If the tip exceeds ``maxFeePerGas``
    """
    if request.from_address is not None:
        validate_address(request.from_address, "from")
    if request.to is not None:
        validate_address(request.to, "to")
    if request.gas_price is not None and request.has_fee_market_fields:
        raise FeeConflictError()

    max_fee = request.max_fee_per_gas
    tip = request.max_priority_fee_per_gas
    if max_fee is not None and max_fee > MAX_UINT256:
        raise FeeCapTooHighError(max_fee)
    if max_fee is not None and tip is not None and tip > max_fee:
        raise TipAboveFeeCapError(max_fee, tip)


class TransactionRequestBuilder:
    """
    Fills in everything a transaction needs before it can be signed.

    A builder holds configuration only; every ``build`` call owns its own
    accumulator and memos, so one builder can serve concurrent calls.

    Example:
        ```python
        builder = TransactionRequestBuilder(client, account=account)
        prepared = await builder.build({"to": "0x...", "data": "0x61bc221a"})
        prepared.type         # "eip1559"
        prepared.gas          # 23325
        ```
    """

    def __init__(
        self,
        client: "SwisstronikClient",
        *,
        account: Optional[AccountLike] = None,
        chain: Optional[Chain] = None,
        parameters: Optional[Iterable[str]] = None,
        kzg: Optional[Kzg] = None,
        nonce_manager: Optional[NonceManager] = None,
        encrypt: Optional[bool] = None,
    ) -> None:
        self._client = client
        self._account = parse_account(account) if account is not None else client.account
        self._chain = chain
        self._parameters = (
            frozenset(parameters) if parameters is not None else DEFAULT_PARAMETERS
        )
        unknown = self._parameters - ALL_PARAMETERS
        if unknown:
            raise InvalidRequestError(
                f"Unknown preparation parameters: {sorted(unknown)}",
                field="parameters",
                details={"allowed": sorted(ALL_PARAMETERS)},
            )
        self._kzg = kzg
        self._nonce_manager = nonce_manager
        self._encrypt = client.config.encrypt if encrypt is None else encrypt

    @property
    def parameters(self) -> AbstractSet[str]:
        return self._parameters

    async def build(
        self,
        request: Union[_RequestFields, Mapping[str, Any], None] = None,
        **fields: Any,
    ) -> PreparedTransactionRequest:
        """
        Resolve and validate ``request``.

        The caller's request is copied, never modified.

        Raises:
            SwisstronikError: Any resolver or validation failure; nothing is
                retried at this layer
        """
        client = self._client
        parameters = self._parameters
        account = self._account
        tx = TransactionRequest.coerce(request, **fields)
        plaintext = tx.data

        block = AsyncLazy(lambda: get_block(client))
        chain_id = AsyncLazy(lambda: self._fetch_chain_id(tx))

        if account is not None:
            tx.from_address = account.address

        if self._encrypt and tx.to and tx.data:
            gateway = client.encryption_gateway
            node_key = await gateway.get_node_public_key()
            tx.data = gateway.seal(node_key, tx.data).ciphertext

        # A failure in either step cancels the other
        steps = [
            asyncio.ensure_future(self._resolve_blobs(tx)),
            asyncio.ensure_future(self._resolve_chain_id(tx, chain_id)),
        ]
        try:
            await asyncio.gather(*steps)
        except BaseException:
            for step in steps:
                step.cancel()
            chain_id.cancel()
            raise

        if "nonce" in parameters and tx.nonce is None and account is not None:
            tx.nonce = await resolve_nonce(
                client,
                account,
                chain_id=chain_id.get,
                nonce_manager=self._nonce_manager,
            )

        fee_resolver = FeeResolver(client, chain=self._chain or client.chain, block=block)
        if ("fees" in parameters or "type" in parameters) and tx.type is None:
            tx.type = await fee_resolver.resolve_type(tx)
        if "fees" in parameters:
            await fee_resolver.resolve_fees(tx)

        if "gas" in parameters and tx.gas is None:
            estimate_request = tx.model_copy(update={"data": plaintext})
            tx.gas = await estimate_gas(
                client,
                estimate_request,
                account=Account(address=account.address, type="json-rpc") if account else None,
                kzg=self._kzg,
            )

        assert_request(tx)
        prepared = tx.freeze()
        _logger.debug(
            "Prepared transaction request",
            extra={
                "type": prepared.type,
                "chain_id": prepared.chain_id,
                "nonce": prepared.nonce,
                "gas": prepared.gas,
                "block_fetched": block.started,
            },
        )
        return prepared

    async def _fetch_chain_id(self, tx: TransactionRequest) -> int:
        if self._chain is not None:
            return self._chain.id
        if tx.chain_id is not None:
            return tx.chain_id
        return await get_chain_id(self._client)

    async def _resolve_chain_id(self, tx: TransactionRequest, chain_id: AsyncLazy[int]) -> None:
        if "chainId" in self._parameters:
            tx.chain_id = await chain_id.get()

    async def _resolve_blobs(self, tx: TransactionRequest) -> None:
        wanted = self._parameters & _BLOB_PARAMETERS
        if not wanted or not tx.blobs or self._kzg is None:
            return
        commitments = await asyncio.to_thread(
            build_blob_commitments,
            tx.blobs,
            self._kzg,
            versioned_hashes="blobVersionedHashes" in wanted,
            sidecars="sidecars" in wanted,
        )
        if commitments.versioned_hashes is not None:
            tx.blob_versioned_hashes = commitments.versioned_hashes
        if commitments.sidecars is not None:
            tx.sidecars = commitments.sidecars


async def prepare_transaction_request(
    client: "SwisstronikClient",
    request: Union[_RequestFields, Mapping[str, Any], None] = None,
    *,
    account: Optional[AccountLike] = None,
    chain: Optional[Chain] = None,
    parameters: Optional[Iterable[str]] = None,
    kzg: Optional[Kzg] = None,
    nonce_manager: Optional[NonceManager] = None,
    encrypt: Optional[bool] = None,
    **fields: Any,
) -> PreparedTransactionRequest:
    """
    Prepare a transaction request for signing.

    Args:
        client: Client to resolve against
        request: Partial request (model or mapping); keyword fields are
            merged on top
        account: Sender; defaults to the client's account
        chain: Explicit chain; its id wins over ``request.chainId``
        parameters: Steps to run (default: all except ``sidecars``)
        kzg: KZG backend for blob transactions
        nonce_manager: Nonce source used instead of the pending count
        encrypt: Seal ``data`` when ``to`` is set (default: client config)

    Returns:
        Frozen typed request (``UntypedTransactionRequest`` when the type
        step did not run)
    """
    builder = TransactionRequestBuilder(
        client,
        account=account,
        chain=chain,
        parameters=parameters,
        kzg=kzg,
        nonce_manager=nonce_manager,
        encrypt=encrypt,
    )
    return await builder.build(request, **fields)
