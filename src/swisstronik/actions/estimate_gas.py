"""
Gas estimation.

The request is run through a reduced preparation (never gas, never
sealing), formatted for the chain, and sent to ``eth_estimateGas`` through
the client's interceptors, which seal the call data. Authorization-list
transactions get the surcharge from
``swisstronik.actions.authorization``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, FrozenSet, Mapping, Optional, Union

from swisstronik.actions.authorization import estimate_authorization_surcharge, resolve_to
from swisstronik.actions.blobs import Kzg
from swisstronik.errors import EstimationError, TransportError
from swisstronik.types.account import AccountLike, parse_account
from swisstronik.types.transaction import TransactionRequest, _RequestFields
from swisstronik.utils.encoding import hex_to_quantity
from swisstronik.utils.formatters import format_transaction_request, serialize_state_override
from swisstronik.utils.logging import get_logger
from swisstronik.utils.validation import resolve_block_selector

if TYPE_CHECKING:
    from swisstronik.client.client import SwisstronikClient

_logger = get_logger(__name__)

REMOTE_ESTIMATE_PARAMETERS: FrozenSet[str] = frozenset({"blobVersionedHashes"})
LOCAL_ESTIMATE_PARAMETERS: FrozenSet[str] = frozenset(
    {"blobVersionedHashes", "chainId", "fees", "nonce", "type"}
)


async def estimate_gas(
    client: "SwisstronikClient",
    request: Union[_RequestFields, Mapping[str, Any], None] = None,
    *,
    account: Optional[AccountLike] = None,
    block_number: Optional[int] = None,
    block_tag: Optional[str] = None,
    state_override: Optional[Mapping[str, Mapping[str, Any]]] = None,
    kzg: Optional[Kzg] = None,
    **fields: Any,
) -> int:
    """
    Estimate the gas a transaction will use.

    Args:
        client: Client to estimate through
        request: Transaction request (model or mapping); keyword fields
            are merged on top
        account: Sender; defaults to the client's account
        block_number: Estimate against this block
        block_tag: Estimate against this tag (default ``"latest"``)
        state_override: Per-address state overrides
        kzg: KZG backend for deriving blob versioned hashes

    Returns:
        Gas units, including the authorization surcharge when the request
        carries an authorization list

    Raises:
        EstimationError: If the node or transport fails
        AuthorizationRecoveryError: If ``to`` must be inferred from an
            authorization list and recovery fails
    """
    from swisstronik.actions.prepare import prepare_transaction_request

    tx = TransactionRequest.coerce(request, **fields)
    resolved_account = parse_account(account) if account is not None else client.account
    parameters = (
        LOCAL_ESTIMATE_PARAMETERS
        if resolved_account is not None and resolved_account.is_local
        else REMOTE_ESTIMATE_PARAMETERS
    )

    try:
        prepared = await prepare_transaction_request(
            client,
            tx,
            account=resolved_account,
            parameters=parameters,
            kzg=kzg,
            encrypt=False,
        )
        block = resolve_block_selector(block_number, block_tag)
        rpc_state_override = serialize_state_override(state_override)
        to = resolve_to(prepared)

        wire: Dict[str, Any] = prepared.to_wire()
        wire["to"] = to
        wire["data"] = tx.data
        if resolved_account is not None:
            wire["from"] = resolved_account.address

        rpc_request = format_transaction_request(wire)
        if client.chain.format_transaction_request is not None:
            rpc_request = client.chain.format_transaction_request(rpc_request)

        params = [rpc_request, block]
        if rpc_state_override is not None:
            params.append(rpc_state_override)

        estimate = hex_to_quantity(await client.request("eth_estimateGas", params))
        _logger.debug("Base gas estimate", extra={"gas": estimate, "block": block})

        if prepared.authorization_list:
            estimate += await estimate_authorization_surcharge(
                client,
                account=resolved_account,
                authorization_list=prepared.authorization_list,
                data=tx.data,
                block=block,
            )
        return estimate
    except TransportError as exc:
        raise EstimationError(
            exc,
            account=resolved_account.address if resolved_account is not None else None,
            chain=client.chain.name,
            request=tx.to_wire(),
        ) from exc
