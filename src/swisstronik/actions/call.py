"""
Executing calls and sending transactions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

from swisstronik.actions.blobs import Kzg
from swisstronik.actions.nonce import NonceManager
from swisstronik.actions.prepare import assert_request, prepare_transaction_request
from swisstronik.errors import InvalidRequestError
from swisstronik.types.account import Account, AccountLike, parse_account
from swisstronik.types.transaction import (
    PreparedTransactionRequest,
    TransactionRequest,
    _RequestFields,
)
from swisstronik.utils.encoding import to_hex_data
from swisstronik.utils.formatters import format_transaction_request, serialize_state_override
from swisstronik.utils.logging import get_logger
from swisstronik.utils.validation import resolve_block_selector

if TYPE_CHECKING:
    from swisstronik.client.client import SwisstronikClient

_logger = get_logger(__name__)

LOCALLY_SIGNABLE_TYPES = frozenset({"legacy", "eip2930", "eip1559"})
_TYPE_CODES = {"eip2930": 1, "eip1559": 2}


def _format_for_chain(
    client: "SwisstronikClient",
    tx: _RequestFields,
    account: Optional[Account],
) -> Dict[str, Any]:
    wire = tx.to_wire()
    if account is not None:
        wire["from"] = account.address
    rpc_request = format_transaction_request(wire)
    if client.chain.format_transaction_request is not None:
        rpc_request = client.chain.format_transaction_request(rpc_request)
    return rpc_request


async def call(
    client: "SwisstronikClient",
    request: Union[_RequestFields, Mapping[str, Any], None] = None,
    *,
    account: Optional[AccountLike] = None,
    block_number: Optional[int] = None,
    block_tag: Optional[str] = None,
    state_override: Optional[Mapping[str, Mapping[str, Any]]] = None,
    **fields: Any,
) -> str:
    """
    Execute a message call without creating a transaction.

    When ``to`` and ``data`` are both set the call data is sealed on the
    way out and the result unsealed on the way back by the client's
    encryption interceptor.

    Returns:
        Return data as 0x hex
    """
    tx = TransactionRequest.coerce(request, **fields)
    resolved_account = parse_account(account) if account is not None else client.account
    assert_request(tx)

    params = [
        _format_for_chain(client, tx, resolved_account),
        resolve_block_selector(block_number, block_tag),
    ]
    rpc_state_override = serialize_state_override(state_override)
    if rpc_state_override is not None:
        params.append(rpc_state_override)
    return await client.request("eth_call", params)


def to_signable_transaction(prepared: PreparedTransactionRequest) -> Dict[str, Any]:
    """
    Convert a prepared request into the dict ``eth_account`` signs.

    Raises:
        InvalidRequestError: If the type cannot be signed locally or a
            required field is missing
    """
    if prepared.type not in LOCALLY_SIGNABLE_TYPES:
        raise InvalidRequestError(
            f"Local signing is not supported for {prepared.type} transactions",
            field="type",
        )
    for name in ("chain_id", "nonce", "gas"):
        if getattr(prepared, name) is None:
            raise InvalidRequestError(f"{name} is required for signing", field=name)

    tx: Dict[str, Any] = {
        "chainId": prepared.chain_id,
        "nonce": prepared.nonce,
        "gas": prepared.gas,
        "value": prepared.value or 0,
        "data": prepared.data or "0x",
    }
    if prepared.to is not None:
        tx["to"] = prepared.to

    if prepared.type == "eip1559":
        tx["maxFeePerGas"] = prepared.max_fee_per_gas
        tx["maxPriorityFeePerGas"] = prepared.max_priority_fee_per_gas
    else:
        tx["gasPrice"] = prepared.gas_price

    if prepared.type in _TYPE_CODES:
        tx["type"] = _TYPE_CODES[prepared.type]
        tx["accessList"] = prepared.access_list or []
    return tx


async def send_transaction(
    client: "SwisstronikClient",
    request: Union[_RequestFields, Mapping[str, Any], None] = None,
    *,
    account: Optional[AccountLike] = None,
    kzg: Optional[Kzg] = None,
    nonce_manager: Optional[NonceManager] = None,
    **fields: Any,
) -> str:
    """
    Send a transaction and return its hash.

    JSON-RPC accounts hand the request to the node (``eth_sendTransaction``,
    sealed by the interceptor). Local accounts prepare the request, which
    seals the call data, sign it with ``eth_account`` and broadcast it with
    ``eth_sendRawTransaction``.

    Raises:
        InvalidRequestError: If no account is known
    """
    resolved_account = parse_account(account) if account is not None else client.account
    if resolved_account is None:
        raise InvalidRequestError("An account is required to send a transaction", field="account")

    tx = TransactionRequest.coerce(request, **fields)
    if not resolved_account.is_local:
        assert_request(tx)
        return await client.request(
            "eth_sendTransaction",
            [_format_for_chain(client, tx, resolved_account)],
        )

    prepared = await prepare_transaction_request(
        client,
        tx,
        account=resolved_account,
        kzg=kzg,
        nonce_manager=nonce_manager,
    )
    signed = resolved_account.signer.sign_transaction(to_signable_transaction(prepared))
    tx_hash = await client.request("eth_sendRawTransaction", [to_hex_data(signed.raw_transaction)])
    _logger.debug("Sent raw transaction", extra={"type": prepared.type, "nonce": prepared.nonce})
    return tx_hash
