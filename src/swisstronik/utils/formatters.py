"""
JSON-RPC formatting of transaction requests and state overrides.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from swisstronik.errors import InvalidRequestError
from swisstronik.types.authorization import AuthorizationEntry
from swisstronik.types.transaction import TRANSACTION_TYPE_CODES
from swisstronik.utils.encoding import quantity_to_hex, to_hex_data
from swisstronik.utils.validation import validate_address

_QUANTITY_KEYS = (
    "value",
    "nonce",
    "chainId",
    "gas",
    "gasPrice",
    "maxFeePerGas",
    "maxPriorityFeePerGas",
    "maxFeePerBlobGas",
)

# Used for raw transaction serialization only, never sent in RPC requests.
_LOCAL_ONLY_KEYS = ("sidecars",)


def format_transaction_request(request: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert a request in wire-name form into JSON-RPC params.

    Quantities become minimal hex, ``type`` becomes its type code, and
    authorization entries are flattened. ``None`` values are dropped;
    unknown keys pass through untouched.

    Args:
        request: Mapping keyed by JSON-RPC field names

    Returns:
        Dict ready to be used as the first param of eth_call/eth_estimateGas
    """
    formatted: Dict[str, Any] = {}
    for key, value in request.items():
        if value is None or key in _LOCAL_ONLY_KEYS:
            continue
        if key in _QUANTITY_KEYS:
            formatted[key] = quantity_to_hex(value)
        elif key == "type":
            formatted[key] = TRANSACTION_TYPE_CODES.get(value, value)
        elif key == "data":
            formatted[key] = to_hex_data(value)
        elif key == "authorizationList":
            formatted[key] = [
                AuthorizationEntry.model_validate(entry).to_rpc() for entry in value
            ]
        elif key == "blobs":
            formatted[key] = [to_hex_data(blob) for blob in value]
        else:
            formatted[key] = value
    return formatted


def serialize_state_override(
    state_override: Optional[Mapping[str, Mapping[str, Any]]],
) -> Optional[Dict[str, Dict[str, Any]]]:
    """
    Serialize a state override set for eth_call/eth_estimateGas.

    Args:
        state_override: ``{address: {balance, nonce, code, state | stateDiff}}``

    Returns:
        RPC form of the override, or None when nothing is overridden

    Raises:
        InvalidRequestError: On duplicate addresses or when both ``state``
            and ``stateDiff`` are given for one account
    """
    if not state_override:
        return None

    serialized: Dict[str, Dict[str, Any]] = {}
    for address, account in state_override.items():
        checksummed = validate_address(address, "stateOverride")
        if checksummed in serialized:
            raise InvalidRequestError(
                f"State for account {checksummed} is set multiple times",
                field="stateOverride",
            )
        if "state" in account and "stateDiff" in account:
            raise InvalidRequestError(
                f"state and stateDiff are mutually exclusive for account {checksummed}",
                field="stateOverride",
            )

        entry: Dict[str, Any] = {}
        if account.get("balance") is not None:
            entry["balance"] = quantity_to_hex(account["balance"])
        if account.get("nonce") is not None:
            entry["nonce"] = quantity_to_hex(account["nonce"])
        if account.get("code") is not None:
            entry["code"] = to_hex_data(account["code"])
        for slots_key in ("state", "stateDiff"):
            if account.get(slots_key) is not None:
                entry[slots_key] = {
                    to_hex_data(slot): to_hex_data(value)
                    for slot, value in account[slots_key].items()
                }
        serialized[checksummed] = entry

    return serialized
