"""
EIP-7702 authorization handling for preparation and gas estimation.

Node-side gas estimation does not account for authorization lists yet, so
each entry is estimated on its own and added to the base estimate with a
safety factor:

    total = base + sum(AUTHORIZATION_GAS_MULTIPLIER * e_i)

where ``e_i`` falls back to ``FALLBACK_AUTHORIZATION_GAS`` when the
per-entry estimate fails (e.g. the delegate contract is not deployed).
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Optional, Sequence

from eth_keys.exceptions import BadSignature
from eth_keys.exceptions import ValidationError as KeyValidationError

from swisstronik.actions.public import get_balance
from swisstronik.errors import AuthorizationRecoveryError, InvalidRequestError
from swisstronik.types.account import Account
from swisstronik.types.authorization import AuthorizationEntry
from swisstronik.types.transaction import TransactionRequest
from swisstronik.utils.encoding import hex_to_quantity
from swisstronik.utils.formatters import format_transaction_request
from swisstronik.utils.logging import get_logger
from swisstronik.utils.result import Err, attempt

if TYPE_CHECKING:
    from swisstronik.client.client import SwisstronikClient

AUTHORIZATION_GAS_MULTIPLIER = 2
FALLBACK_AUTHORIZATION_GAS = 100_000

_logger = get_logger(__name__)


def resolve_to(request: TransactionRequest) -> Optional[str]:
    """
    Recipient of ``request``.

    Returns ``to`` when set; otherwise the authority that signed the first
    authorization entry; otherwise None (contract deployment).

    Raises:
        AuthorizationRecoveryError: If the first entry's signer cannot be
            recovered
    """
    if request.to:
        return request.to
    if not request.authorization_list:
        return None

    first = request.authorization_list[0]
    try:
        return first.recover_authority()
    except (BadSignature, KeyValidationError, ValueError) as exc:
        raise AuthorizationRecoveryError(
            details={"contract_address": first.contract_address, "chain_id": first.chain_id}
        ) from exc


async def _estimate_authorization_gas(
    client: "SwisstronikClient",
    *,
    account: Account,
    entry: AuthorizationEntry,
    data: Optional[str],
    balance: int,
    block: str,
) -> int:
    params = format_transaction_request(
        {
            "from": account.address,
            "to": entry.contract_address,
            "data": data,
            "value": balance,
        }
    )
    return hex_to_quantity(await client.request("eth_estimateGas", [params, block]))


async def estimate_authorization_surcharge(
    client: "SwisstronikClient",
    *,
    account: Optional[Account],
    authorization_list: Sequence[AuthorizationEntry],
    data: Optional[str],
    block: str = "latest",
) -> int:
    """
    Extra gas to add to a base estimate for ``authorization_list``.

    Each entry is estimated against its ``contract_address`` with the
    account's full balance as ``value`` and the plaintext call data, at the
    same ``block`` selector as the base estimate.
    Entries are estimated concurrently; a failed entry counts as
    ``FALLBACK_AUTHORIZATION_GAS`` and does not affect the others.

    Raises:
        InvalidRequestError: If no account is known
    """
    if not authorization_list:
        return 0
    if account is None:
        raise InvalidRequestError(
            "An account is required to estimate gas for an authorization list",
            field="account",
        )

    balance = await get_balance(client, account.address)
    results = await asyncio.gather(
        *(
            attempt(
                _estimate_authorization_gas(
                    client,
                    account=account,
                    entry=entry,
                    data=data,
                    balance=balance,
                    block=block,
                )
            )
            for entry in authorization_list
        )
    )

    surcharge = 0
    for entry, result in zip(authorization_list, results):
        if isinstance(result, Err):
            _logger.warning(
                "Authorization gas estimate failed, using fallback",
                extra={
                    "contract_address": entry.contract_address,
                    "fallback": FALLBACK_AUTHORIZATION_GAS,
                    "error": type(result.error).__name__,
                },
            )
        surcharge += AUTHORIZATION_GAS_MULTIPLIER * result.unwrap_or(FALLBACK_AUTHORIZATION_GAS)
    return surcharge
