"""
Account identity as seen by the preparation pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Union

from eth_account.signers.local import LocalAccount

from swisstronik.utils.validation import validate_address

AccountType = Literal["local", "json-rpc"]


@dataclass(frozen=True)
class Account:
    """
    Resolved account: an address plus how it signs.

    ``local`` accounts hold a key in-process (``eth_account``); ``json-rpc``
    accounts are signed for by the node via ``eth_sendTransaction``.
    """

    address: str
    type: AccountType = "json-rpc"
    signer: Optional[LocalAccount] = None

    @property
    def is_local(self) -> bool:
        return self.type == "local"


AccountLike = Union[str, LocalAccount, Account]


def parse_account(account: Optional[AccountLike]) -> Optional[Account]:
    """
    Normalize an address, an ``eth_account`` LocalAccount or an Account.

    Returns:
        Account, or None when no account was given
    """
    if account is None:
        return None
    if isinstance(account, Account):
        return account
    if isinstance(account, LocalAccount):
        return Account(address=account.address, type="local", signer=account)
    if isinstance(account, str):
        return Account(address=validate_address(account, "account"), type="json-rpc")
    raise TypeError(f"Unsupported account type: {type(account).__name__}")
