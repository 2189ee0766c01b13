"""
EIP-7702 authorization entries.
"""

from __future__ import annotations

from typing import Any, Dict

import rlp
from eth_keys import keys
from eth_utils import keccak, to_canonical_address
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from swisstronik.utils.encoding import hex_to_quantity, quantity_to_hex
from swisstronik.utils.validation import validate_address

# EIP-7702 signing domain byte
SET_CODE_AUTHORIZATION_MAGIC = b"\x05"


class AuthorizationEntry(BaseModel):
    """
    A signed EIP-7702 delegation.

    The signature is kept split into ``r``, ``s`` and ``y_parity``; ``v``
    (27/28 or 0/1) is accepted as an input alias for ``y_parity``.

    Example:
        ```python
        entry = AuthorizationEntry(
            contract_address="0x...",
            chain_id=1291,
            nonce=0,
            r=..., s=..., y_parity=1,
        )
        authority = entry.recover_authority()
        ```
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    contract_address: str = Field(
        alias="contractAddress",
        validation_alias=AliasChoices("contractAddress", "contract_address", "address"),
    )
    chain_id: int = Field(
        alias="chainId",
        ge=0,
        validation_alias=AliasChoices("chainId", "chain_id"),
    )
    nonce: int = Field(ge=0)
    r: int = Field(ge=0)
    s: int = Field(ge=0)
    y_parity: int = Field(
        alias="yParity",
        validation_alias=AliasChoices("yParity", "y_parity", "v"),
    )

    @field_validator("contract_address", mode="before")
    @classmethod
    def _check_address(cls, value: Any) -> str:
        return validate_address(value, "contractAddress")

    @field_validator("chain_id", "nonce", "r", "s", mode="before")
    @classmethod
    def _parse_quantity(cls, value: Any) -> Any:
        if isinstance(value, str):
            return hex_to_quantity(value)
        return value

    @field_validator("y_parity", mode="before")
    @classmethod
    def _normalize_parity(cls, value: Any) -> int:
        if isinstance(value, str):
            value = hex_to_quantity(value)
        if value in (27, 28):
            value -= 27
        if value not in (0, 1):
            raise ValueError(f"yParity must be 0 or 1, got {value}")
        return value

    def signing_hash(self) -> bytes:
        """``keccak256(0x05 || rlp([chain_id, address, nonce]))``"""
        payload = rlp.encode(
            [self.chain_id, to_canonical_address(self.contract_address), self.nonce]
        )
        return keccak(SET_CODE_AUTHORIZATION_MAGIC + payload)

    def recover_authority(self) -> str:
        """
        Recover the address that signed this authorization.

        Raises:
            eth_keys.exceptions.BadSignature: If the signature is invalid
            eth_keys.exceptions.ValidationError: If r/s are out of range
        """
        signature = keys.Signature(vrs=(self.y_parity, self.r, self.s))
        public_key = signature.recover_public_key_from_msg_hash(self.signing_hash())
        return public_key.to_checksum_address()

    def to_rpc(self) -> Dict[str, str]:
        """Format for JSON-RPC ``authorizationList`` params."""
        return {
            "address": self.contract_address,
            "chainId": quantity_to_hex(self.chain_id),
            "nonce": quantity_to_hex(self.nonce),
            "r": quantity_to_hex(self.r),
            "s": quantity_to_hex(self.s),
            "yParity": quantity_to_hex(self.y_parity),
        }
