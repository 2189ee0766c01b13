"""
Parsed block header fields used by fee resolution.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from swisstronik.utils.encoding import hex_to_quantity


class Block(BaseModel):
    """Subset of an ``eth_getBlockByNumber`` result, quantities as ints."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    number: Optional[int] = None
    hash: Optional[str] = None
    timestamp: int = 0
    gas_limit: int = Field(default=0, alias="gasLimit")
    gas_used: int = Field(default=0, alias="gasUsed")
    base_fee_per_gas: Optional[int] = Field(default=None, alias="baseFeePerGas")

    @field_validator("number", "timestamp", "gas_limit", "gas_used", "base_fee_per_gas", mode="before")
    @classmethod
    def _parse_quantity(cls, value: Any) -> Any:
        if isinstance(value, str):
            return hex_to_quantity(value)
        return value

    @property
    def supports_eip1559(self) -> bool:
        return self.base_fee_per_gas is not None
