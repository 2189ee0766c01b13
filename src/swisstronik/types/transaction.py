"""
Transaction request models.

``TransactionRequest`` is the mutable accumulator filled in by the
preparation pipeline. Once preparation finishes it is frozen into one
variant of a tagged union keyed on ``type``:

    LegacyTransactionRequest   gasPrice
    Eip2930TransactionRequest  gasPrice + accessList
    Eip1559TransactionRequest  maxFeePerGas + maxPriorityFeePerGas
    Eip4844TransactionRequest  fee market + blobs
    Eip7702TransactionRequest  fee market + authorizationList

Each variant rejects the fields that belong to another fee model, so a
request mixing ``gasPrice`` with fee-market fields cannot be constructed.
Attributes are snake_case; wire names (``model_dump(by_alias=True)``) are
the camelCase JSON-RPC names.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Dict, FrozenSet, List, Literal, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from swisstronik.errors import InvalidRequestError
from swisstronik.types.authorization import AuthorizationEntry
from swisstronik.utils.encoding import hex_to_quantity, to_hex_data

TransactionType = Literal["legacy", "eip2930", "eip1559", "eip4844", "eip7702"]

TRANSACTION_TYPE_CODES: Dict[str, str] = {
    "legacy": "0x0",
    "eip2930": "0x1",
    "eip1559": "0x2",
    "eip4844": "0x3",
    "eip7702": "0x4",
}

QUANTITY_FIELDS = (
    "value",
    "nonce",
    "chain_id",
    "gas",
    "gas_price",
    "max_fee_per_gas",
    "max_priority_fee_per_gas",
    "max_fee_per_blob_gas",
)

_FEE_MARKET_FIELDS = frozenset({"max_fee_per_gas", "max_priority_fee_per_gas"})
_BLOB_FIELDS = frozenset({"max_fee_per_blob_gas", "blobs", "blob_versioned_hashes", "sidecars"})
_AUTHORIZATION_FIELDS = frozenset({"authorization_list"})


class BlobSidecar(BaseModel):
    """Blob plus its KZG commitment and proof, all ``0x`` hex."""

    model_config = ConfigDict(frozen=True)

    blob: str
    commitment: str
    proof: str


class _RequestFields(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="allow",
    )

    from_address: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    data: Optional[str] = None
    value: Optional[int] = Field(default=None, ge=0)
    nonce: Optional[int] = Field(default=None, ge=0)
    chain_id: Optional[int] = Field(default=None, ge=0)
    gas: Optional[int] = Field(default=None, ge=0)
    gas_price: Optional[int] = Field(default=None, ge=0)
    max_fee_per_gas: Optional[int] = Field(default=None, ge=0)
    max_priority_fee_per_gas: Optional[int] = Field(default=None, ge=0)
    max_fee_per_blob_gas: Optional[int] = Field(default=None, ge=0)
    access_list: Optional[List[Dict[str, Any]]] = None
    authorization_list: Optional[List[AuthorizationEntry]] = None
    blobs: Optional[List[str]] = None
    blob_versioned_hashes: Optional[List[str]] = None
    sidecars: Optional[List[BlobSidecar]] = None
    type: Optional[TransactionType] = None

    @field_validator(*QUANTITY_FIELDS, mode="before")
    @classmethod
    def _parse_quantity(cls, value: Any) -> Any:
        if isinstance(value, str):
            return hex_to_quantity(value)
        return value

    @field_validator("data", mode="before")
    @classmethod
    def _parse_data(cls, value: Any) -> Any:
        if value is None:
            return None
        return to_hex_data(value)

    @field_validator("blobs", "blob_versioned_hashes", mode="before")
    @classmethod
    def _parse_hex_list(cls, value: Any) -> Any:
        if value is None:
            return None
        return [to_hex_data(item) for item in value]

    @property
    def has_fee_market_fields(self) -> bool:
        return self.max_fee_per_gas is not None or self.max_priority_fee_per_gas is not None

    def to_wire(self) -> Dict[str, Any]:
        """Populated fields under their JSON-RPC names (values not hex-encoded)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class TransactionRequest(_RequestFields):
    """
    Mutable accumulator for a transaction being prepared.

    Example:
        ```python
        request = TransactionRequest(to="0x...", data="0x61bc221a")
        request = TransactionRequest.model_validate({"to": "0x...", "maxFeePerGas": "0x3b9aca00"})
        ```
    """

    @classmethod
    def coerce(
        cls,
        request: Union["_RequestFields", Mapping[str, Any], None] = None,
        **fields: Any,
    ) -> "TransactionRequest":
        """
        Build a fresh accumulator from a model, a mapping and/or keyword fields.

        The input is copied; the caller's object is never mutated.
        """
        if request is None:
            payload: Dict[str, Any] = {}
        elif isinstance(request, _RequestFields):
            payload = request.to_wire()
        elif isinstance(request, Mapping):
            payload = dict(request)
        else:
            raise TypeError(f"Unsupported request type: {type(request).__name__}")

        payload.update({k: v for k, v in fields.items() if v is not None})
        return cls.model_validate(payload)

    def freeze(self) -> "PreparedTransactionRequest":
        """
        Produce the immutable, type-checked form of this request.

        Raises:
            InvalidRequestError: If the populated fields do not fit ``type``
        """
        payload = self.to_wire()
        if self.type is None:
            return UntypedTransactionRequest.model_validate(payload)

        try:
            return _TYPED_REQUEST_ADAPTER.validate_python(payload)
        except ValidationError as exc:
            messages = [error["msg"] for error in exc.errors()]
            raise InvalidRequestError(
                f"Invalid {self.type} transaction request: {'; '.join(messages)}",
                field="type",
                details={"type": self.type, "errors": messages},
            ) from exc


class UntypedTransactionRequest(_RequestFields):
    """Frozen request prepared without type resolution."""

    model_config = ConfigDict(frozen=True)


class _TypedTransactionRequest(_RequestFields):
    model_config = ConfigDict(frozen=True)

    _foreign_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def _reject_foreign_fields(self) -> "_TypedTransactionRequest":
        for name in sorted(self._foreign_fields):
            if getattr(self, name) is not None:
                wire_name = type(self).model_fields[name].alias or name
                raise ValueError(f"{wire_name} is not allowed for {self.type} transactions")
        return self


class LegacyTransactionRequest(_TypedTransactionRequest):
    type: Literal["legacy"] = "legacy"

    _foreign_fields: ClassVar[FrozenSet[str]] = (
        _FEE_MARKET_FIELDS | _BLOB_FIELDS | _AUTHORIZATION_FIELDS | {"access_list"}
    )


class Eip2930TransactionRequest(_TypedTransactionRequest):
    type: Literal["eip2930"] = "eip2930"

    _foreign_fields: ClassVar[FrozenSet[str]] = (
        _FEE_MARKET_FIELDS | _BLOB_FIELDS | _AUTHORIZATION_FIELDS
    )


class Eip1559TransactionRequest(_TypedTransactionRequest):
    type: Literal["eip1559"] = "eip1559"

    _foreign_fields: ClassVar[FrozenSet[str]] = (
        frozenset({"gas_price"}) | _BLOB_FIELDS | _AUTHORIZATION_FIELDS
    )


class Eip4844TransactionRequest(_TypedTransactionRequest):
    type: Literal["eip4844"] = "eip4844"

    _foreign_fields: ClassVar[FrozenSet[str]] = frozenset({"gas_price"}) | _AUTHORIZATION_FIELDS

    @model_validator(mode="after")
    def _require_blob_fields(self) -> "Eip4844TransactionRequest":
        if self.to is None:
            raise ValueError("to is required for eip4844 transactions")
        if not self.blob_versioned_hashes and not self.blobs:
            raise ValueError("blobVersionedHashes or blobs are required for eip4844 transactions")
        return self


class Eip7702TransactionRequest(_TypedTransactionRequest):
    type: Literal["eip7702"] = "eip7702"

    _foreign_fields: ClassVar[FrozenSet[str]] = frozenset({"gas_price"}) | _BLOB_FIELDS

    @model_validator(mode="after")
    def _require_authorizations(self) -> "Eip7702TransactionRequest":
        if not self.authorization_list:
            raise ValueError("authorizationList is required for eip7702 transactions")
        return self


TypedTransactionRequest = Annotated[
    Union[
        LegacyTransactionRequest,
        Eip2930TransactionRequest,
        Eip1559TransactionRequest,
        Eip4844TransactionRequest,
        Eip7702TransactionRequest,
    ],
    Field(discriminator="type"),
]

PreparedTransactionRequest = Union[
    LegacyTransactionRequest,
    Eip2930TransactionRequest,
    Eip1559TransactionRequest,
    Eip4844TransactionRequest,
    Eip7702TransactionRequest,
    UntypedTransactionRequest,
]

_TYPED_REQUEST_ADAPTER: TypeAdapter = TypeAdapter(TypedTransactionRequest)
