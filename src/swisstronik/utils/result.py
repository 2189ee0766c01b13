"""
Explicit success/failure values for best-effort calls.

Used where a failure must be absorbed at the call site instead of aborting
the caller, so the degrade-on-error policy is visible in the code that
applies it:

    result = await attempt(estimate())
    gas = result.unwrap_or(FALLBACK_GAS)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Generic, Tuple, Type, TypeVar, Union

from swisstronik.errors import SwisstronikError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed result holding the error that was absorbed."""

    error: Exception

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap_or(self, default: T) -> T:
        return default


Result = Union[Ok[T], Err]


async def attempt(
    awaitable: Awaitable[T],
    errors: Tuple[Type[Exception], ...] = (SwisstronikError,),
) -> Result[T]:
    """
    Await ``awaitable`` and capture listed errors as ``Err``.

    Errors outside ``errors`` propagate unchanged.
    """
    try:
        return Ok(await awaitable)
    except errors as e:
        return Err(e)
