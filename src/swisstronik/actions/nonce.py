"""
Nonce resolution.
"""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, Protocol, Tuple, runtime_checkable

from swisstronik.actions.public import get_transaction_count
from swisstronik.types.account import Account
from swisstronik.utils.logging import get_logger

if TYPE_CHECKING:
    from swisstronik.client.client import SwisstronikClient

_logger = get_logger(__name__)


@runtime_checkable
class NonceManager(Protocol):
    """Caller-supplied nonce source."""

    async def consume(self, *, address: str, chain_id: int, client: "SwisstronikClient") -> int:
        """Return the nonce to use for the next transaction and reserve it."""
        ...


class JsonRpcNonceManager:
    """
    Hands out consecutive nonces per ``(address, chain_id)``.

    Each ``consume`` reads the pending transaction count and never returns
    a nonce lower than one it already handed out, so concurrent senders
    sharing this manager do not collide while their transactions are
    still propagating.

    One entry is kept per ``(address, chain_id)``. At most ``max_entries``
    are remembered; the least recently used one is evicted first and that
    sender falls back to the pending count. ``reset`` drops an entry
    explicitly.

    Example:
        ```python
        manager = JsonRpcNonceManager()
        a, b = await asyncio.gather(
            prepare_transaction_request(client, tx1, nonce_manager=manager),
            prepare_transaction_request(client, tx2, nonce_manager=manager),
        )
        ```
    """

    def __init__(self, max_entries: int = 1024) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._max_entries = max_entries
        self._lock = asyncio.Lock()
        self._next: OrderedDict[Tuple[str, int], int] = OrderedDict()

    @property
    def size(self) -> int:
        """Number of senders currently tracked."""
        return len(self._next)

    async def consume(self, *, address: str, chain_id: int, client: "SwisstronikClient") -> int:
        key = (address.lower(), chain_id)
        async with self._lock:
            pending = await get_transaction_count(client, address, block_tag="pending")
            nonce = max(pending, self._next.get(key, 0))
            self._next[key] = nonce + 1
            self._next.move_to_end(key)
            if len(self._next) > self._max_entries:
                self._next.popitem(last=False)
        _logger.debug("Consumed nonce", extra={"nonce": nonce, "chain_id": chain_id})
        return nonce

    def reset(self, *, address: str, chain_id: int) -> None:
        """Forget handed-out nonces, e.g. after a dropped transaction."""
        self._next.pop((address.lower(), chain_id), None)


async def resolve_nonce(
    client: "SwisstronikClient",
    account: Account,
    *,
    chain_id: Callable[[], Awaitable[int]],
    nonce_manager: Optional[NonceManager] = None,
) -> int:
    """
    Next usable nonce for ``account``.

    ``chain_id`` is only awaited when a nonce manager needs it.
    """
    if nonce_manager is not None:
        return await nonce_manager.consume(
            address=account.address,
            chain_id=await chain_id(),
            client=client,
        )
    return await get_transaction_count(client, account.address, block_tag="pending")
