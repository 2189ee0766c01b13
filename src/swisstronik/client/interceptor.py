"""
Request interceptors for SwisstronikClient.

An interceptor wraps ``dispatch`` for the RPC methods it declares:

    result = await interceptor.intercept(call, dispatch)

Interceptors compose in registration order, the first one registered
being the outermost.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, ClassVar, FrozenSet, Mapping, Tuple

from swisstronik.crypto.encryption import EncryptionGateway
from swisstronik.utils.encoding import to_hex_data
from swisstronik.utils.logging import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class RpcCall:
    """One JSON-RPC invocation as seen by interceptors."""

    method: str
    params: Tuple[Any, ...] = field(default_factory=tuple)

    def with_params(self, *params: Any) -> "RpcCall":
        return RpcCall(method=self.method, params=tuple(params))


Dispatch = Callable[[RpcCall], Awaitable[Any]]


class RequestInterceptor(ABC):
    """
    Middleware around ``SwisstronikClient.request``.

    Subclasses set ``methods``; an empty set applies to every method.
    """

    methods: ClassVar[FrozenSet[str]] = frozenset()

    def applies_to(self, call: RpcCall) -> bool:
        return not self.methods or call.method in self.methods

    @abstractmethod
    async def intercept(self, call: RpcCall, dispatch: Dispatch) -> Any:
        """Handle ``call``, delegating to ``dispatch`` for the next layer."""


class EncryptionInterceptor(RequestInterceptor):
    """
    Seals call data for methods that execute contract code.

    The first param must carry both ``to`` and ``data``; value transfers
    and deployments pass through untouched and never fetch the node key.
    Only ``eth_call`` results are unsealed.
    """

    methods: ClassVar[FrozenSet[str]] = frozenset(
        {"eth_call", "eth_estimateGas", "eth_sendTransaction"}
    )
    decrypted_methods: ClassVar[FrozenSet[str]] = frozenset({"eth_call"})

    def __init__(self, gateway: EncryptionGateway) -> None:
        self._gateway = gateway

    def should_encrypt(self, call: RpcCall) -> bool:
        if call.method not in self.methods or not call.params:
            return False
        request = call.params[0]
        return isinstance(request, Mapping) and bool(request.get("to")) and bool(request.get("data"))

    async def intercept(self, call: RpcCall, dispatch: Dispatch) -> Any:
        if not self.should_encrypt(call):
            return await dispatch(call)

        request = call.params[0]
        node_key = await self._gateway.get_node_public_key()
        envelope = self._gateway.seal(node_key, request["data"])
        sealed = {**request, "data": envelope.ciphertext}
        _logger.debug("Sealed call data", extra={"method": call.method})

        result = await dispatch(call.with_params(sealed, *call.params[1:]))
        if call.method not in self.decrypted_methods:
            return result
        return to_hex_data(self._gateway.unseal(node_key, result, envelope.encryption_key))
