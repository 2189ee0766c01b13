"""
SwisstronikClient - JSON-RPC client with an interceptor chain.

Every ``request`` passes through the registered interceptors before it
reaches the transport. With encryption enabled (the default) an
``EncryptionInterceptor`` is installed innermost, so call data is sealed
for ``eth_call``, ``eth_estimateGas`` and ``eth_sendTransaction``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple

from swisstronik.actions.call import call as _call
from swisstronik.actions.call import send_transaction as _send_transaction
from swisstronik.actions.estimate_gas import estimate_gas as _estimate_gas
from swisstronik.actions.prepare import prepare_transaction_request as _prepare_transaction_request
from swisstronik.actions.public import (
    get_balance,
    get_block,
    get_chain_id,
    get_gas_price,
    get_transaction_count,
)
from swisstronik.client.interceptor import EncryptionInterceptor, RequestInterceptor, RpcCall
from swisstronik.config.chains import SWISSTRONIK_TESTNET, Chain
from swisstronik.config.client import ClientConfig
from swisstronik.crypto.encryption import EncryptionGateway
from swisstronik.errors import EncryptionError
from swisstronik.transport.http import HttpTransport, Transport
from swisstronik.types.account import Account, AccountLike, parse_account
from swisstronik.types.block import Block
from swisstronik.types.transaction import PreparedTransactionRequest
from swisstronik.utils.logging import get_logger

_logger = get_logger(__name__)

NODE_PUBLIC_KEY_METHOD = "eth_getNodePublicKey"


class SwisstronikClient:
    """
    Client for a Swisstronik JSON-RPC endpoint.

    Example:
        ```python
        from eth_account import Account as EthAccount
        from swisstronik import SwisstronikClient, SWISSTRONIK_TESTNET

        async with SwisstronikClient(
            SWISSTRONIK_TESTNET,
            account=EthAccount.from_key(os.environ["PRIVATE_KEY"]),
        ) as client:
            gas = await client.estimate_gas(to="0x...", data="0x61bc221a")
            result = await client.call(to="0x...", data="0x61bc221a")
        ```
    """

    def __init__(
        self,
        chain: Chain = SWISSTRONIK_TESTNET,
        *,
        account: Optional[AccountLike] = None,
        transport: Optional[Transport] = None,
        interceptors: Iterable[RequestInterceptor] = (),
        config: Optional[ClientConfig] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            chain: Chain definition (id, RPC URL, fee configuration)
            account: Default sender for actions
            transport: JSON-RPC transport (defaults to HttpTransport on
                ``chain.rpc_url``)
            interceptors: Extra interceptors, outermost first
            config: Client configuration
        """
        self._chain = chain
        self._config = config or ClientConfig()
        self._account = parse_account(account)
        self._transport = transport or HttpTransport(chain.rpc_url, config=self._config)
        self._encryption_gateway = EncryptionGateway(self.get_node_public_key)

        installed = list(interceptors)
        if self._config.encrypt:
            installed.append(EncryptionInterceptor(self._encryption_gateway))
        self._interceptors: Tuple[RequestInterceptor, ...] = tuple(installed)

    async def __aenter__(self) -> "SwisstronikClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport if it holds resources."""
        close = getattr(self._transport, "aclose", None)
        if close is not None:
            await close()

    @property
    def chain(self) -> Chain:
        return self._chain

    @property
    def account(self) -> Optional[Account]:
        return self._account

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def interceptors(self) -> Tuple[RequestInterceptor, ...]:
        return self._interceptors

    @property
    def encryption_gateway(self) -> EncryptionGateway:
        return self._encryption_gateway

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        """
        Send a JSON-RPC request through the interceptor chain.

        Args:
            method: JSON-RPC method name
            params: Positional params

        Returns:
            The ``result`` member of the response
        """
        return await self._dispatch(RpcCall(method, tuple(params or ())), 0)

    async def _dispatch(self, call: RpcCall, index: int) -> Any:
        for position in range(index, len(self._interceptors)):
            interceptor = self._interceptors[position]
            if interceptor.applies_to(call):
                return await interceptor.intercept(
                    call,
                    lambda next_call, _next=position + 1: self._dispatch(next_call, _next),
                )
        return await self._transport.request(call.method, list(call.params))

    async def get_node_public_key(self) -> str:
        """
        Fetch the node's encryption public key.

        Sent straight to the transport; interceptors never see it.

        Raises:
            EncryptionError: If the node returns no key
        """
        result = await self._transport.request(NODE_PUBLIC_KEY_METHOD, ["latest"])
        if isinstance(result, Mapping):
            result = result.get("publicKey")
        if not isinstance(result, str) or not result:
            raise EncryptionError(
                "Node did not return a public key",
                details={"url": self._chain.rpc_url},
            )
        return result

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def get_chain_id(self) -> int:
        return await get_chain_id(self)

    async def get_block(
        self,
        *,
        block_number: Optional[int] = None,
        block_tag: Optional[str] = None,
    ) -> Block:
        return await get_block(self, block_number=block_number, block_tag=block_tag)

    async def get_balance(self, address: str, **kwargs: Any) -> int:
        return await get_balance(self, address, **kwargs)

    async def get_transaction_count(self, address: str, **kwargs: Any) -> int:
        return await get_transaction_count(self, address, **kwargs)

    async def get_gas_price(self) -> int:
        return await get_gas_price(self)

    async def call(self, request: Any = None, **kwargs: Any) -> str:
        return await _call(self, request, **kwargs)

    async def estimate_gas(self, request: Any = None, **kwargs: Any) -> int:
        return await _estimate_gas(self, request, **kwargs)

    async def prepare_transaction_request(
        self, request: Any = None, **kwargs: Any
    ) -> PreparedTransactionRequest:
        return await _prepare_transaction_request(self, request, **kwargs)

    async def send_transaction(self, request: Any = None, **kwargs: Any) -> str:
        return await _send_transaction(self, request, **kwargs)


def create_swisstronik_client(
    chain: Chain = SWISSTRONIK_TESTNET,
    account: Optional[AccountLike] = None,
    *,
    rpc_url: Optional[str] = None,
    **kwargs: Any,
) -> SwisstronikClient:
    """
    Create a client, optionally pointing ``chain`` at another RPC URL.

    Example:
        ```python
        client = create_swisstronik_client(rpc_url="http://localhost:8545")
        ```
    """
    if rpc_url is not None:
        chain = replace(chain, rpc_url=rpc_url)
    return SwisstronikClient(chain, account=account, **kwargs)
