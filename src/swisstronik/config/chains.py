from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Optional

__all__ = [
    "NativeCurrency",
    "FeeConfig",
    "Chain",
    "SWISSTRONIK_TESTNET",
    "CHAINS",
    "RPC_URL_ENV_VAR",
    "get_chain",
]

RPC_URL_ENV_VAR = "SWISSTRONIK_RPC_URL"

# Chain-specific request formatter: receives the default-formatted RPC
# request and returns the dict sent to the node.
RequestFormatter = Callable[[Dict[str, Any]], Dict[str, Any]]


@dataclass(frozen=True)
class NativeCurrency:
    name: str
    symbol: str
    decimals: int = 18


@dataclass(frozen=True)
class FeeConfig:
    base_fee_multiplier: float = 1.2
    # Fixed priority fee in wei; skips eth_maxPriorityFeePerGas when set.
    default_priority_fee: Optional[int] = None


@dataclass(frozen=True)
class Chain:
    id: int
    name: str
    rpc_url: str
    native_currency: NativeCurrency
    testnet: bool = False
    explorer_url: Optional[str] = None
    fees: FeeConfig = field(default_factory=FeeConfig)
    format_transaction_request: Optional[RequestFormatter] = None


SWISSTRONIK_TESTNET = Chain(
    id=1291,
    name="Swisstronik Testnet",
    rpc_url="https://json-rpc.testnet.swisstronik.com",
    native_currency=NativeCurrency(name="SWTR", symbol="SWTR", decimals=18),
    testnet=True,
    explorer_url="https://explorer-evm.testnet.swisstronik.com",
)

CHAINS: Dict[str, Chain] = {
    "swisstronik-testnet": SWISSTRONIK_TESTNET,
}


def get_chain(name: str, rpc_url: Optional[str] = None) -> Chain:
    """Look up a known chain, optionally overriding its RPC URL.

    Without an explicit ``rpc_url`` the ``SWISSTRONIK_RPC_URL`` environment
    variable is honoured.
    """
    try:
        chain = CHAINS[name]
    except KeyError:
        raise KeyError(f"Unknown chain {name!r}; known chains: {', '.join(sorted(CHAINS))}") from None

    override = rpc_url or os.environ.get(RPC_URL_ENV_VAR)
    if override:
        return replace(chain, rpc_url=override)
    return chain
