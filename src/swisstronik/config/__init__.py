from swisstronik.config.chains import (
    CHAINS,
    RPC_URL_ENV_VAR,
    SWISSTRONIK_TESTNET,
    Chain,
    FeeConfig,
    NativeCurrency,
    get_chain,
)
from swisstronik.config.client import ClientConfig

__all__ = [
    "Chain",
    "FeeConfig",
    "NativeCurrency",
    "SWISSTRONIK_TESTNET",
    "CHAINS",
    "RPC_URL_ENV_VAR",
    "get_chain",
    "ClientConfig",
]
