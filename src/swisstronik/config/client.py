"""
Client configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ClientConfig(BaseModel):
    """
    Configuration for SwisstronikClient and its HTTP transport.

    Example:
        ```python
        config = ClientConfig(timeout_ms=10000, max_retries=5)
        client = SwisstronikClient(SWISSTRONIK_TESTNET, config=config)
        ```
    """

    model_config = ConfigDict(frozen=True)

    timeout_ms: int = Field(
        default=30000,
        ge=1000,
        description="HTTP request timeout in milliseconds",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        description="Total attempts for transient transport failures",
    )
    retry_base_delay_ms: int = Field(
        default=200,
        ge=0,
        description="Base delay in ms for exponential backoff between attempts",
    )
    encrypt: bool = Field(
        default=True,
        description="Seal call data for eth_call/eth_estimateGas/eth_sendTransaction",
    )
