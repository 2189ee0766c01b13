"""
HTTP JSON-RPC transport.

Opens a short-lived ``httpx.AsyncClient`` per request and retries
transient network failures and 5xx responses with exponential backoff.
JSON-RPC error objects are never retried. Transaction submissions are only
retried when the request cannot have reached the node, so a timed-out send
is never broadcast twice.
"""

from __future__ import annotations

import itertools
from dataclasses import replace
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

import httpx

from swisstronik.config.client import ClientConfig
from swisstronik.errors import RpcResponseError, TransportError
from swisstronik.utils.logging import get_logger
from swisstronik.utils.retry import RetryConfig, retry_async
from swisstronik.utils.validation import validate_rpc_url

_logger = get_logger(__name__)

NON_IDEMPOTENT_METHODS = frozenset({"eth_sendTransaction", "eth_sendRawTransaction"})

# Raised before any byte of the request is sent
_UNSENT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout)

# Gateway answers for a backend that never saw the request
_UNSENT_STATUS_CODES = frozenset({502, 503})


@runtime_checkable
class Transport(Protocol):
    """Anything that can answer a JSON-RPC request."""

    async def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        ...


class _RetryableHttpStatus(TransportError):
    """5xx response; retried, then surfaced as a TransportError."""


def _request_not_delivered(error: Exception) -> bool:
    if isinstance(error, _RetryableHttpStatus):
        return error.status_code in _UNSENT_STATUS_CODES
    return isinstance(error, _UNSENT_ERRORS)


class HttpTransport:
    """
    JSON-RPC over HTTP POST.

    Example:
        ```python
        transport = HttpTransport("https://json-rpc.testnet.swisstronik.com")
        chain_id = await transport.request("eth_chainId")
        ```
    """

    def __init__(self, url: str, *, config: Optional[ClientConfig] = None) -> None:
        self._url = validate_rpc_url(url, "url")
        self._config = config or ClientConfig()
        self._ids = itertools.count(1)
        self._retry_config = RetryConfig(
            max_attempts=self._config.max_retries,
            base_delay_ms=self._config.retry_base_delay_ms,
            retryable_errors=(httpx.TransportError, _RetryableHttpStatus),
        )
        self._send_retry_config = replace(self._retry_config, should_retry=_request_not_delivered)

    @property
    def url(self) -> str:
        return self._url

    async def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        """
        Send one JSON-RPC call and return its ``result``.

        Raises:
            RpcResponseError: If the node answers with an error object
            TransportError: On network failure, non-2xx status or malformed body
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": list(params) if params is not None else [],
        }

        async def do_request() -> httpx.Response:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.timeout_ms / 1000)
            ) as client:
                response = await client.post(self._url, json=payload)
                if response.status_code >= 500:
                    raise _RetryableHttpStatus(
                        f"RPC request failed: HTTP {response.status_code}",
                        url=self._url,
                        method=method,
                        status_code=response.status_code,
                    )
                return response

        retry_config = (
            self._send_retry_config if method in NON_IDEMPOTENT_METHODS else self._retry_config
        )
        _logger.debug("RPC request", extra={"method": method, "id": payload["id"]})
        try:
            response = await retry_async(do_request, retry_config)
        except _RetryableHttpStatus as e:
            raise TransportError(
                e.message,
                url=self._url,
                method=method,
                status_code=e.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"RPC request failed: {e}",
                url=self._url,
                method=method,
            ) from e

        if response.status_code != 200:
            raise TransportError(
                f"RPC request failed: HTTP {response.status_code}",
                url=self._url,
                method=method,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(
                "RPC response is not valid JSON",
                url=self._url,
                method=method,
                status_code=response.status_code,
            ) from e

        if not isinstance(body, dict):
            raise TransportError(
                "RPC response is not a JSON object",
                url=self._url,
                method=method,
            )

        error = body.get("error")
        if error is not None:
            if not isinstance(error, dict):
                error = {"message": str(error)}
            raise RpcResponseError(
                error.get("message", "Unknown RPC error"),
                rpc_code=error.get("code"),
                data=error.get("data"),
                url=self._url,
                method=method,
            )

        if "result" not in body:
            raise TransportError(
                "RPC response has neither result nor error",
                url=self._url,
                method=method,
            )
        return body["result"]

