"""
Tests for authorization-list recipient inference and the gas surcharge.
"""

import logging

import pytest

from swisstronik.actions.authorization import (
    AUTHORIZATION_GAS_MULTIPLIER,
    FALLBACK_AUTHORIZATION_GAS,
    estimate_authorization_surcharge,
    resolve_to,
)
from swisstronik.errors import (
    AuthorizationRecoveryError,
    InvalidRequestError,
    RpcResponseError,
    TransportError,
)
from swisstronik.types import Account, AuthorizationEntry, TransactionRequest
from swisstronik.utils.encoding import to_hex_data

from ..conftest import (
    AUTHORITY,
    AUTHORITY_PRIVATE_KEY,
    BALANCE,
    COUNTER_SELECTOR,
    DELEGATE_CONTRACT,
    OTHER_DELEGATE_CONTRACT,
    RECIPIENT,
    SENDER,
    FakeNode,
    sign_authorization,
)


def estimates_by_target(node: FakeNode, table):
    """Answer eth_estimateGas from a {to: hex | Exception} table."""

    def handler(params):
        outcome = table[params[0]["to"]]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    node.estimate_gas_handler = handler


# =============================================================================
# resolve_to Tests
# =============================================================================


class TestResolveTo:
    """Tests for resolve_to."""

    def test_explicit_to(self) -> None:
        entry = sign_authorization(AUTHORITY_PRIVATE_KEY, DELEGATE_CONTRACT)
        request = TransactionRequest(to=RECIPIENT, authorization_list=[entry])
        assert resolve_to(request) == RECIPIENT

    def test_recovers_first_authority(self) -> None:
        first = sign_authorization(AUTHORITY_PRIVATE_KEY, DELEGATE_CONTRACT)
        second = sign_authorization("0x" + "33" * 32, OTHER_DELEGATE_CONTRACT)
        request = TransactionRequest(authorization_list=[first, second])

        assert resolve_to(request) == AUTHORITY

    def test_deployment(self) -> None:
        assert resolve_to(TransactionRequest(data="0x6080")) is None

    def test_unrecoverable_signature(self) -> None:
        broken = AuthorizationEntry(
            contract_address=DELEGATE_CONTRACT, chain_id=1291, nonce=0, r=0, s=0, y_parity=0
        )
        request = TransactionRequest(authorization_list=[broken])

        with pytest.raises(AuthorizationRecoveryError, match="could not infer from authorizationList"):
            resolve_to(request)


# =============================================================================
# Surcharge Tests
# =============================================================================


class TestEstimateAuthorizationSurcharge:
    """Tests for estimate_authorization_surcharge."""

    @pytest.mark.asyncio
    async def test_doubles_and_sums_estimates(self, client, node: FakeNode) -> None:
        estimates_by_target(node, {DELEGATE_CONTRACT: hex(30_000), OTHER_DELEGATE_CONTRACT: hex(45_000)})
        entries = [
            sign_authorization(AUTHORITY_PRIVATE_KEY, DELEGATE_CONTRACT),
            sign_authorization(AUTHORITY_PRIVATE_KEY, OTHER_DELEGATE_CONTRACT),
        ]

        surcharge = await estimate_authorization_surcharge(
            client, account=Account(address=SENDER), authorization_list=entries, data=COUNTER_SELECTOR
        )

        assert surcharge == AUTHORIZATION_GAS_MULTIPLIER * (30_000 + 45_000)

    @pytest.mark.asyncio
    async def test_secondary_request_shape(self, client, node: FakeNode) -> None:
        estimates_by_target(node, {DELEGATE_CONTRACT: hex(30_000)})
        entry = sign_authorization(AUTHORITY_PRIVATE_KEY, DELEGATE_CONTRACT)

        await estimate_authorization_surcharge(
            client, account=Account(address=SENDER), authorization_list=[entry], data=COUNTER_SELECTOR
        )

        (params,) = node.params_of("eth_estimateGas")
        request, block = params
        assert block == "latest"
        assert request["from"] == SENDER
        assert request["to"] == DELEGATE_CONTRACT
        assert request["value"] == hex(BALANCE)
        assert "authorizationList" not in request
        # call data travels sealed
        plaintext, _ = node.open(request["data"])
        assert to_hex_data(plaintext) == COUNTER_SELECTOR

    @pytest.mark.asyncio
    async def test_secondary_request_uses_given_block(self, client, node: FakeNode) -> None:
        estimates_by_target(node, {DELEGATE_CONTRACT: hex(30_000)})
        entry = sign_authorization(AUTHORITY_PRIVATE_KEY, DELEGATE_CONTRACT)

        await estimate_authorization_surcharge(
            client,
            account=Account(address=SENDER),
            authorization_list=[entry],
            data=COUNTER_SELECTOR,
            block="0x64",
        )

        (params,) = node.params_of("eth_estimateGas")
        assert params[1] == "0x64"

    @pytest.mark.asyncio
    async def test_failed_entry_uses_fallback(self, client, node: FakeNode, caplog) -> None:
        estimates_by_target(
            node,
            {
                DELEGATE_CONTRACT: hex(30_000),
                OTHER_DELEGATE_CONTRACT: RpcResponseError("execution reverted", rpc_code=3),
            },
        )
        entries = [
            sign_authorization(AUTHORITY_PRIVATE_KEY, DELEGATE_CONTRACT),
            sign_authorization(AUTHORITY_PRIVATE_KEY, OTHER_DELEGATE_CONTRACT),
        ]

        with caplog.at_level(logging.WARNING, logger="swisstronik"):
            surcharge = await estimate_authorization_surcharge(
                client, account=Account(address=SENDER), authorization_list=entries, data=None
            )

        assert surcharge == 2 * 30_000 + 2 * FALLBACK_AUTHORIZATION_GAS
        assert "using fallback" in caplog.text

    @pytest.mark.asyncio
    async def test_transport_failure_is_absorbed(self, client, node: FakeNode) -> None:
        estimates_by_target(node, {DELEGATE_CONTRACT: TransportError("HTTP 502", status_code=502)})
        entry = sign_authorization(AUTHORITY_PRIVATE_KEY, DELEGATE_CONTRACT)

        surcharge = await estimate_authorization_surcharge(
            client, account=Account(address=SENDER), authorization_list=[entry], data=None
        )

        assert surcharge == 200_000

    @pytest.mark.asyncio
    async def test_empty_list(self, client, node: FakeNode) -> None:
        assert await estimate_authorization_surcharge(
            client, account=None, authorization_list=[], data=None
        ) == 0
        assert node.calls == []

    @pytest.mark.asyncio
    async def test_requires_account(self, client) -> None:
        entry = sign_authorization(AUTHORITY_PRIVATE_KEY, DELEGATE_CONTRACT)
        with pytest.raises(InvalidRequestError, match="account is required"):
            await estimate_authorization_surcharge(
                client, account=None, authorization_list=[entry], data=None
            )
