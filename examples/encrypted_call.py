#!/usr/bin/env python3
"""
Example: encrypted counter call on the Swisstronik testnet

Seals the call data of ``getCounter()`` under the node's public key,
estimates gas for it, executes it with ``eth_call`` and prints the
decrypted result. Prepares (but does not send) a signed-ready request
when a private key is available.

Run this example:
    python examples/encrypted_call.py

    # optional: prepare a full transaction for a funded account
    SWISSTRONIK_PRIVATE_KEY=0x... python examples/encrypted_call.py
"""

import asyncio
import logging
import os

from eth_account import Account

from swisstronik import configure_logging, create_swisstronik_client

COUNTER_CONTRACT = "0xF8bEB8c8Be514772097103e39C2ccE057117CC92"
GET_COUNTER = "0x61bc221a"
CALLER = "0x0497cc339c0397b7addd591b2160dd2f5371ea3b"


async def main() -> None:
    configure_logging(logging.DEBUG)

    private_key = os.environ.get("SWISSTRONIK_PRIVATE_KEY")
    account = Account.from_key(private_key) if private_key else CALLER

    async with create_swisstronik_client(account=account) as client:
        print(f"Chain id:     {await client.get_chain_id()}")

        gas = await client.estimate_gas(to=COUNTER_CONTRACT, data=GET_COUNTER)
        print(f"Gas estimate: {gas}")

        result = await client.call(to=COUNTER_CONTRACT, data=GET_COUNTER)
        print(f"Counter:      {int(result, 16)} ({result})")

        if private_key:
            prepared = await client.prepare_transaction_request(
                to=COUNTER_CONTRACT, data=GET_COUNTER
            )
            print(f"Prepared {prepared.type} request: nonce={prepared.nonce} "
                  f"gas={prepared.gas} maxFeePerGas={prepared.max_fee_per_gas}")


if __name__ == "__main__":
    asyncio.run(main())
