"""Example: Quote a bridge amount and show the resulting call without sending it."""

from __future__ import annotations

import asyncio
import logging
import os
from decimal import Decimal

from dotenv import load_dotenv

from testnet_bridge import RunnerConfig
from testnet_bridge.evm import QuoteClient, TransactionBuilder, Web3Connections
from testnet_bridge.utils import apply_value_buffer, from_wei, to_wei

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger("quote_only")


async def main() -> None:
    config = RunnerConfig.from_env()
    amount_eth = Decimal(os.getenv("QUOTE_AMOUNT_ETH", str(config.bridge.amount_min_eth)))
    recipient = os.getenv("RECIPIENT", config.chain.zero_fee_recipient)

    connections = Web3Connections(
        config.rpc_url, config.chain, request_timeout=config.request_timeout
    )
    await connections.connect()
    try:
        quote = await QuoteClient(connections).quote(to_wei(amount_eth))
        amount_out_min = quote.amount_out_min(config.bridge.slippage)
        logger.info(
            "%s ETH quotes to %s (min accepted %s)",
            amount_eth,
            from_wei(quote.amount_out),
            from_wei(amount_out_min),
        )

        data = TransactionBuilder(connections).encode_bridge_call(
            amount_in=quote.amount_in,
            amount_out_min=amount_out_min,
            recipient=connections.web3.to_checksum_address(recipient),
        )
        value = apply_value_buffer(quote.amount_in, config.bridge.value_buffer)
        logger.info("value attached: %s ETH", from_wei(value))
        logger.info("call data: %s", data.to_0x_hex())
    finally:
        await connections.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
