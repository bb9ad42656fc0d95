"""One end-to-end bridge attempt: quote, build, sign, broadcast, confirm."""

from __future__ import annotations

import logging
import random

from eth_account.signers.local import LocalAccount

from .config import BridgeConfig, ChainConfig
from .evm.builder import TransactionBuilder
from .evm.quoter import QuoteClient
from .evm.transactions import TransactionDispatcher
from .types import BridgeResult
from .utils import apply_value_buffer, explorer_tx_url, from_wei, random_amount_wei

logger = logging.getLogger(__name__)


class BridgePipeline:
    """Drive a single ``swapAndBridge`` attempt for one account.

    Every stage raises a :class:`~testnet_bridge.exceptions.BridgeError`
    subclass on failure; retry decisions are left to the caller.
    """

    def __init__(
        self,
        chain: ChainConfig,
        config: BridgeConfig,
        quoter: QuoteClient,
        builder: TransactionBuilder,
        dispatcher: TransactionDispatcher,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._chain = chain
        self._config = config
        self._quoter = quoter
        self._builder = builder
        self._dispatcher = dispatcher
        self._rng = rng or random.Random()

    async def run(self, account: LocalAccount) -> BridgeResult:
        address = account.address
        amount_in = random_amount_wei(
            self._config.amount_min_eth, self._config.amount_max_eth, self._rng
        )
        logger.info("%s: bridging %s ETH..", address, from_wei(amount_in))

        quote = await self._quoter.quote(amount_in)
        amount_out_min = quote.amount_out_min(self._config.slippage)
        logger.info(
            "%s: quoter returned %s (min accepted %s)",
            address,
            from_wei(quote.amount_out),
            from_wei(amount_out_min),
        )

        data = self._builder.encode_bridge_call(
            amount_in=amount_in, amount_out_min=amount_out_min, recipient=address
        )
        value = apply_value_buffer(amount_in, self._config.value_buffer)
        unsigned = await self._builder.prepare(
            sender=address, to=self._chain.bridge_address, value=value, data=data
        )

        handle = await self._dispatcher.sign_and_send(unsigned, account)
        logger.info(
            "%s: %s", address, explorer_tx_url(self._chain.block_explorer_base_url, handle.tx_hash)
        )

        receipt = await self._dispatcher.await_receipt(handle)
        return BridgeResult(
            quote=quote,
            amount_out_min=amount_out_min,
            value=value,
            handle=handle,
            receipt=receipt,
        )
