"""Quoter contract client."""

from __future__ import annotations

import logging

from web3.types import ChecksumAddress

from ..exceptions import RpcError, ValidationError
from ..types import Quote
from .connections import Web3Connections

logger = logging.getLogger(__name__)


class QuoteClient:
    """Read expected swap output from a Uniswap-v3 style quoter.

    The quote is a simulated call, so no slippage is applied here and no
    retry is attempted; failures surface as :class:`RpcError`.
    """

    def __init__(self, connections: Web3Connections) -> None:
        self._connections = connections

    async def get_quote(
        self,
        input_token: ChecksumAddress,
        output_token: ChecksumAddress,
        fee_tier: int,
        amount_in: int,
    ) -> int:
        if amount_in <= 0:
            raise ValidationError(
                "Quote amount must be positive", field="amount_in", value=amount_in
            )

        chain = self._connections.chain
        quoter = self._connections.quoter
        call = quoter.functions.quoteExactInputSingle(
            input_token,
            output_token,
            fee_tier,
            amount_in,
            chain.sqrt_price_limit_x96,
        )

        try:
            amount_out = await call.call()
        except Exception as exc:
            raise RpcError(
                f"Quote call failed: {exc}",
                stage="quote",
                endpoint=str(chain.quoter_address),
                details={"error": str(exc), "amount_in": amount_in},
            ) from exc

        if not isinstance(amount_out, int) or amount_out < 0:
            raise RpcError(
                "Quoter returned a malformed amount",
                stage="quote",
                endpoint=str(chain.quoter_address),
                details={"amount_out": amount_out},
            )
        return amount_out

    async def quote(self, amount_in: int) -> Quote:
        """Quote ``amount_in`` of the configured input token."""

        chain = self._connections.chain
        amount_out = await self.get_quote(
            chain.input_token, chain.output_token, chain.fee_tier, amount_in
        )
        logger.debug("Quoted %s -> %s", amount_in, amount_out)
        return Quote(amount_in=amount_in, amount_out=amount_out)
