from __future__ import annotations

import asyncio
from decimal import Decimal
from types import SimpleNamespace
from typing import Any, cast

import pytest

from testnet_bridge.config import ARBITRUM_TO_GOERLI
from testnet_bridge.evm.connections import Web3Connections
from testnet_bridge.evm.quoter import QuoteClient
from testnet_bridge.exceptions import RpcError, ValidationError


class DummyQuoter:
    """Stand-in for the quoter contract's ``functions`` namespace."""

    def __init__(self, result: Any = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[tuple[Any, ...]] = []
        self.functions = SimpleNamespace(quoteExactInputSingle=self._quote)

    def _quote(self, *args: Any) -> SimpleNamespace:
        self.calls.append(args)

        async def call() -> Any:
            if self.error is not None:
                raise self.error
            return self.result

        return SimpleNamespace(call=call)


def _client(quoter: DummyQuoter) -> QuoteClient:
    connections = SimpleNamespace(quoter=quoter, chain=ARBITRUM_TO_GOERLI, rpc_url="http://node")
    return QuoteClient(cast(Web3Connections, connections))


def test_quote_uses_configured_pair():
    quoter = DummyQuoter(result=1_850_000_000)

    quote = asyncio.run(_client(quoter).quote(10**15))

    assert quote.amount_in == 10**15
    assert quote.amount_out == 1_850_000_000
    assert quoter.calls == [
        (
            ARBITRUM_TO_GOERLI.input_token,
            ARBITRUM_TO_GOERLI.output_token,
            ARBITRUM_TO_GOERLI.fee_tier,
            10**15,
            0,
        )
    ]


def test_quote_amount_out_min_uses_slippage():
    quote = asyncio.run(_client(DummyQuoter(result=1000)).quote(100))
    assert quote.amount_out_min(Decimal("0.94")) == 940


@pytest.mark.parametrize("amount", [0, -1])
def test_non_positive_amount_is_rejected(amount):
    quoter = DummyQuoter(result=1)

    with pytest.raises(ValidationError):
        asyncio.run(_client(quoter).get_quote("0x1", "0x2", 3000, amount))

    assert quoter.calls == []


def test_call_failure_is_rpc_error():
    quoter = DummyQuoter(error=ConnectionError("503 Service Unavailable"))

    with pytest.raises(RpcError) as excinfo:
        asyncio.run(_client(quoter).quote(100))

    err = excinfo.value
    assert err.stage == "quote"
    assert "503 Service Unavailable" in str(err)
    assert err.details["amount_in"] == 100


def test_malformed_result_is_rpc_error():
    with pytest.raises(RpcError, match="malformed"):
        asyncio.run(_client(DummyQuoter(result="lots")).quote(100))
