"""Fee-market transaction assembly for bridge calls."""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

from hexbytes import HexBytes
from web3.types import ChecksumAddress

from ..exceptions import RpcError, ValidationError
from ..types import UnsignedTransaction
from .connections import Web3Connections

logger = logging.getLogger(__name__)

T = TypeVar("T")


def build_transaction(
    *,
    sender: ChecksumAddress,
    to: ChecksumAddress,
    value: int,
    data: bytes | str,
    nonce: int,
    chain_id: int,
    gas_limit: int,
    gas_price: int,
    max_fee_ceiling: int | None = None,
) -> UnsignedTransaction:
    """Assemble an EIP-1559 transaction priced at the node's gas price.

    Both fee fields take the gas price, capped by ``max_fee_ceiling`` when set.
    """
    if value < 0:
        raise ValidationError("Transaction value cannot be negative", field="value", value=value)
    if gas_price <= 0:
        raise ValidationError("Gas price must be positive", field="gas_price", value=gas_price)

    fee = gas_price if max_fee_ceiling is None else min(gas_price, max_fee_ceiling)
    return UnsignedTransaction(
        sender=sender,
        to=to,
        value=value,
        data=HexBytes(data),
        nonce=nonce,
        chain_id=chain_id,
        gas_limit=gas_limit,
        max_priority_fee_per_gas=fee,
        max_fee_per_gas=fee,
    )


class TransactionBuilder:
    """Fetch fresh network parameters and build a gas-estimated transaction."""

    def __init__(self, connections: Web3Connections, *, max_fee_ceiling: int | None = None):
        self._connections = connections
        self._max_fee_ceiling = max_fee_ceiling

    def encode_bridge_call(
        self,
        *,
        amount_in: int,
        amount_out_min: int,
        recipient: ChecksumAddress,
    ) -> HexBytes:
        """Encode ``swapAndBridge`` call data with the sender as recipient and refund address."""

        chain = self._connections.chain
        encoded = self._connections.bridge.encode_abi(
            "swapAndBridge",
            args=[
                amount_in,
                amount_out_min,
                chain.destination_chain_id,
                recipient,
                recipient,
                chain.zero_fee_recipient,
                chain.adapter_params,
            ],
        )
        return HexBytes(encoded)

    async def prepare(
        self,
        *,
        sender: ChecksumAddress,
        to: ChecksumAddress,
        value: int,
        data: bytes | str,
    ) -> UnsignedTransaction:
        web3 = self._connections.web3
        chain = self._connections.chain

        gas_price = await self._fetch("gas_price", web3.eth.gas_price)
        nonce = await self._fetch("nonce", web3.eth.get_transaction_count(sender))
        chain_id = await self._fetch("chain_id", web3.eth.chain_id)

        tx = build_transaction(
            sender=sender,
            to=to,
            value=value,
            data=data,
            nonce=nonce,
            chain_id=chain_id,
            gas_limit=chain.default_gas_limit,
            gas_price=gas_price,
            max_fee_ceiling=self._max_fee_ceiling,
        )

        tx.gas_limit = await self._fetch("estimate_gas", web3.eth.estimate_gas(tx.as_dict()))
        logger.debug(
            "Prepared tx nonce=%s chain=%s gas=%s fee=%s",
            nonce,
            chain_id,
            tx.gas_limit,
            tx.max_fee_per_gas,
        )
        return tx

    async def _fetch(self, stage: str, pending: Awaitable[T]) -> T:
        try:
            return await pending
        except Exception as exc:
            raise RpcError(
                f"{stage} failed: {exc}",
                stage=stage,
                endpoint=self._connections.rpc_url,
                details={"error": str(exc)},
            ) from exc


def describe(tx: UnsignedTransaction) -> dict[str, Any]:
    """Return a log-friendly view of a transaction."""

    return {
        "from": tx.sender,
        "to": tx.to,
        "value": tx.value,
        "nonce": tx.nonce,
        "chainId": tx.chain_id,
        "gas": tx.gas_limit,
        "maxFeePerGas": tx.max_fee_per_gas,
    }
