"""Transaction signing, broadcast and receipt handling."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from eth_account.signers.local import LocalAccount
from hexbytes import HexBytes
from web3.exceptions import TimeExhausted, TransactionNotFound

from ..exceptions import (
    DroppedTransactionError,
    RevertedTransactionError,
    RpcError,
    ValidationError,
)
from ..types import Receipt, SignedTransaction, SubmissionHandle, UnsignedTransaction
from ..utils import serialise_receipt, to_0x_hex
from .builder import describe
from .connections import Web3Connections

logger = logging.getLogger(__name__)


def sign_transaction(unsigned: UnsignedTransaction, account: LocalAccount) -> SignedTransaction:
    """Sign ``unsigned`` with ``account``'s key; touches no shared state."""

    if unsigned.sender != account.address:
        raise ValidationError(
            "Transaction sender does not match signing account",
            field="sender",
            value=unsigned.sender,
        )

    try:
        signed = account.sign_transaction(unsigned.as_dict())
    except Exception as exc:
        raise ValidationError(
            "Failed to sign transaction",
            field="transaction",
            details={"error": str(exc), "transaction": describe(unsigned)},
        ) from exc

    return SignedTransaction(
        raw_transaction=HexBytes(signed.raw_transaction),
        tx_hash=HexBytes(signed.hash),
        unsigned=unsigned,
    )


class TransactionDispatcher:
    """Encapsulate raw transaction submission and receipt handling."""

    def __init__(
        self,
        connections: Web3Connections,
        *,
        receipt_timeout: float,
        poll_interval: float = 1.0,
    ) -> None:
        self._connections = connections
        self._receipt_timeout = receipt_timeout
        self._poll_interval = poll_interval

    async def sign_and_send(
        self, unsigned: UnsignedTransaction, account: LocalAccount
    ) -> SubmissionHandle:
        signed = sign_transaction(unsigned, account)
        web3 = self._connections.web3

        try:
            tx_hash = await web3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception as exc:
            raise RpcError(
                f"Broadcast failed: {exc}",
                stage="broadcast",
                endpoint=self._connections.rpc_url,
                details={"error": str(exc), "transaction": describe(unsigned)},
            ) from exc

        tx_hex = to_0x_hex(tx_hash)
        logger.info("Transaction sent from %s hash=%s", account.address, tx_hex)
        return SubmissionHandle(tx_hash=tx_hex, sender=account.address, nonce=unsigned.nonce)

    async def await_receipt(self, handle: SubmissionHandle) -> Receipt:
        """Wait for ``handle`` to be mined and require a successful status."""

        web3 = self._connections.web3
        try:
            raw_receipt = await web3.eth.wait_for_transaction_receipt(
                HexBytes(handle.tx_hash),
                timeout=self._receipt_timeout,
                poll_latency=self._poll_interval,
            )
        except (TimeExhausted, TransactionNotFound, asyncio.TimeoutError) as exc:
            raise DroppedTransactionError(
                f"No receipt for {handle.tx_hash} within {self._receipt_timeout:.0f}s",
                tx_hash=handle.tx_hash,
                timeout=self._receipt_timeout,
                details={"error": str(exc), "nonce": handle.nonce},
            ) from exc
        except Exception as exc:
            raise RpcError(
                f"Receipt polling failed: {exc}",
                stage="receipt",
                endpoint=self._connections.rpc_url,
                details={"error": str(exc), "tx_hash": handle.tx_hash},
            ) from exc

        if raw_receipt is None:
            raise DroppedTransactionError(
                f"Receipt for {handle.tx_hash} is empty",
                tx_hash=handle.tx_hash,
                timeout=self._receipt_timeout,
                details={"nonce": handle.nonce},
            )

        receipt = _to_receipt(handle.tx_hash, raw_receipt)
        if not receipt.succeeded:
            raise RevertedTransactionError(
                f"Transaction {handle.tx_hash} reverted (status={receipt.status})",
                tx_hash=handle.tx_hash,
                receipt=receipt.raw,
            )

        logger.info(
            "Transaction confirmed hash=%s block=%s gas_used=%s",
            handle.tx_hash,
            receipt.block_number,
            receipt.gas_used,
        )
        return receipt


def _to_receipt(tx_hash: str, raw_receipt: Mapping[str, Any]) -> Receipt:
    serialised = serialise_receipt(raw_receipt) or {}
    return Receipt(
        tx_hash=tx_hash,
        status=raw_receipt.get("status"),
        block_number=raw_receipt.get("blockNumber"),
        gas_used=raw_receipt.get("gasUsed"),
        raw=serialised,
    )
