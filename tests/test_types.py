from __future__ import annotations

from decimal import Decimal

from testnet_bridge import types
from testnet_bridge.exceptions import RpcError
from testnet_bridge.types import (
    AbandonReason,
    AccountResult,
    AccountState,
    AttemptOutcome,
    BatchSummary,
    OutcomeKind,
    Quote,
    Receipt,
)


def test_quote_amount_out_min_floors():
    assert Quote(amount_in=1, amount_out=999).amount_out_min(Decimal("0.94")) == 939


def test_receipt_succeeded_only_for_status_one():
    assert Receipt(tx_hash="0x01", status=1).succeeded
    assert not Receipt(tx_hash="0x01", status=0).succeeded
    assert not Receipt(tx_hash="0x01", status=None).succeeded


def test_abandoned_account_has_no_tx_hash():
    outcome = AttemptOutcome.retryable(3, RpcError("nonce too low", stage="broadcast"))
    result = AccountResult(
        address="0x" + "11" * 20,
        state=AccountState.ABANDONED,
        attempts=3,
        abandon_reason=AbandonReason.EXHAUSTED,
        last_outcome=outcome,
    )

    assert outcome.kind is OutcomeKind.RETRYABLE
    assert outcome.reason == "nonce too low"
    assert result.tx_hash is None


def test_batch_summary_counts():
    summary = BatchSummary(
        results=[
            AccountResult(address="0x1", state=AccountState.SUCCEEDED, attempts=1),
            AccountResult(address="0x2", state=AccountState.ABANDONED, attempts=10),
            AccountResult(address="0x3", state=AccountState.SUCCEEDED, attempts=2),
        ]
    )

    assert summary.succeeded == 2
    assert summary.abandoned == 1


def test_module_exports_only_used_aliases():
    assert not hasattr(types, "Address")
    assert types.Wei is int
