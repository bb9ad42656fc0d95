"""Type definitions and data models for the testnet bridge runner."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from hexbytes import HexBytes
from web3.types import ChecksumAddress

from .exceptions import BridgeError
from .utils import apply_slippage

Wei = int  # Amount in the token's base unit

EIP1559_TX_TYPE = 2


class Verdict(Enum):
    """Retry eligibility of a failed attempt."""

    RETRYABLE = "retryable"
    FATAL = "fatal"


class OutcomeKind(Enum):
    """Tag of a single attempt's result."""

    SUCCESS = "success"
    RETRYABLE = "retryable"
    FATAL = "fatal"


class AccountState(Enum):
    """Terminal state of one account's run."""

    SUCCEEDED = "succeeded"
    ABANDONED = "abandoned"


class AbandonReason(Enum):
    """Why an account was abandoned."""

    FATAL = "fatal"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class Quote:
    """Point estimate of the output amount for an input amount."""

    amount_in: Wei
    amount_out: Wei

    def amount_out_min(self, slippage: Decimal) -> Wei:
        return apply_slippage(self.amount_out, slippage)


@dataclass
class UnsignedTransaction:
    """Fee-market transaction request; only ``gas_limit`` changes after construction."""

    sender: ChecksumAddress
    to: ChecksumAddress
    value: Wei
    data: HexBytes
    nonce: int
    chain_id: int
    gas_limit: int
    max_priority_fee_per_gas: Wei
    max_fee_per_gas: Wei

    def as_dict(self) -> dict[str, Any]:
        """Return the transaction as web3 transaction params."""

        return {
            "type": EIP1559_TX_TYPE,
            "from": self.sender,
            "to": self.to,
            "value": self.value,
            "data": self.data,
            "nonce": self.nonce,
            "chainId": self.chain_id,
            "gas": self.gas_limit,
            "maxPriorityFeePerGas": self.max_priority_fee_per_gas,
            "maxFeePerGas": self.max_fee_per_gas,
        }


@dataclass(frozen=True)
class SignedTransaction:
    """Serialized, signed payload ready for broadcast."""

    raw_transaction: HexBytes
    tx_hash: HexBytes
    unsigned: UnsignedTransaction


@dataclass(frozen=True)
class SubmissionHandle:
    """Identifies a broadcast transaction awaiting confirmation."""

    tx_hash: str
    sender: ChecksumAddress
    nonce: int


@dataclass(frozen=True)
class Receipt:
    """Mined transaction receipt reduced to the fields the runner inspects."""

    tx_hash: str
    status: int | None
    block_number: int | None = None
    gas_used: int | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == 1


@dataclass(frozen=True)
class BridgeResult:
    """Data produced by one successful end-to-end pipeline run."""

    quote: Quote
    amount_out_min: Wei
    value: Wei
    handle: SubmissionHandle
    receipt: Receipt


@dataclass(frozen=True)
class AttemptOutcome:
    """Tagged result of one attempt for one account."""

    kind: OutcomeKind
    attempt: int
    reason: str | None = None
    error: BridgeError | None = None
    result: BridgeResult | None = None

    @classmethod
    def success(cls, attempt: int, result: BridgeResult) -> AttemptOutcome:
        return cls(kind=OutcomeKind.SUCCESS, attempt=attempt, result=result)

    @classmethod
    def retryable(cls, attempt: int, error: BridgeError) -> AttemptOutcome:
        return cls(kind=OutcomeKind.RETRYABLE, attempt=attempt, reason=str(error), error=error)

    @classmethod
    def fatal(cls, attempt: int, error: BridgeError) -> AttemptOutcome:
        return cls(kind=OutcomeKind.FATAL, attempt=attempt, reason=str(error), error=error)


@dataclass
class AccountResult:
    """Final state of one account after the retry loop."""

    address: ChecksumAddress
    state: AccountState
    attempts: int
    abandon_reason: AbandonReason | None = None
    last_outcome: AttemptOutcome | None = None

    @property
    def tx_hash(self) -> str | None:
        if self.last_outcome is None or self.last_outcome.result is None:
            return None
        return self.last_outcome.result.handle.tx_hash


@dataclass
class BatchSummary:
    """Results of a full run over all accounts."""

    results: list[AccountResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.state is AccountState.SUCCEEDED)

    @property
    def abandoned(self) -> int:
        return sum(1 for result in self.results if result.state is AccountState.ABANDONED)
