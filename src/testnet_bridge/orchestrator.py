"""Per-account retry loop and sequential batch driver."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pprint import pformat
from typing import Protocol

from eth_account.signers.local import LocalAccount

from .classifier import ErrorClassifier
from .config import DEFAULT_MAX_ATTEMPTS
from .exceptions import (
    BridgeError,
    ConfigurationError,
    FatalRpcError,
    RevertedTransactionError,
    RpcError,
)
from .pacing import PacingScheduler
from .types import (
    AbandonReason,
    AccountResult,
    AccountState,
    AttemptOutcome,
    BatchSummary,
    BridgeResult,
    OutcomeKind,
    Verdict,
)
from .utils import explorer_tx_url

logger = logging.getLogger(__name__)


class AttemptRunner(Protocol):
    async def run(self, account: LocalAccount) -> BridgeResult: ...


class RetryOrchestrator:
    """Run the bridge pipeline for accounts one at a time with bounded retry.

    Per account the loop moves from attempt ``n`` to ``n + 1`` only on a
    retryable failure while attempts remain; a fatal verdict or the attempt
    ceiling abandons the account and the batch moves on.
    """

    def __init__(
        self,
        pipeline: AttemptRunner,
        classifier: ErrorClassifier,
        pacing: PacingScheduler,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        explorer_base_url: str | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ConfigurationError(
                "Max attempts must be at least 1", field="max_attempts", value=max_attempts
            )
        self._pipeline = pipeline
        self._classifier = classifier
        self._pacing = pacing
        self._max_attempts = max_attempts
        self._explorer_base_url = explorer_base_url

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    async def attempt(self, account: LocalAccount, attempt: int) -> AttemptOutcome:
        """Run the pipeline once and tag the result."""

        try:
            result = await self._pipeline.run(account)
        except BridgeError as exc:
            logger.error(
                "%s: attempt %s/%s failed: %s",
                account.address,
                attempt,
                self._max_attempts,
                exc,
            )
            logger.error("%s: %s details=%s", account.address, type(exc).__name__, exc.details)
            if isinstance(exc, RevertedTransactionError):
                logger.error(
                    "%s: receipt for %s:\n%s", account.address, exc.tx_hash, pformat(exc.receipt)
                )
            if self._classifier(exc) is Verdict.FATAL:
                return AttemptOutcome.fatal(attempt, self._as_fatal(exc))
            return AttemptOutcome.retryable(attempt, exc)

        return AttemptOutcome.success(attempt, result)

    async def run_account(self, account: LocalAccount) -> AccountResult:
        """Drive one account to a terminal state."""

        address = account.address
        outcome: AttemptOutcome | None = None

        for attempt in range(1, self._max_attempts + 1):
            outcome = await self.attempt(account, attempt)

            if outcome.kind is OutcomeKind.SUCCESS:
                self._log_success(address, outcome)
                return AccountResult(
                    address=address,
                    state=AccountState.SUCCEEDED,
                    attempts=attempt,
                    last_outcome=outcome,
                )

            if outcome.kind is OutcomeKind.FATAL:
                logger.warning(
                    "%s: abandoned after attempt %s, fatal error: %s",
                    address,
                    attempt,
                    outcome.reason,
                )
                return AccountResult(
                    address=address,
                    state=AccountState.ABANDONED,
                    attempts=attempt,
                    abandon_reason=AbandonReason.FATAL,
                    last_outcome=outcome,
                )

            if attempt < self._max_attempts:
                logger.info("%s: retrying %s/%s", address, attempt, self._max_attempts)
                await self._pacing.between_retries()

        logger.warning("%s: abandoned, all %s attempts failed", address, self._max_attempts)
        return AccountResult(
            address=address,
            state=AccountState.ABANDONED,
            attempts=self._max_attempts,
            abandon_reason=AbandonReason.EXHAUSTED,
            last_outcome=outcome,
        )

    async def run(self, accounts: Sequence[LocalAccount]) -> BatchSummary:
        """Process every account sequentially, pacing after each success."""

        summary = BatchSummary()
        total = len(accounts)

        for index, account in enumerate(accounts, start=1):
            logger.info("Account %s/%s: %s", index, total, account.address)
            result = await self.run_account(account)
            summary.results.append(result)

            if result.state is AccountState.SUCCEEDED and index < total:
                await self._pacing.between_accounts()

        logger.info(
            "Batch finished: %s succeeded, %s abandoned of %s",
            summary.succeeded,
            summary.abandoned,
            total,
        )
        return summary

    def _as_fatal(self, error: BridgeError) -> BridgeError:
        if isinstance(error, FatalRpcError) or not isinstance(error, RpcError):
            return error
        matched = getattr(self._classifier, "matched", None)
        return FatalRpcError.from_error(error, matched(error) if matched else None)

    def _log_success(self, address: str, outcome: AttemptOutcome) -> None:
        result = outcome.result
        if result is None:
            logger.info("%s: transaction confirmed", address)
            return
        tx_hash = result.handle.tx_hash
        link = (
            explorer_tx_url(self._explorer_base_url, tx_hash)
            if self._explorer_base_url
            else tx_hash
        )
        logger.info("%s: transaction confirmed on attempt %s: %s", address, outcome.attempt, link)
