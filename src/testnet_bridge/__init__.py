"""Testnet Bridge - batch quote-and-bridge runner.

Drives a list of accounts one at a time through a quote, a ``swapAndBridge``
transaction and its confirmation, retrying transient failures and pacing
between accounts.
"""

from .accounts import load_accounts
from .classifier import ErrorClassifier, SubstringClassifier, classify
from .config import (
    ARBITRUM_TO_GOERLI,
    BridgeConfig,
    ChainConfig,
    PacingConfig,
    RetryConfig,
    RunnerConfig,
)
from .exceptions import (
    BridgeError,
    ConfigDecodeError,
    ConfigurationError,
    DroppedTransactionError,
    FatalRpcError,
    RevertedTransactionError,
    RpcError,
    ValidationError,
)
from .orchestrator import RetryOrchestrator
from .pacing import PacingScheduler
from .pipeline import BridgePipeline
from .types import (
    AbandonReason,
    AccountResult,
    AccountState,
    AttemptOutcome,
    BatchSummary,
    OutcomeKind,
    Quote,
    Receipt,
    SubmissionHandle,
    UnsignedTransaction,
    Verdict,
)
from .utils import apply_slippage, apply_value_buffer

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "ARBITRUM_TO_GOERLI",
    "BridgeConfig",
    "ChainConfig",
    "PacingConfig",
    "RetryConfig",
    "RunnerConfig",
    # Runner
    "BridgePipeline",
    "PacingScheduler",
    "RetryOrchestrator",
    "load_accounts",
    # Classification
    "ErrorClassifier",
    "SubstringClassifier",
    "classify",
    # Types
    "AbandonReason",
    "AccountResult",
    "AccountState",
    "AttemptOutcome",
    "BatchSummary",
    "OutcomeKind",
    "Quote",
    "Receipt",
    "SubmissionHandle",
    "UnsignedTransaction",
    "Verdict",
    # Exceptions
    "BridgeError",
    "ConfigDecodeError",
    "ConfigurationError",
    "DroppedTransactionError",
    "FatalRpcError",
    "RevertedTransactionError",
    "RpcError",
    "ValidationError",
    # Utility functions
    "apply_slippage",
    "apply_value_buffer",
]
