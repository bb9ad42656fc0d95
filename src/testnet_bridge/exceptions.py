"""Exception hierarchy for the testnet bridge runner."""

from typing import Any


class BridgeError(Exception):
    """Base exception for all bridge runner errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigDecodeError(BridgeError):
    """Raised when the account source cannot be read or decoded."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        line_number: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.path = path
        self.line_number = line_number


class ConfigurationError(BridgeError):
    """Raised when runner configuration values are invalid."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class ValidationError(BridgeError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class RpcError(BridgeError):
    """Raised when a node call fails during any pipeline stage."""

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        endpoint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.stage = stage
        self.endpoint = endpoint


class FatalRpcError(RpcError):
    """An RPC failure whose message marks it as not worth retrying."""

    @classmethod
    def from_error(cls, error: BridgeError, matched: str | None = None) -> "FatalRpcError":
        details = dict(error.details)
        if matched is not None:
            details["matched"] = matched
        return cls(
            error.message,
            stage=getattr(error, "stage", None),
            endpoint=getattr(error, "endpoint", None),
            details=details,
        )


class DroppedTransactionError(BridgeError):
    """Raised when a broadcast transaction never produced a receipt."""

    def __init__(
        self,
        message: str,
        tx_hash: str | None = None,
        timeout: float | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.tx_hash = tx_hash
        self.timeout = timeout


class RevertedTransactionError(BridgeError):
    """Raised when a transaction was mined with a failing status."""

    def __init__(
        self,
        message: str,
        tx_hash: str | None = None,
        receipt: dict | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.tx_hash = tx_hash
        self.receipt = receipt or {}
