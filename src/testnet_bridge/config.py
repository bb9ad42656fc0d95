"""Configuration containers for the testnet bridge runner."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv
from web3 import Web3
from web3.types import ChecksumAddress

from .exceptions import ConfigurationError

DEFAULT_RPC_URL = "https://arb1.arbitrum.io/rpc"
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_ACCOUNTS_PATH = "./privates.txt"

DEFAULT_AMOUNT_MIN_ETH = Decimal("0.0001")
DEFAULT_AMOUNT_MAX_ETH = Decimal("0.0002")
# Accept up to 6% less than quoted on the destination side.
DEFAULT_SLIPPAGE = Decimal("0.94")
# The bridge skims its messaging fee from msg.value, so send 120% of amountIn.
DEFAULT_VALUE_BUFFER = Decimal("1.20")
DEFAULT_RECEIPT_TIMEOUT = 120.0
DEFAULT_RECEIPT_POLL_INTERVAL = 1.0

DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_RETRY_DELAY = 1.0
DEFAULT_FATAL_SUBSTRINGS: tuple[str, ...] = ("insufficient funds for gas",)

DEFAULT_PACING_MIN = 30
DEFAULT_PACING_MAX = 600

ZERO_ADDRESS = Web3.to_checksum_address("0x0000000000000000000000000000000000000000")


@dataclass(frozen=True)
class ChainConfig:
    """Static addresses and parameters of one source/destination chain pair."""

    quoter_address: ChecksumAddress
    bridge_address: ChecksumAddress
    input_token: ChecksumAddress
    output_token: ChecksumAddress
    zero_fee_recipient: ChecksumAddress
    block_explorer_base_url: str
    default_gas_limit: int
    fee_tier: int = 3000
    destination_chain_id: int = 154
    sqrt_price_limit_x96: int = 0
    adapter_params: bytes = b""
    name: str = "custom"


ARBITRUM_TO_GOERLI = ChainConfig(
    quoter_address=Web3.to_checksum_address("0xb27308f9F90D607463bb33eA1BeBb41C27CE5AB6"),
    bridge_address=Web3.to_checksum_address("0x0A9f824C05A74F577A536A8A0c673183a872Dff4"),
    input_token=Web3.to_checksum_address("0x82af49447d8a07e3bd95bd0d56f35241523fbab1"),
    output_token=Web3.to_checksum_address("0xdd69db25f6d620a7bad3023c5d32761d353d3de9"),
    zero_fee_recipient=ZERO_ADDRESS,
    block_explorer_base_url="https://arbiscan.io/",
    default_gas_limit=200_000,
    name="arbitrum->goerli",
)

CHAIN_BOOKS: Mapping[str, ChainConfig] = {"arbitrum-goerli": ARBITRUM_TO_GOERLI}


@dataclass(frozen=True)
class BridgeConfig:
    """Amounts and transaction policy for a single bridge attempt."""

    amount_min_eth: Decimal = DEFAULT_AMOUNT_MIN_ETH
    amount_max_eth: Decimal = DEFAULT_AMOUNT_MAX_ETH
    slippage: Decimal = DEFAULT_SLIPPAGE
    value_buffer: Decimal = DEFAULT_VALUE_BUFFER
    max_fee_per_gas: int | None = None
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    receipt_poll_interval: float = DEFAULT_RECEIPT_POLL_INTERVAL

    def validate(self) -> None:
        if not Decimal(0) < self.amount_min_eth < self.amount_max_eth:
            raise ConfigurationError(
                "Amount range must satisfy 0 < min < max",
                field="amount_range",
                value=(self.amount_min_eth, self.amount_max_eth),
            )
        if not Decimal(0) < self.slippage <= Decimal(1):
            raise ConfigurationError(
                "Slippage factor must be in (0, 1]", field="slippage", value=self.slippage
            )
        if self.value_buffer < 1:
            raise ConfigurationError(
                "Value buffer must be >= 1", field="value_buffer", value=self.value_buffer
            )
        if self.max_fee_per_gas is not None and self.max_fee_per_gas <= 0:
            raise ConfigurationError(
                "Max fee per gas must be positive",
                field="max_fee_per_gas",
                value=self.max_fee_per_gas,
            )
        if self.receipt_timeout <= 0:
            raise ConfigurationError(
                "Receipt timeout must be positive",
                field="receipt_timeout",
                value=self.receipt_timeout,
            )


@dataclass(frozen=True)
class RetryConfig:
    """Attempt ceiling and fatal error policy per account."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_delay: float = DEFAULT_RETRY_DELAY
    fatal_substrings: tuple[str, ...] = DEFAULT_FATAL_SUBSTRINGS

    def validate(self) -> None:
        if self.max_attempts < 1:
            raise ConfigurationError(
                "Max attempts must be at least 1", field="max_attempts", value=self.max_attempts
            )
        if self.retry_delay < 0:
            raise ConfigurationError(
                "Retry delay cannot be negative", field="retry_delay", value=self.retry_delay
            )


@dataclass(frozen=True)
class PacingConfig:
    """Range of the randomized delay between accounts, in seconds."""

    min_delay: int = DEFAULT_PACING_MIN
    max_delay: int = DEFAULT_PACING_MAX

    def validate(self) -> None:
        if not 0 <= self.min_delay < self.max_delay:
            raise ConfigurationError(
                "Pacing range must satisfy 0 <= min < max",
                field="pacing",
                value=(self.min_delay, self.max_delay),
            )


@dataclass(frozen=True)
class RunnerConfig:
    """Aggregated configuration used to run a batch."""

    rpc_url: str = DEFAULT_RPC_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    accounts_path: str = DEFAULT_ACCOUNTS_PATH
    shuffle: bool = True
    chain: ChainConfig = ARBITRUM_TO_GOERLI
    bridge: BridgeConfig = field(default_factory=BridgeConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    pacing: PacingConfig = field(default_factory=PacingConfig)

    def validate(self) -> RunnerConfig:
        if not self.rpc_url:
            raise ConfigurationError("RPC URL is required", field="rpc_url")
        self.bridge.validate()
        self.retry.validate()
        self.pacing.validate()
        return self

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, *, dotenv_path: str | None = None
    ) -> RunnerConfig:
        """Build a configuration from environment variables.

        When ``environ`` is omitted, an optional ``.env`` file is loaded into
        the process environment first.
        """

        if environ is None:
            load_dotenv(dotenv_path)
            environ = os.environ

        chain_name = environ.get("CHAIN_BOOK", "arbitrum-goerli")
        chain = CHAIN_BOOKS.get(chain_name)
        if chain is None:
            raise ConfigurationError("Unknown chain book", field="CHAIN_BOOK", value=chain_name)

        max_fee = environ.get("MAX_FEE_PER_GAS_WEI")

        bridge = BridgeConfig(
            amount_min_eth=_decimal(environ, "AMOUNT_MIN_ETH", DEFAULT_AMOUNT_MIN_ETH),
            amount_max_eth=_decimal(environ, "AMOUNT_MAX_ETH", DEFAULT_AMOUNT_MAX_ETH),
            slippage=_decimal(environ, "SLIPPAGE_FACTOR", DEFAULT_SLIPPAGE),
            value_buffer=_decimal(environ, "VALUE_BUFFER", DEFAULT_VALUE_BUFFER),
            max_fee_per_gas=_int(environ, "MAX_FEE_PER_GAS_WEI", 0) if max_fee else None,
            receipt_timeout=_float(environ, "RECEIPT_TIMEOUT", DEFAULT_RECEIPT_TIMEOUT),
            receipt_poll_interval=_float(
                environ, "RECEIPT_POLL_INTERVAL", DEFAULT_RECEIPT_POLL_INTERVAL
            ),
        )

        fatal_raw = environ.get("FATAL_ERRORS")
        fatal_substrings = (
            tuple(item.strip() for item in fatal_raw.split(";") if item.strip())
            if fatal_raw
            else DEFAULT_FATAL_SUBSTRINGS
        )
        retry = RetryConfig(
            max_attempts=_int(environ, "MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
            retry_delay=_float(environ, "RETRY_DELAY", DEFAULT_RETRY_DELAY),
            fatal_substrings=fatal_substrings,
        )
        pacing = PacingConfig(
            min_delay=_int(environ, "PACING_MIN", DEFAULT_PACING_MIN),
            max_delay=_int(environ, "PACING_MAX", DEFAULT_PACING_MAX),
        )

        config = cls(
            rpc_url=environ.get("RPC_URL", DEFAULT_RPC_URL),
            request_timeout=_float(environ, "REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
            accounts_path=environ.get("ACCOUNTS_FILE", DEFAULT_ACCOUNTS_PATH),
            shuffle=_bool(environ, "SHUFFLE_ACCOUNTS", True),
            chain=chain,
            bridge=bridge,
            retry=retry,
            pacing=pacing,
        )
        return config.validate()


def _decimal(environ: Mapping[str, str], name: str, default: Decimal) -> Decimal:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return Decimal(raw)
    except InvalidOperation as exc:
        raise ConfigurationError(f"{name} must be a decimal number", field=name, value=raw) from exc


def _int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer", field=name, value=raw) from exc


def _float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number", field=name, value=raw) from exc


def _bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}
