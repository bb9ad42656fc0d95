"""Command line entry point for the testnet bridge runner."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import random
from collections.abc import Sequence

from eth_account.signers.local import LocalAccount

from .accounts import load_accounts
from .classifier import SubstringClassifier
from .config import RunnerConfig
from .console import configure_logging
from .evm.builder import TransactionBuilder
from .evm.connections import Web3Connections
from .evm.quoter import QuoteClient
from .evm.transactions import TransactionDispatcher
from .exceptions import ConfigDecodeError, ConfigurationError
from .orchestrator import RetryOrchestrator
from .pacing import PacingScheduler
from .pipeline import BridgePipeline
from .types import BatchSummary

logger = logging.getLogger("testnet_bridge")

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_ACCOUNTS_UNREADABLE = 2


def build_orchestrator(
    config: RunnerConfig,
    connections: Web3Connections,
    *,
    rng: random.Random | None = None,
) -> RetryOrchestrator:
    """Wire pipeline, classifier and pacing from ``config``."""

    rng = rng or random.Random()
    pipeline = BridgePipeline(
        config.chain,
        config.bridge,
        QuoteClient(connections),
        TransactionBuilder(connections, max_fee_ceiling=config.bridge.max_fee_per_gas),
        TransactionDispatcher(
            connections,
            receipt_timeout=config.bridge.receipt_timeout,
            poll_interval=config.bridge.receipt_poll_interval,
        ),
        rng=rng,
    )
    pacing = PacingScheduler(config.pacing, config.retry.retry_delay, rng=rng)
    return RetryOrchestrator(
        pipeline,
        SubstringClassifier(config.retry.fatal_substrings),
        pacing,
        max_attempts=config.retry.max_attempts,
        explorer_base_url=config.chain.block_explorer_base_url,
    )


async def run_batch(config: RunnerConfig, accounts: Sequence[LocalAccount]) -> BatchSummary:
    connections = Web3Connections(
        config.rpc_url, config.chain, request_timeout=config.request_timeout
    )
    await connections.connect()
    try:
        return await build_orchestrator(config, connections).run(accounts)
    finally:
        await connections.disconnect()


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="testnet-bridge",
        description="Quote and bridge a random ETH amount for every account in a key file.",
    )
    parser.add_argument("--accounts", help="path to the private key file")
    parser.add_argument("--env-file", help="optional .env file with runner settings")
    parser.add_argument("--no-shuffle", action="store_true", help="process accounts in file order")
    parser.add_argument(
        "--log-level", default=None, help="logging level (default: LOGLEVEL or INFO)"
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    try:
        config = RunnerConfig.from_env(dotenv_path=args.env_file)
    except ConfigurationError as exc:
        configure_logging(args.log_level or os.getenv("LOGLEVEL", "INFO"))
        logger.error("Invalid configuration: %s (%s=%r)", exc, exc.field, exc.value)
        return EXIT_CONFIG_ERROR

    configure_logging(args.log_level or os.getenv("LOGLEVEL", "INFO"))
    logger.info("Starting run against %s", config.rpc_url)

    path = args.accounts or config.accounts_path
    shuffle = config.shuffle and not args.no_shuffle
    try:
        accounts = load_accounts(path, shuffle=shuffle)
    except ConfigDecodeError as exc:
        logger.error("Failed to read accounts: %s", exc)
        return EXIT_ACCOUNTS_UNREADABLE

    if not accounts:
        logger.warning("No accounts found in %s", path)
        return EXIT_OK

    summary = asyncio.run(run_batch(config, accounts))
    logger.info("Finished: %s succeeded, %s abandoned", summary.succeeded, summary.abandoned)
    return EXIT_OK


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()
