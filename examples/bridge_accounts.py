"""Example: Run the bridge batch programmatically and print a per-account report."""

from __future__ import annotations

import asyncio
import logging
import os

from dotenv import load_dotenv

from testnet_bridge import AccountState, RunnerConfig, load_accounts
from testnet_bridge.cli import run_batch
from testnet_bridge.utils import explorer_tx_url

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger("bridge_accounts")


def main() -> None:
    config = RunnerConfig.from_env()
    accounts = load_accounts(config.accounts_path, shuffle=config.shuffle)
    if not accounts:
        logger.warning("No accounts in %s", config.accounts_path)
        return

    summary = asyncio.run(run_batch(config, accounts))

    for result in summary.results:
        if result.state is AccountState.SUCCEEDED and result.tx_hash:
            link = explorer_tx_url(config.chain.block_explorer_base_url, result.tx_hash)
            logger.info("%s ok after %s attempt(s): %s", result.address, result.attempts, link)
        else:
            reason = result.last_outcome.reason if result.last_outcome else "unknown"
            logger.error(
                "%s abandoned (%s) after %s attempt(s): %s",
                result.address,
                result.abandon_reason.value if result.abandon_reason else "?",
                result.attempts,
                reason,
            )


if __name__ == "__main__":
    main()
