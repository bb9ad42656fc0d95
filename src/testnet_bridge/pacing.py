"""Delays inserted between accounts and between retries."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable

from .config import PacingConfig

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class PacingScheduler:
    """Randomized inter-account pacing plus a fixed retry delay."""

    def __init__(
        self,
        config: PacingConfig,
        retry_delay: float,
        *,
        sleep: SleepFunc = asyncio.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config
        self._retry_delay = retry_delay
        self._sleep = sleep
        self._rng = rng or random.Random()

    def next_account_delay(self) -> int:
        """Draw a delay from ``[min_delay, max_delay)``."""
        return self._rng.randrange(self._config.min_delay, self._config.max_delay)

    async def between_accounts(self) -> float:
        delay = self.next_account_delay()
        logger.info("Sleeping %ss before the next account..", delay)
        await self._sleep(delay)
        return delay

    async def between_retries(self) -> float:
        delay = self._retry_delay
        logger.info("Sleeping %ss before retrying..", delay)
        await self._sleep(delay)
        return delay
