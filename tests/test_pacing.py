"""Tests for inter-account and retry pacing."""

from __future__ import annotations

import asyncio
import random

from testnet_bridge.config import PacingConfig
from testnet_bridge.pacing import PacingScheduler


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)


def test_account_delay_is_drawn_from_half_open_range() -> None:
    sleep = RecordingSleep()
    scheduler = PacingScheduler(
        PacingConfig(min_delay=30, max_delay=33), 1.0, sleep=sleep, rng=random.Random(3)
    )

    async def drive() -> None:
        for _ in range(300):
            await scheduler.between_accounts()

    asyncio.run(drive())

    assert set(sleep.calls) == {30, 31, 32}


def test_default_range_bounds() -> None:
    scheduler = PacingScheduler(PacingConfig(), 1.0, rng=random.Random(11))
    delays = [scheduler.next_account_delay() for _ in range(2000)]
    assert all(30 <= delay < 600 for delay in delays)


def test_retry_delay_is_fixed() -> None:
    sleep = RecordingSleep()
    scheduler = PacingScheduler(PacingConfig(), 1.5, sleep=sleep, rng=random.Random(0))

    async def drive() -> list[float]:
        return [await scheduler.between_retries() for _ in range(5)]

    returned = asyncio.run(drive())

    assert returned == [1.5] * 5
    assert sleep.calls == [1.5] * 5
