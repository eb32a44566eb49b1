import asyncio
from unittest.mock import AsyncMock, patch

from utils import async_random_sleep, round_half_up


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(1050.5) == 1051
    assert round_half_up(101.49) == 101
    assert round_half_up(7) == 7


def test_async_random_sleep_within_bounds():
    with patch("utils.asyncio.sleep", new=AsyncMock()) as sleep:
        asyncio.run(async_random_sleep(1.0, 2.0))
    duration = sleep.await_args.args[0]
    assert 1.0 <= duration <= 2.0
