"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

import pytest

from savekeeper.models.backup import TIMESTAMP_FORMAT


@pytest.fixture
def make_clock() -> Callable[..., Callable[[], str]]:
    """Factory for backup clocks that advance one second per call."""

    def factory(start: datetime = datetime(2024, 1, 1, 12, 0, 0)) -> Callable[[], str]:
        state = {"now": start - timedelta(seconds=1)}

        def clock() -> str:
            state["now"] += timedelta(seconds=1)
            return state["now"].strftime(TIMESTAMP_FORMAT)

        return clock

    return factory
