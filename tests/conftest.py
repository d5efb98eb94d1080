"""Shared fixtures."""

import pytest

from tests.fakes import FakeCache, FakeClock, FakeCommentStore


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> FakeCache:
    return FakeCache(clock)


@pytest.fixture
def store() -> FakeCommentStore:
    return FakeCommentStore()
