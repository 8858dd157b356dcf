# PATH: tests/conftest.py
"""
Pytest configuration and fixtures for multi-explorer tests.
"""

import asyncio
import sys
from pathlib import Path
from typing import Any

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.constants import ErrorCode  # noqa: E402
from core.exceptions import TransportError  # noqa: E402


GENESIS_HASH = "000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f"
GENESIS_MERKLE_ROOT = "4a5e1e4baab89f3a32518a88c31bc87f618f76673e2cc77ab2127b7afdeda33b"
GENESIS_TIME = 1231006505


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


class FakeTransport:
    """
    Transport returning canned bodies per URL.

    A route value may be a body, an exception instance (raised), or a
    (delay_seconds, body) tuple. Unknown URLs time out.
    URLs whose delayed request was cancelled are kept in .cancelled.
    """

    def __init__(self, routes: dict[str, Any]):
        self.routes = routes
        self.requests: list[tuple[str, float]] = []
        self.cancelled: list[str] = []
        self.closed = False

    async def get_json(self, url: str, timeout_seconds: float) -> Any:
        self.requests.append((url, timeout_seconds))
        if url not in self.routes:
            raise TransportError(
                f"Timeout after {timeout_seconds}s",
                code=ErrorCode.TRANSPORT_TIMEOUT,
                details={"url": url},
            )
        route = self.routes[url]
        if isinstance(route, tuple):
            delay, route = route
            try:
                await asyncio.sleep(delay)
            except asyncio.CancelledError:
                self.cancelled.append(url)
                raise
        if isinstance(route, BaseException):
            raise route
        return route

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_transport():
    """Factory for FakeTransport instances."""
    return FakeTransport


@pytest.fixture
def genesis():
    """Hash, merkle root and time of the bitcoin genesis block."""
    return {
        "hash": GENESIS_HASH,
        "merkle_root": GENESIS_MERKLE_ROOT,
        "time": GENESIS_TIME,
    }
