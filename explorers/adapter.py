# PATH: explorers/adapter.py
"""
explorers/adapter.py - One explorer exposed as the two canonical queries.

An adapter binds a ProviderSpec to its family's Normalizer and a shared
transport. It keeps no state between calls.
"""

from typing import Any, Callable, Protocol

from core.constants import ERROR_PREVIEW_CHARS, ExplorerKind
from core.exceptions import ExplorerError
from core.logging import get_logger
from core.models import BlockHash, BlockInfo, ProviderSpec
from explorers.normalizers import get_normalizer


class Transport(Protocol):
    """What an adapter needs from the HTTP layer."""

    async def get_json(self, url: str, timeout_seconds: float) -> Any:
        ...


class ExplorerAdapter:
    """
    Explorer adapter for a single base URL.

    Raises TransportError or MalformedResponseError from both queries;
    the aggregator turns those into soft failures.
    """

    def __init__(self, spec: ProviderSpec, transport: Transport):
        self.spec = spec
        self.normalizer = get_normalizer(spec.kind)
        self.transport = transport
        self._logger = get_logger(__name__, url=spec.url, kind=spec.kind.value)

    @property
    def url(self) -> str:
        return self.spec.url

    @property
    def kind(self) -> ExplorerKind:
        return self.spec.kind

    @property
    def timeout_seconds(self) -> float:
        return self.spec.timeout_seconds

    def __repr__(self) -> str:
        return f"ExplorerAdapter(url={self.url!r}, kind={self.kind.value})"

    async def _fetch(self, url: str, normalize: Callable[[Any], Any]) -> Any:
        try:
            body = await self.transport.get_json(url, self.timeout_seconds)
            return normalize(body)
        except ExplorerError as e:
            self._logger.debug(
                f"{self.kind.value} response error: {e.message[:ERROR_PREVIEW_CHARS]}",
                extra={"context": {"request_url": url, "code": e.code.value}},
            )
            raise

    async def resolve_block_hash(self, height: int) -> BlockHash:
        """
        Get the hash of the block at height.

        Raises:
            TransportError: Network failure or timeout
            MalformedResponseError: Body has no block hash
        """
        url = self.normalizer.index_url(self.url, height)
        return await self._fetch(url, self.normalizer.normalize_hash)

    async def resolve_block_info(self, block_hash: BlockHash) -> BlockInfo:
        """
        Get merkle root and time of the block with block_hash.

        Raises:
            TransportError: Network failure or timeout
            MalformedResponseError: Body lacks merkle root or time
        """
        url = self.normalizer.block_url(self.url, block_hash)
        return await self._fetch(url, self.normalizer.normalize_info)
