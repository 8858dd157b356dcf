# PATH: explorers/aggregator.py
"""
explorers/aggregator.py - Cross-checked block queries over many explorers.

Every query is sent to all explorers concurrently. The aggregate call
waits until every attempt has settled, drops the failed ones and accepts
the answer only if all successful explorers returned the same value.

CONSENSUS RULE:
  - no successes             -> NoConsensusError
  - one distinct value       -> that value (failures do not matter)
  - two or more distinct     -> ConflictError (never a majority pick)
"""

import asyncio
import re
from typing import Any, Iterable, Optional, Sequence, Union

from core.constants import (
    DEFAULT_MIN_EXPLORERS,
    DEFAULT_NETWORK,
    DEFAULT_REGISTRY_KIND,
    DEFAULT_TIMEOUT_SECONDS,
    SOFT_FAILURE_CODES,
    QueryType,
)
from core.exceptions import (
    ConfigError,
    ConflictError,
    ExplorerError,
    NoConsensusError,
)
from core.logging import get_logger
from core.models import (
    BlockHash,
    BlockInfo,
    ConsensusGroup,
    Outcome,
    ProviderSpec,
    validate_timeout,
)
from explorers.adapter import ExplorerAdapter, Transport
from explorers.registry import ExplorerRegistry, default_registry
from explorers.transport import HttpTransport

logger = get_logger(__name__)

# How each query's parameter is named in error messages
PARAM_LABELS: dict[QueryType, str] = {
    QueryType.BLOCK_HASH: "block height",
    QueryType.BLOCK_INFO: "block hash",
}

ExplorerEntry = Union[ProviderSpec, dict]

# Block hashes are hex; anything else would change the request path
HEX_HASH = re.compile(r"[0-9a-fA-F]+")


def group_outcomes(outcomes: Iterable[Outcome]) -> list[ConsensusGroup]:
    """Partition successful outcomes by value equality."""
    urls_by_value: dict[Any, list[str]] = {}
    for outcome in outcomes:
        if outcome.ok:
            urls_by_value.setdefault(outcome.value, []).append(outcome.url)
    return [
        ConsensusGroup(value=value, urls=tuple(urls))
        for value, urls in urls_by_value.items()
    ]


def decide(outcomes: Sequence[Outcome], query: QueryType, param: Any) -> Any:
    """
    Apply the consensus rule to settled outcomes.

    The result depends only on the multiset of outcomes, not their order.

    Raises:
        NoConsensusError: No outcome succeeded
        ConflictError: Successful outcomes disagree
    """
    label = PARAM_LABELS[query]
    groups = group_outcomes(outcomes)

    if not groups:
        raise NoConsensusError(
            f"No {label} {param} found",
            details={
                "query": query.value,
                "param": param,
                "failures": {o.url: o.code.value for o in outcomes if not o.ok},
            },
        )

    if len(groups) > 1:
        values = sorted(
            (g.value.to_dict() if isinstance(g.value, BlockInfo) else g.value for g in groups),
            key=repr,
        )
        raise ConflictError(
            f"Different {label} {param} found",
            details={
                "query": query.value,
                "param": param,
                "values": values,
                "groups": sorted(sorted(g.urls) for g in groups),
            },
        )

    return groups[0].value


def _validate_height(height: Any) -> int:
    if isinstance(height, bool) or not isinstance(height, int) or height < 0:
        raise ValueError(f"Block height must be a non-negative integer, got {height!r}")
    return height


def _validate_hash(block_hash: Any) -> BlockHash:
    if not isinstance(block_hash, str) or not HEX_HASH.fullmatch(block_hash.strip()):
        raise ValueError(f"Block hash must be a non-empty hex string, got {block_hash!r}")
    return block_hash.strip()


class MultiExplorer:
    """
    Consensus engine over a fixed list of explorer adapters.

    The adapter list is built once and never mutated, so one instance can
    serve any number of concurrent queries.

    Usage:
        async with MultiExplorer(network="bitcoin") as multi:
            block_hash = await multi.resolve_block_hash(0)
            info = await multi.resolve_block_info(block_hash)
    """

    def __init__(
        self,
        network: Optional[str] = None,
        explorers: Optional[Sequence[ExplorerEntry]] = None,
        timeout_seconds: Optional[float] = None,
        min_explorers: int = DEFAULT_MIN_EXPLORERS,
        registry: Optional[ExplorerRegistry] = None,
        transport: Optional[Transport] = None,
    ):
        """
        Args:
            network: Registry network id (default: "bitcoin")
            explorers: ProviderSpecs or {"url", "type", "timeout"} mappings;
                fewer than min_explorers entries means registry defaults
            timeout_seconds: Per-request timeout (default: 10)
            min_explorers: Minimum number of explorers to query
            registry: Registry for default URLs (default: bundled YAML)
            transport: HTTP transport (default: shared HttpTransport)

        Raises:
            ConfigError: Invalid explorer entry, timeout, network, or too
                few explorers
        """
        self.timeout_seconds = validate_timeout(
            DEFAULT_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
        )
        if isinstance(min_explorers, bool) or not isinstance(min_explorers, int) or min_explorers < 1:
            raise ConfigError(
                "min_explorers must be a positive integer",
                details={"min_explorers": repr(min_explorers)},
            )
        self.min_explorers = min_explorers
        self.network = network or DEFAULT_NETWORK

        specs = self._build_specs(explorers, registry)
        if len(specs) < self.min_explorers:
            raise ConfigError(
                f"At least {self.min_explorers} explorers required, got {len(specs)}",
                details={"network": self.network, "explorers": [s.url for s in specs]},
            )

        self._owns_transport = transport is None
        self._transport = transport if transport is not None else HttpTransport()
        self._explorers = tuple(ExplorerAdapter(spec, self._transport) for spec in specs)

        logger.debug(
            "MultiExplorer ready",
            extra={"context": {
                "network": self.network,
                "explorers": len(self._explorers),
                "timeout_seconds": self.timeout_seconds,
            }},
        )

    def _build_specs(
        self,
        explorers: Optional[Sequence[ExplorerEntry]],
        registry: Optional[ExplorerRegistry],
    ) -> list[ProviderSpec]:
        specs: list[ProviderSpec] = []
        if explorers is not None:
            if isinstance(explorers, (str, bytes)) or not isinstance(explorers, Sequence):
                raise ConfigError(
                    "explorers must be a list",
                    details={"explorers": repr(explorers)},
                )
            for entry in explorers:
                if isinstance(entry, ProviderSpec):
                    specs.append(entry)
                else:
                    specs.append(ProviderSpec.from_dict(entry, self.timeout_seconds))

        if len(specs) >= self.min_explorers:
            return specs

        if specs:
            logger.info(
                "Too few explorers given, using registry defaults",
                extra={"context": {"given": len(specs), "network": self.network}},
            )
        registry = registry if registry is not None else default_registry()
        return [
            ProviderSpec(url=url, kind=DEFAULT_REGISTRY_KIND, timeout_seconds=self.timeout_seconds)
            for url in registry.lookup(self.network)
        ]

    @property
    def explorers(self) -> tuple[ExplorerAdapter, ...]:
        """Configured adapters, in construction order."""
        return self._explorers

    async def close(self) -> None:
        """Close the HTTP transport if this instance created it."""
        if self._owns_transport:
            await self._transport.close()

    async def __aenter__(self) -> "MultiExplorer":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # =========================================================================
    # FAN-OUT / SETTLE
    # =========================================================================

    async def _settle(self, query: QueryType, param: Any) -> list[Outcome]:
        """
        Run one query on every explorer and wait for all of them.

        TransportError and MalformedResponseError (SOFT_FAILURE_CODES)
        become failure outcomes.
        Any other exception is re-raised once every attempt has settled.
        """
        if query is QueryType.BLOCK_HASH:
            calls = [a.resolve_block_hash(param) for a in self._explorers]
        else:
            calls = [a.resolve_block_info(param) for a in self._explorers]

        results = await asyncio.gather(*calls, return_exceptions=True)

        outcomes: list[Outcome] = []
        for adapter, result in zip(self._explorers, results):
            if isinstance(result, ExplorerError) and result.code in SOFT_FAILURE_CODES:
                outcomes.append(Outcome.failure(adapter.url, result))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(Outcome.success(adapter.url, result))
        return outcomes

    async def settle_block_hash(self, height: int) -> list[Outcome]:
        """Per-explorer outcomes for a height, without the consensus rule."""
        return await self._settle(QueryType.BLOCK_HASH, _validate_height(height))

    async def settle_block_info(self, block_hash: BlockHash) -> list[Outcome]:
        """Per-explorer outcomes for a block hash, without the consensus rule."""
        return await self._settle(QueryType.BLOCK_INFO, _validate_hash(block_hash))

    async def _resolve(self, query: QueryType, param: Any) -> Any:
        outcomes = await self._settle(query, param)
        try:
            value = decide(outcomes, query, param)
        except ConflictError as e:
            logger.warning(e.message, extra={"context": e.details})
            raise
        except NoConsensusError as e:
            logger.warning(e.message, extra={"context": e.details})
            raise

        logger.debug(
            "Explorers agree",
            extra={"context": {
                "query": query.value,
                "param": param,
                "agreeing": sum(1 for o in outcomes if o.ok),
                "failed": sum(1 for o in outcomes if not o.ok),
            }},
        )
        return value

    # =========================================================================
    # PUBLIC QUERIES
    # =========================================================================

    async def resolve_block_hash(self, height: int) -> BlockHash:
        """
        Get the block hash at height, agreed by all responding explorers.

        Raises:
            ValueError: height is not a non-negative int
            NoConsensusError: No explorer answered
            ConflictError: Explorers returned different hashes
        """
        return await self._resolve(QueryType.BLOCK_HASH, _validate_height(height))

    async def resolve_block_info(self, block_hash: BlockHash) -> BlockInfo:
        """
        Get merkle root and time for block_hash, agreed by all responding
        explorers.

        Raises:
            ValueError: block_hash is not a non-empty hex string
            NoConsensusError: No explorer answered
            ConflictError: Explorers returned different merkle root or time
        """
        return await self._resolve(QueryType.BLOCK_INFO, _validate_hash(block_hash))

    async def verify_block(self, height: int) -> tuple[BlockHash, BlockInfo]:
        """Resolve hash then info for height, each by consensus."""
        block_hash = await self.resolve_block_hash(height)
        info = await self.resolve_block_info(block_hash)
        return block_hash, info
