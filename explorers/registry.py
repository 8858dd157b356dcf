# PATH: explorers/registry.py
"""
explorers/registry.py - Default explorer URLs per network.

The registry is a plain object built from a mapping, so tests and callers
can pass their own endpoints instead of the bundled explorers.yaml.
"""

from pathlib import Path
from typing import Any, Mapping, Optional

from config import load_explorers
from core.constants import DEFAULT_TIMEOUT_SECONDS, ExplorerKind
from core.exceptions import ConfigError
from core.logging import get_logger
from core.models import ProviderSpec

logger = get_logger(__name__)

# Network ids used by older configs
NETWORK_ALIASES: dict[str, str] = {
    "bitcoinTestnet": "bitcoin-testnet",
    "bitcoin_testnet": "bitcoin-testnet",
    "testnet": "bitcoin-testnet",
}


class ExplorerRegistry:
    """
    Registry of explorer URLs by network.

    Mapping shape:
        {network: {"insight": [url, ...], "blockstream": [url, ...]}}
    """

    def __init__(self, networks: Mapping[str, Mapping[str, Any]]):
        self._networks: dict[str, dict[ExplorerKind, tuple[str, ...]]] = {}
        for network, families in networks.items():
            self._networks[network] = self._parse_families(network, families)

    @staticmethod
    def _parse_families(
        network: str,
        families: Any,
    ) -> dict[ExplorerKind, tuple[str, ...]]:
        if not isinstance(families, Mapping):
            raise ConfigError(
                f"Registry entry for {network} must be a mapping",
                details={"network": network},
            )
        parsed: dict[ExplorerKind, tuple[str, ...]] = {}
        for kind_name, urls in families.items():
            try:
                kind = ExplorerKind(kind_name)
            except ValueError:
                raise ConfigError(
                    f"Unknown explorer kind in registry: {kind_name}",
                    details={"network": network, "kind": kind_name},
                ) from None
            if not isinstance(urls, list) or not all(isinstance(u, str) for u in urls):
                raise ConfigError(
                    f"Registry urls for {network}/{kind_name} must be a list of strings",
                    details={"network": network, "kind": kind_name},
                )
            parsed[kind] = tuple(urls)
        return parsed

    @classmethod
    def from_yaml(cls, path: Optional[Path] = None) -> "ExplorerRegistry":
        """Build a registry from explorers.yaml (bundled copy by default)."""
        return cls(load_explorers(path))

    @property
    def networks(self) -> list[str]:
        """List of known network ids."""
        return list(self._networks.keys())

    def _families(self, network: str) -> dict[ExplorerKind, tuple[str, ...]]:
        key = NETWORK_ALIASES.get(network, network)
        if key not in self._networks:
            raise ConfigError(
                f"Unknown network: {network}",
                details={"network": network, "known": self.networks},
            )
        return self._networks[key]

    def lookup(self, network: str) -> list[str]:
        """Default (Insight) explorer URLs for a network."""
        return list(self._families(network).get(ExplorerKind.INSIGHT, ()))

    def specs(
        self,
        network: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        include_blockstream: bool = False,
    ) -> list[ProviderSpec]:
        """
        Provider specs for a network.

        Insight URLs first, then Blockstream URLs when include_blockstream
        is set.
        """
        families = self._families(network)
        kinds = [ExplorerKind.INSIGHT]
        if include_blockstream:
            kinds.append(ExplorerKind.BLOCKSTREAM)

        specs = [
            ProviderSpec(url=url, kind=kind, timeout_seconds=timeout_seconds)
            for kind in kinds
            for url in families.get(kind, ())
        ]
        logger.debug(
            "Registry specs",
            extra={"context": {"network": network, "count": len(specs)}},
        )
        return specs


def default_registry() -> ExplorerRegistry:
    """Registry for the bundled explorers.yaml."""
    return ExplorerRegistry.from_yaml()
