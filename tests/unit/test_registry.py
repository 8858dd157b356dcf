"""
tests/unit/test_registry.py - Explorer registry tests.
"""

import pytest

from core.constants import ExplorerKind
from core.exceptions import ConfigError
from explorers.registry import ExplorerRegistry, default_registry


@pytest.fixture
def sample_networks():
    return {
        "bitcoin": {
            "insight": ["https://a.example/api", "https://b.example/api"],
            "blockstream": ["https://blockstream.example/api"],
        },
        "bitcoin-testnet": {
            "insight": ["https://test-a.example/api"],
        },
    }


class TestExplorerRegistry:
    """Registry lookups."""

    def test_lookup_returns_insight_urls(self, sample_networks):
        registry = ExplorerRegistry(sample_networks)
        assert registry.lookup("bitcoin") == ["https://a.example/api", "https://b.example/api"]

    def test_lookup_returns_copy(self, sample_networks):
        registry = ExplorerRegistry(sample_networks)
        registry.lookup("bitcoin").append("https://evil.example/api")
        assert len(registry.lookup("bitcoin")) == 2

    def test_camel_case_alias(self, sample_networks):
        registry = ExplorerRegistry(sample_networks)
        assert registry.lookup("bitcoinTestnet") == ["https://test-a.example/api"]

    def test_unknown_network(self, sample_networks):
        registry = ExplorerRegistry(sample_networks)
        with pytest.raises(ConfigError) as exc_info:
            registry.lookup("dogecoin")
        assert exc_info.value.details["known"] == ["bitcoin", "bitcoin-testnet"]

    def test_specs_insight_only(self, sample_networks):
        specs = ExplorerRegistry(sample_networks).specs("bitcoin", timeout_seconds=4)
        assert [s.kind for s in specs] == [ExplorerKind.INSIGHT, ExplorerKind.INSIGHT]
        assert all(s.timeout_seconds == 4 for s in specs)

    def test_specs_with_blockstream(self, sample_networks):
        specs = ExplorerRegistry(sample_networks).specs("bitcoin", include_blockstream=True)
        assert [s.url for s in specs] == [
            "https://a.example/api",
            "https://b.example/api",
            "https://blockstream.example/api",
        ]
        assert specs[-1].kind == ExplorerKind.BLOCKSTREAM

    def test_specs_network_without_blockstream(self, sample_networks):
        specs = ExplorerRegistry(sample_networks).specs("bitcoin-testnet", include_blockstream=True)
        assert len(specs) == 1

    def test_unknown_kind_rejected(self):
        with pytest.raises(ConfigError):
            ExplorerRegistry({"bitcoin": {"electrum": ["https://a.example"]}})

    def test_bad_url_list_rejected(self):
        with pytest.raises(ConfigError):
            ExplorerRegistry({"bitcoin": {"insight": "https://a.example"}})

    def test_bad_entry_rejected(self):
        with pytest.raises(ConfigError):
            ExplorerRegistry({"bitcoin": ["https://a.example"]})

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "explorers.yaml"
        path.write_text(
            "litecoin:\n"
            "  insight:\n"
            "    - https://ltc-a.example/api\n"
            "    - https://ltc-b.example/api\n",
            encoding="utf-8",
        )
        registry = ExplorerRegistry.from_yaml(path)
        assert registry.networks == ["litecoin"]
        assert len(registry.lookup("litecoin")) == 2


class TestDefaultRegistry:
    """Bundled explorers.yaml."""

    def test_bundled_networks(self):
        registry = default_registry()
        assert set(registry.networks) >= {"bitcoin", "bitcoin-testnet", "litecoin"}

    def test_bundled_networks_have_two_default_explorers(self):
        registry = default_registry()
        for network in ("bitcoin", "bitcoin-testnet", "litecoin"):
            assert len(registry.lookup(network)) >= 2, network

    def test_bundled_urls_are_valid(self):
        registry = default_registry()
        for network in registry.networks:
            for spec in registry.specs(network, include_blockstream=True):
                assert spec.url.startswith("https://")

    def test_bundled_blockstream(self):
        specs = default_registry().specs("bitcoin", include_blockstream=True)
        assert any(s.url == "https://blockstream.info/api" for s in specs)
