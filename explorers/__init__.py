"""
explorers - Multi-explorer block queries with consensus.

This package contains:
- normalizers.py: Per-family endpoint layout and response parsing
- transport.py: httpx-based GET with hard timeouts
- adapter.py: One explorer as resolve_block_hash / resolve_block_info
- aggregator.py: MultiExplorer fan-out and consensus rule
- registry.py: Default explorer URLs per network
- cli.py: multiexplorer command
"""

from explorers.adapter import ExplorerAdapter
from explorers.aggregator import MultiExplorer, decide, group_outcomes
from explorers.normalizers import NORMALIZERS, Normalizer, get_normalizer
from explorers.registry import ExplorerRegistry, default_registry
from explorers.transport import HttpTransport

__all__ = [
    "ExplorerAdapter",
    "ExplorerRegistry",
    "HttpTransport",
    "MultiExplorer",
    "NORMALIZERS",
    "Normalizer",
    "decide",
    "default_registry",
    "get_normalizer",
    "group_outcomes",
]
