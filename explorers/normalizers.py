# PATH: explorers/normalizers.py
"""
explorers/normalizers.py - Response normalizers per explorer family.

Each family is a Normalizer: endpoint paths plus two pure functions that
turn a decoded response body into a canonical BlockHash or BlockInfo.

FAMILY LAYOUT:
  insight:      {base}/block-index/{height} -> {"blockHash": "..."}
                {base}/block/{hash}         -> {"merkleroot": "...", "time": N}
  blockstream:  {base}/block-height/{height} -> "..."  (bare text body)
                {base}/block/{hash}          -> {"merkle_root": "...", "timestamp": N}

Not-found and malformed bodies both raise MalformedResponseError.
"""

from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import quote

from core.constants import ERROR_PREVIEW_CHARS, ExplorerKind
from core.exceptions import ConfigError, MalformedResponseError
from core.models import BlockHash, BlockInfo


def _require_mapping(body: Any, family: str) -> dict:
    if not body:
        raise MalformedResponseError(f"{family} response error: empty body")
    if not isinstance(body, dict):
        raise MalformedResponseError(
            f"{family} response error: expected object",
            details={"body_type": type(body).__name__},
        )
    return body


def _block_hash(value: Any, family: str) -> BlockHash:
    if not isinstance(value, str) or not value.strip():
        raise MalformedResponseError(
            f"{family} response error: missing block hash",
            details={"value": repr(value)[:ERROR_PREVIEW_CHARS]},
        )
    return value.strip()


def _block_info(merkle_root: Any, time: Any, family: str) -> BlockInfo:
    if not merkle_root or not time:
        raise MalformedResponseError(
            f"{family} response error: missing merkle root or time",
            details={"merkle_root": repr(merkle_root), "time": repr(time)},
        )
    if not isinstance(merkle_root, str):
        raise MalformedResponseError(
            f"{family} response error: merkle root is not a string",
            details={"merkle_root": repr(merkle_root)},
        )
    # bool is an int subclass; True must not pass as a timestamp
    if isinstance(time, bool) or not isinstance(time, int):
        raise MalformedResponseError(
            f"{family} response error: time is not an integer",
            details={"time": repr(time)},
        )
    return BlockInfo(merkle_root=merkle_root, time=time)


# =============================================================================
# INSIGHT
# =============================================================================

def insight_block_hash(body: Any) -> BlockHash:
    """Extract blockHash from an Insight block-index response."""
    data = _require_mapping(body, "Insight")
    return _block_hash(data.get("blockHash"), "Insight")


def insight_block_info(body: Any) -> BlockInfo:
    """Extract merkleroot/time from an Insight block response."""
    data = _require_mapping(body, "Insight")
    return _block_info(data.get("merkleroot"), data.get("time"), "Insight")


# =============================================================================
# BLOCKSTREAM
# =============================================================================

def blockstream_block_hash(body: Any) -> BlockHash:
    """Blockstream serves the hash as a bare text body."""
    if not body:
        raise MalformedResponseError("Blockstream response error: empty body")
    return _block_hash(body, "Blockstream")


def blockstream_block_info(body: Any) -> BlockInfo:
    """Extract merkle_root/timestamp from a Blockstream block response."""
    data = _require_mapping(body, "Blockstream")
    return _block_info(data.get("merkle_root"), data.get("timestamp"), "Blockstream")


@dataclass(frozen=True)
class Normalizer:
    """Endpoint layout and body translation for one explorer family."""
    kind: ExplorerKind
    index_path: str
    block_path: str
    normalize_hash: Callable[[Any], BlockHash]
    normalize_info: Callable[[Any], BlockInfo]

    def index_url(self, base_url: str, height: int) -> str:
        return f"{base_url}/{self.index_path}/{height}"

    def block_url(self, base_url: str, block_hash: BlockHash) -> str:
        return f"{base_url}/{self.block_path}/{quote(block_hash, safe='')}"


NORMALIZERS: dict[ExplorerKind, Normalizer] = {
    ExplorerKind.INSIGHT: Normalizer(
        kind=ExplorerKind.INSIGHT,
        index_path="block-index",
        block_path="block",
        normalize_hash=insight_block_hash,
        normalize_info=insight_block_info,
    ),
    ExplorerKind.BLOCKSTREAM: Normalizer(
        kind=ExplorerKind.BLOCKSTREAM,
        index_path="block-height",
        block_path="block",
        normalize_hash=blockstream_block_hash,
        normalize_info=blockstream_block_info,
    ),
}


def get_normalizer(kind: ExplorerKind) -> Normalizer:
    """Look up the normalizer for a family."""
    try:
        return NORMALIZERS[kind]
    except KeyError:
        raise ConfigError(
            f"No normalizer for explorer kind: {kind!r}",
            details={"kind": repr(kind)},
        ) from None
