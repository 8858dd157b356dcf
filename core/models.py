# PATH: core/models.py
"""
Core data models for the multi-explorer resolver.

VALUE CONTRACT:
  - Block hashes are plain str; two hashes agree iff the strings are equal.
  - BlockInfo is frozen; two infos agree iff merkle_root and time are equal.
  - ProviderSpec validates itself on construction (fail-fast).
  - Outcome records one explorer's attempt at one query. It never
    escapes the aggregator except through the settle_* diagnostics.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union
from urllib.parse import urlsplit

from core.constants import (
    DEFAULT_EXPLICIT_KIND,
    DEFAULT_TIMEOUT_SECONDS,
    ErrorCode,
    ExplorerKind,
)
from core.exceptions import ConfigError, ExplorerError


BlockHash = str


@dataclass(frozen=True)
class BlockInfo:
    """Merkle root and header timestamp (unix seconds) of one block."""
    merkle_root: str
    time: int

    def to_dict(self) -> dict[str, Any]:
        return {"merkle_root": self.merkle_root, "time": self.time}


def validate_url(url: Any) -> str:
    """
    Check the shape of an explorer base URL.

    Returns the URL with trailing slashes removed.

    Raises:
        ConfigError: URL is not a non-empty http(s) string, or carries a
            query string or fragment
    """
    if not isinstance(url, str):
        raise ConfigError(
            "URL must be a string",
            details={"url": repr(url), "type": type(url).__name__},
        )
    stripped = url.strip()
    if not stripped:
        raise ConfigError("URL must not be empty", details={"url": url})

    parts = urlsplit(stripped)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigError(
            "URL must be an absolute http(s) URL",
            details={"url": url},
        )
    if "?" in stripped or "#" in stripped:
        raise ConfigError(
            "URL must not carry a query string or fragment",
            details={"url": url},
        )
    return stripped.rstrip("/")


def parse_kind(kind: Union[str, ExplorerKind]) -> ExplorerKind:
    """Map a kind name ("insight", "blockstream") to ExplorerKind."""
    if isinstance(kind, ExplorerKind):
        return kind
    if isinstance(kind, str):
        try:
            return ExplorerKind(kind.strip().lower())
        except ValueError:
            pass
    raise ConfigError(
        f"Unknown explorer kind: {kind!r}",
        details={"kind": repr(kind), "known": [k.value for k in ExplorerKind]},
    )


def validate_timeout(timeout_seconds: Any) -> float:
    """Timeouts must be positive numbers (bool is rejected)."""
    if (
        isinstance(timeout_seconds, bool)
        or not isinstance(timeout_seconds, (int, float))
        or timeout_seconds <= 0
    ):
        raise ConfigError(
            "Timeout must be a positive number of seconds",
            details={"timeout_seconds": repr(timeout_seconds)},
        )
    return timeout_seconds


@dataclass(frozen=True)
class ProviderSpec:
    """
    One explorer endpoint: base URL, API family and request timeout.

    Invalid specs raise ConfigError immediately.
    """
    url: str
    kind: ExplorerKind
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self):
        # frozen: normalized values go through object.__setattr__
        object.__setattr__(self, "url", validate_url(self.url))
        object.__setattr__(self, "kind", parse_kind(self.kind))
        object.__setattr__(
            self, "timeout_seconds", validate_timeout(self.timeout_seconds)
        )

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        default_timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> "ProviderSpec":
        """
        Build a spec from a mapping.

        Accepts "kind" or "type" for the family and "timeout" or
        "timeout_seconds" for the timeout. A missing family means
        Blockstream, a missing timeout means default_timeout.
        """
        if not isinstance(data, Mapping):
            raise ConfigError(
                "Explorer entry must be a mapping or ProviderSpec",
                details={"entry": repr(data)},
            )
        if "url" not in data:
            raise ConfigError("Explorer entry has no url", details={"entry": dict(data)})

        kind = data.get("kind", data.get("type")) or DEFAULT_EXPLICIT_KIND
        timeout = data.get("timeout_seconds", data.get("timeout", default_timeout))
        return cls(url=data["url"], kind=kind, timeout_seconds=timeout)


@dataclass(frozen=True)
class Outcome:
    """Settled result of one explorer attempt: a value or an error."""
    url: str
    value: Any = None
    error: Optional[ExplorerError] = None

    @classmethod
    def success(cls, url: str, value: Any) -> "Outcome":
        return cls(url=url, value=value)

    @classmethod
    def failure(cls, url: str, error: ExplorerError) -> "Outcome":
        return cls(url=url, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def code(self) -> Optional[ErrorCode]:
        return None if self.error is None else self.error.code

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            value = self.value.to_dict() if isinstance(self.value, BlockInfo) else self.value
            return {"url": self.url, "ok": True, "value": value}
        return {
            "url": self.url,
            "ok": False,
            "code": self.error.code.value,
            "error": self.error.message,
        }


@dataclass(frozen=True)
class ConsensusGroup:
    """Successful outcomes sharing one value."""
    value: Any
    urls: tuple[str, ...] = ()

    @property
    def size(self) -> int:
        return len(self.urls)
