# PATH: core/constants.py
"""
Constants for the multi-explorer resolver.

Contains enums, defaults, and request constants shared by
explorers/ and config/.
"""

from enum import Enum
from typing import Final


# =============================================================================
# DEFAULTS
# =============================================================================

# Per-request timeout applied by every explorer adapter
DEFAULT_TIMEOUT_SECONDS: Final[int] = 10

# Network used when the caller does not name one
DEFAULT_NETWORK: Final[str] = "bitcoin"

# At least two explorers are needed for agreement to mean anything
DEFAULT_MIN_EXPLORERS: Final[int] = 2

# Transport errors are truncated to this length in logs and details
ERROR_PREVIEW_CHARS: Final[int] = 100

USER_AGENT: Final[str] = "python-multiexplorer"

REQUEST_HEADERS: Final[dict[str, str]] = {
    "Accept": "application/json",
    "User-Agent": USER_AGENT,
}


class ExplorerKind(str, Enum):
    """
    Explorer API families.

    Each family has its own endpoint layout and response field names;
    explorers/normalizers.py is the only place that knows about them.
    """
    INSIGHT = "insight"
    BLOCKSTREAM = "blockstream"


# Kind used for URLs taken from the registry
DEFAULT_REGISTRY_KIND: Final[ExplorerKind] = ExplorerKind.INSIGHT

# Kind used for caller-supplied explorer mappings that omit one
DEFAULT_EXPLICIT_KIND: Final[ExplorerKind] = ExplorerKind.BLOCKSTREAM


class QueryType(str, Enum):
    """Logical queries the aggregator can fan out."""
    BLOCK_HASH = "block_hash"
    BLOCK_INFO = "block_info"


class ErrorCode(str, Enum):
    """
    Error codes carried by every ExplorerError.

    CONFIG_INVALID, NO_CONSENSUS and CONFLICT reach callers.
    TRANSPORT_* and MALFORMED_RESPONSE stay inside the aggregator.
    """
    # Construction
    CONFIG_INVALID = "CONFIG_INVALID"

    # Per-explorer failures
    TRANSPORT_NETWORK = "TRANSPORT_NETWORK"
    TRANSPORT_TIMEOUT = "TRANSPORT_TIMEOUT"
    TRANSPORT_HTTP_STATUS = "TRANSPORT_HTTP_STATUS"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"

    # Aggregate outcomes
    NO_CONSENSUS = "NO_CONSENSUS"
    CONFLICT = "CONFLICT"


# Codes that an explorer attempt may fail with without aborting the fan-out
SOFT_FAILURE_CODES: Final[frozenset[ErrorCode]] = frozenset({
    ErrorCode.TRANSPORT_NETWORK,
    ErrorCode.TRANSPORT_TIMEOUT,
    ErrorCode.TRANSPORT_HTTP_STATUS,
    ErrorCode.MALFORMED_RESPONSE,
})


class ExitCode(int, Enum):
    """Process exit codes used by explorers/cli.py."""
    OK = 0
    NO_CONSENSUS = 1
    CONFLICT = 2
    CONFIG_INVALID = 3
