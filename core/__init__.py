"""
core - Shared types and utilities for the multi-explorer resolver.

This package contains:
- constants.py: Enums, defaults and request headers
- exceptions.py: Typed exceptions with error codes
- models.py: BlockInfo, ProviderSpec, Outcome, ConsensusGroup
- logging.py: Structured JSON / console logging
"""

from core.constants import (
    DEFAULT_MIN_EXPLORERS,
    DEFAULT_NETWORK,
    DEFAULT_TIMEOUT_SECONDS,
    ErrorCode,
    ExplorerKind,
    QueryType,
)
from core.exceptions import (
    ConfigError,
    ConflictError,
    ExplorerError,
    MalformedResponseError,
    NoConsensusError,
    TransportError,
)
from core.logging import get_logger, setup_logging
from core.models import (
    BlockHash,
    BlockInfo,
    ConsensusGroup,
    Outcome,
    ProviderSpec,
)

__all__ = [
    # Constants
    "DEFAULT_MIN_EXPLORERS",
    "DEFAULT_NETWORK",
    "DEFAULT_TIMEOUT_SECONDS",
    "ErrorCode",
    "ExplorerKind",
    "QueryType",
    # Exceptions
    "ConfigError",
    "ConflictError",
    "ExplorerError",
    "MalformedResponseError",
    "NoConsensusError",
    "TransportError",
    # Models
    "BlockHash",
    "BlockInfo",
    "ConsensusGroup",
    "Outcome",
    "ProviderSpec",
    # Logging
    "get_logger",
    "setup_logging",
]
