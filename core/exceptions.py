# PATH: core/exceptions.py
"""
Typed exceptions for the multi-explorer resolver.

Per-explorer failures (TransportError, MalformedResponseError) are
absorbed by the aggregator. ConfigError, NoConsensusError and
ConflictError are the only ones a caller ever sees.
"""

from typing import Optional

from core.constants import ErrorCode


class ExplorerError(Exception):
    """Base exception for explorer queries."""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self):
        return f"[{self.code.value}] {self.message}"


class ConfigError(ExplorerError):
    """Invalid explorer configuration, raised at construction."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.CONFIG_INVALID, details)


class TransportError(ExplorerError):
    """Network failure, timeout or bad HTTP status for one request."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TRANSPORT_NETWORK,
        details: Optional[dict] = None,
    ):
        if code not in (
            ErrorCode.TRANSPORT_NETWORK,
            ErrorCode.TRANSPORT_TIMEOUT,
            ErrorCode.TRANSPORT_HTTP_STATUS,
        ):
            raise ValueError(f"Not a transport error code: {code}")
        super().__init__(message, code, details)


class MalformedResponseError(ExplorerError):
    """Explorer replied, but the body has no usable value."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.MALFORMED_RESPONSE, details)


class NoConsensusError(ExplorerError):
    """No explorer returned a usable answer."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.NO_CONSENSUS, details)


class ConflictError(ExplorerError):
    """Two or more explorers returned different answers."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.CONFLICT, details)
