"""Exception types for the feed service.

Identity errors surface as 401 responses, malformed input as 400. Upstream
dependency errors are raised by the store, embedding and matcher clients and
are always recovered inside the feed pipeline.
"""

from typing import Any, Dict, Optional


class FeedServiceError(Exception):
    """Base exception for feed service errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class AuthenticationError(FeedServiceError):
    """Raised when the caller's identity cannot be established."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message=message, status_code=401)


class InvalidFilterError(FeedServiceError):
    """Raised for caller-supplied filters with inconsistent bounds."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=400, details=details)


class UpstreamError(FeedServiceError):
    """Raised when an external dependency fails."""

    def __init__(
        self,
        message: str,
        step: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        details: Dict[str, Any] = {}
        if step:
            details["step"] = step
        if cause is not None:
            details["error"] = str(cause)
            details["error_type"] = type(cause).__name__
        super().__init__(message=message, status_code=502, details=details)
        self.step = step
        self.cause = cause


class DataStoreError(UpstreamError):
    """Raised when a Supabase query or RPC fails."""


class EmbeddingError(UpstreamError):
    """Raised when the embedding provider fails or returns an unusable vector."""


class VectorMatchError(UpstreamError):
    """Raised when the vector similarity search fails."""


class StepTimeoutError(UpstreamError):
    """Raised when a pipeline step exceeds its time budget."""

    def __init__(self, step: str, timeout: float):
        super().__init__(
            message=f"{step} timed out after {timeout:.2f}s",
            step=step,
        )
        self.timeout = timeout
