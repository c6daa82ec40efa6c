from cachex_core.types import ErrorContext


class CacheXError(Exception):
    """Base class for all exceptions in CacheX-Core."""


class CacheError(CacheXError):
    """Exception raised for cache-related errors."""


class SerializationError(CacheError):
    """Exception raised when a value cannot be encoded by a codec."""


class CodecUnavailableError(CacheError):
    """Exception raised when a codec's dependency is not installed."""


class InvalidArgumentError(CacheXError, ValueError):
    """Invalid argument given to a cache component.

    The message is the same whatever the context; ``context`` tells which
    client-facing convention (item pool or simple cache) reported it.
    """

    def __init__(self, message: str, context: ErrorContext = ErrorContext.POOL):
        super().__init__(message)
        self.context = context


class InvalidKeyError(InvalidArgumentError):
    """Exception raised when a cache key is rejected."""


class InvalidExpirationError(InvalidArgumentError):
    """Exception raised when an expiration has an unsupported shape."""
