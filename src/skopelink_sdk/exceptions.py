"""Custom exceptions for the SkopeLink SDK."""

from typing import Optional


class SkopeLinkError(Exception):
    """Base class for all SkopeLink SDK errors."""


class ConfigurationError(SkopeLinkError):
    """Raised when the SDK is initialized with missing or invalid settings.

    Fatal to the ``initialize()`` call that raised it; the batcher keeps
    whatever configuration (if any) it had before.
    """


class TransmissionError(SkopeLinkError):
    """Raised when the collection endpoint does not accept a batch.

    The flush path catches this, requeues the batch and logs it. It never
    reaches the caller of ``flush()``.
    """

    def __init__(self, status_code: int, status_text: Optional[str] = None):
        self.status_code = status_code
        self.status_text = status_text or ""
        super().__init__(
            f"Failed to send events: HTTP {status_code} {self.status_text}".rstrip()
        )


class NotInitializedWarning(UserWarning):
    """Emitted when ``track()`` is called before ``initialize()``."""
