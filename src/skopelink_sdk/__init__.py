"""SkopeLink SDK: batched analytics event tracking."""

from .batcher import EventBatcher
from .client import SkopeLinkClient
from .config import SDKConfig, load_config
from .schema import EventBatch, TrackedEvent
from .transport import HttpTransport, Transport, TransportResponse
from .exceptions import (
    ConfigurationError,
    NotInitializedWarning,
    SkopeLinkError,
    TransmissionError,
)
from ._version import __version__

__all__ = [
    "EventBatcher",
    "SkopeLinkClient",
    "SDKConfig",
    "load_config",
    "EventBatch",
    "TrackedEvent",
    "HttpTransport",
    "Transport",
    "TransportResponse",
    "ConfigurationError",
    "NotInitializedWarning",
    "SkopeLinkError",
    "TransmissionError",
    "__version__",
]
