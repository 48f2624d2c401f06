# liveweb/__init__.py
"""Live-web resource fetching for archive replay."""

from .exceptions import (
    LiveDocumentNotAvailableError,
    LiveWebCacheUnavailableError,
    LiveWebError,
    PoolTimeoutError,
    ResourceNotAvailableError,
)
from .resource import Resource

__all__ = [
    "Resource",
    "LiveWebError",
    "ResourceNotAvailableError",
    "LiveDocumentNotAvailableError",
    "LiveWebCacheUnavailableError",
    "PoolTimeoutError",
]

__version__ = "0.1.0"
