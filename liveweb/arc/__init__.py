# liveweb/arc/__init__.py
"""ARC container decoding for live-web payloads."""

from .decoder import ArcRecordDecoder, ContainerDecoder

__all__ = ["ArcRecordDecoder", "ContainerDecoder"]
