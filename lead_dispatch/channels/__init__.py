"""Outreach channel adapters the dispatch engine hands approved batches to."""

from .base import ChannelProtocol, LeadLike  # noqa: F401
from .export import FileExportChannel  # noqa: F401
from .sample import EchoChannel  # noqa: F401

__all__ = [
    "ChannelProtocol",
    "EchoChannel",
    "FileExportChannel",
    "LeadLike",
]
