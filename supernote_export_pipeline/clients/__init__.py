"""Note decoding, page rasterization and storage clients.

This module provides the collaborators the exporter talks to: a decoder that
turns ``.note`` bytes into a document, rasterizers that render pages to PNG,
and the storage host that files are written to, along with custom exception
classes for error handling.
"""

from .decoder import NoteDecoder, SupernoteDecoder
from .exceptions import (
    DecodeError,
    ExportCancelled,
    ExportPipelineError,
    PathResolutionWarning,
    RasterError,
    StorageError,
)
from .rasterizer import PlaceholderRasterizer, Rasterizer, SupernoteRasterizer
from .storage import LocalVaultStorage, Storage

__all__ = [
    "NoteDecoder",
    "SupernoteDecoder",
    "Rasterizer",
    "PlaceholderRasterizer",
    "SupernoteRasterizer",
    "Storage",
    "LocalVaultStorage",
    "ExportPipelineError",
    "DecodeError",
    "RasterError",
    "StorageError",
    "ExportCancelled",
    "PathResolutionWarning",
]
