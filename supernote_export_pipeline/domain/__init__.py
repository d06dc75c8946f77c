"""Domain models, configuration schemas and export planning

This module provides the domain layer for the Supernote Export Pipeline:
type-safe configuration schemas, domain models, the date-pattern matcher,
path resolution, filename allocation and document assembly.
"""

from .config import (
    AppConfig,
    ConfigError,
    DictionaryConfig,
    DisplayConfig,
    ExportJobConfig,
    OutputConfig,
    VaultConfig,
    register_configs,
)
from .date_pattern import DatePatternError, DatePatternMatcher, compile_pattern
from .filename_allocator import allocate, build_file_path
from .markdown_assembler import MarkdownAssembler
from .models import (
    ArtifactKind,
    ExportMode,
    ExportResult,
    NoteDocument,
    Page,
    ResolvedDestination,
    StoredFile,
)
from .path_resolver import classify, resolve
from .pdf_assembler import PdfAssembler

__all__ = [
    "VaultConfig",
    "OutputConfig",
    "DictionaryConfig",
    "DisplayConfig",
    "ExportJobConfig",
    "AppConfig",
    "register_configs",
    "ConfigError",
    "DatePatternError",
    "DatePatternMatcher",
    "compile_pattern",
    "allocate",
    "build_file_path",
    "classify",
    "resolve",
    "ArtifactKind",
    "ExportMode",
    "ExportResult",
    "NoteDocument",
    "Page",
    "ResolvedDestination",
    "StoredFile",
    "MarkdownAssembler",
    "PdfAssembler",
]
