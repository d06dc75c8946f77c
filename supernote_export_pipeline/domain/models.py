"""
Domain models for the Supernote Export Pipeline.

This module defines the core data structures that represent the flow of
information through one export: the decoded note, the artifact kinds and
export modes, resolved destinations, generated page images, and the outcome
reported back to the caller. Every object here is created fresh per export
invocation and has no persistence of its own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_PAGE_WIDTH = 1404
"""Fallback page width in pixels (Supernote A5X portrait)."""

DEFAULT_PAGE_HEIGHT = 1872
"""Fallback page height in pixels (Supernote A5X portrait)."""


class ArtifactKind(Enum):
    """Kind of derived output file.

    Determines which configured base path and which assembly routine applies.
    """

    MARKDOWN = "markdown"
    IMAGE = "image"
    PDF = "pdf"

    @property
    def extension(self) -> str:
        """File extension (without dot) used for this kind."""
        return {"markdown": "md", "image": "png", "pdf": "pdf"}[self.value]

    @property
    def label(self) -> str:
        """Human-readable name used in user-facing messages."""
        return {"markdown": "Markdown", "image": "Image", "pdf": "PDF"}[self.value]


class ExportMode(Enum):
    """Export requested by the user."""

    MARKDOWN = "markdown"
    MARKDOWN_WITH_IMAGES = "markdown_with_images"
    PDF = "pdf"

    @property
    def kinds(self) -> tuple[ArtifactKind, ...]:
        """Artifact kinds this mode produces, in persistence order."""
        if self is ExportMode.MARKDOWN:
            return (ArtifactKind.MARKDOWN,)
        if self is ExportMode.MARKDOWN_WITH_IMAGES:
            return (ArtifactKind.IMAGE, ArtifactKind.MARKDOWN)
        return (ArtifactKind.PDF,)

    @property
    def primary_kind(self) -> ArtifactKind:
        """The artifact this mode exists to produce."""
        return self.kinds[-1]

    @classmethod
    def from_string(cls, value: str) -> ExportMode:
        """Parse a mode name, accepting ``-`` as well as ``_`` separators."""
        normalized = value.strip().lower().replace("-", "_")
        for mode in cls:
            if mode.value == normalized:
                return mode
        options = ", ".join(mode.value for mode in cls)
        raise ValueError(f"Unknown export mode {value!r}. Options: {options}")


class NoteCategory(Enum):
    """Classification of a note by its filename."""

    DAILY = "daily"
    CONCEPT = "concept"


@dataclass(frozen=True)
class Page:
    """One page of a decoded note.

    The page's index within :attr:`NoteDocument.pages` is its identity; the
    1-based page number used in headings is ``index + 1``.
    """

    text: str | None = None
    """Recognized handwriting text, if the device produced any."""

    @property
    def has_text(self) -> bool:
        """True only for a non-empty text string."""
        return isinstance(self.text, str) and len(self.text) > 0


@dataclass(frozen=True)
class NoteDocument:
    """Decoded representation of a source ``.note`` file.

    Immutable once decoded. Owned by the orchestrator for the duration of one
    export and discarded after assembly completes.
    """

    page_width: int
    """Page width in pixels as reported by the decoder."""

    page_height: int
    """Page height in pixels as reported by the decoder."""

    pages: tuple[Page, ...] = ()
    """Pages in decoder order. Never reordered."""

    source: Any = field(default=None, compare=False, repr=False)
    """Decoder-native handle (e.g. a supernotelib notebook) that a real
    rasterizer needs to draw pages. Opaque to everything else."""

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def effective_width(self) -> int:
        """Page width, or the default when absent or non-positive."""
        if isinstance(self.page_width, int) and self.page_width > 0:
            return self.page_width
        return DEFAULT_PAGE_WIDTH

    @property
    def effective_height(self) -> int:
        """Page height, or the default when absent or non-positive."""
        if isinstance(self.page_height, int) and self.page_height > 0:
            return self.page_height
        return DEFAULT_PAGE_HEIGHT

    def page_numbers(self) -> list[int]:
        """All 1-based page numbers in order."""
        return list(range(1, len(self.pages) + 1))


@dataclass(frozen=True)
class ResolvedDestination:
    """Destination folder for one (note, artifact kind) pair.

    Computed once per export and never cached beyond it, since configuration
    may change between invocations.
    """

    kind: ArtifactKind
    folder: str
    """Vault-relative folder. Empty string means the vault root."""

    warnings: tuple[Warning, ...] = ()
    """PathResolutionWarning instances raised while resolving."""

    @property
    def is_custom(self) -> bool:
        """True when an explicit (non-root) folder was configured."""
        return bool(self.folder)


@dataclass(frozen=True)
class GeneratedImage:
    """Encoded PNG payload for one page."""

    page_number: int
    data: bytes


@dataclass(frozen=True)
class StoredFile:
    """Handle to a file created by storage."""

    path: str
    """Vault-relative POSIX path of the created file."""

    size: int
    """Number of bytes written."""

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass
class PlannedArtifact:
    """One row of a dry-run plan."""

    kind: ArtifactKind
    folder: str
    """Resolved folder, empty for vault root."""

    path: str | None
    """Leaf path the allocator would pick now, or None when the host's
    attachment naming decides at write time."""


@dataclass
class ExportPlan:
    """Dry-run preview of where an export would write its artifacts."""

    source_path: str
    mode: ExportMode
    artifacts: list[PlannedArtifact] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class ExportResult:
    """Outcome of exporting a single note.

    Tracks every file created, warnings raised while resolving paths, and the
    single error message of a fatal failure. Used for summary reporting and
    exit-code selection.
    """

    source_path: str
    """Vault-relative path of the source note."""

    mode: ExportMode
    """Requested export mode."""

    success: bool = False
    """True if every artifact of the mode was written."""

    created: list[StoredFile] = field(default_factory=list)
    """Files created during this export, in creation order."""

    warnings: list[str] = field(default_factory=list)
    """Recoverable problems (e.g. malformed daily-note pattern)."""

    errors: list[str] = field(default_factory=list)
    """Human-readable fatal error messages. At most one per export."""

    failed_kind: ArtifactKind | None = None
    """Artifact kind whose production failed, if any."""

    pages_exported: int = 0
    """Number of note pages covered by the export."""

    processing_time: float = 0.0
    """Duration in seconds."""

    @property
    def partial(self) -> bool:
        """True when the export failed after creating some files."""
        return not self.success and bool(self.created)

    @property
    def status(self) -> str:
        if self.success:
            return "success"
        if self.partial:
            return "partial"
        return "failed"

    def files_of(self, kind: ArtifactKind) -> list[StoredFile]:
        """Created files with the extension of ``kind``."""
        suffix = f".{kind.extension}"
        return [f for f in self.created if f.path.endswith(suffix)]
