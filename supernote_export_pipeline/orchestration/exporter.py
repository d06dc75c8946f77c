"""
NoteExporter orchestrates the export of a single note through the complete
pipeline.

This module provides the NoteExporter class which handles the end-to-end export
of one ``.note`` file: decoding the source bytes → resolving destination folders
→ rendering page images (when the mode needs them) → assembling the Markdown
transcript or PDF → persisting the artifacts through storage.

The exporter is the only layer that decides abort-vs-continue:
- DecodeError aborts before anything is written.
- RasterError (or cancellation) during image export stops rendering, keeps the
  images already written, and skips the Markdown transcript so it never links
  an inconsistent image set.
- StorageError is fatal for the artifact being written; siblings already
  written are kept.
- PathResolutionWarning is recoverable and collected into the result.

Every fatal error produces exactly one message naming the artifact kind and
the underlying cause. Exports that wrote some files before failing are
reported as partial.

Example usage:
    >>> from supernote_export_pipeline.clients.decoder import SupernoteDecoder
    >>> from supernote_export_pipeline.clients.rasterizer import SupernoteRasterizer
    >>> from supernote_export_pipeline.clients.storage import LocalVaultStorage
    >>>
    >>> context = ExportContext(
    ...     storage=LocalVaultStorage("~/Vault"),
    ...     decoder=SupernoteDecoder(),
    ...     rasterizer_factory=SupernoteRasterizer,
    ... )
    >>> exporter = NoteExporter(context)
    >>> data = context.storage.read_binary("Inbox/20240115-093000.note")
    >>> result = exporter.export_pdf("Inbox/20240115-093000.note", data)
    >>> print(result.status, [f.path for f in result.created])
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
import logging
from pathlib import PurePosixPath
import threading
import time

from supernote_export_pipeline.clients.decoder import NoteDecoder
from supernote_export_pipeline.clients.exceptions import (
    ExportCancelled,
    ExportPipelineError,
    StorageError,
)
from supernote_export_pipeline.clients.rasterizer import Rasterizer
from supernote_export_pipeline.clients.storage import Storage
from supernote_export_pipeline.domain import date_pattern
from supernote_export_pipeline.domain.config import (
    DictionaryConfig,
    DisplayConfig,
    OutputConfig,
)
from supernote_export_pipeline.domain.filename_allocator import allocate
from supernote_export_pipeline.domain.markdown_assembler import MarkdownAssembler
from supernote_export_pipeline.domain.models import (
    ArtifactKind,
    ExportMode,
    ExportPlan,
    ExportResult,
    NoteDocument,
    PlannedArtifact,
    ResolvedDestination,
)
from supernote_export_pipeline.domain.path_resolver import normalize_folder, resolve
from supernote_export_pipeline.domain.pdf_assembler import PdfAssembler
from supernote_export_pipeline.utils.logging import (
    log_artifact_created,
    log_error,
    log_export_start,
    log_warning,
)
from supernote_export_pipeline.utils.progress import ProgressBar

MIRROR_TIMESTAMP_FORMAT = "YYYYMMDD-HHmmss"
"""Timestamp template used in screen-mirror attachment names. Same digit
layout as the device scheme, with real minutes."""


@dataclass
class ExportContext:
    """Collaborators and settings shared by every export of a session.

    Built once (e.g. at CLI start-up) and passed explicitly to the exporter so
    no export depends on hidden module-level state. The context itself holds
    no per-export state: each export creates its own document, destinations
    and image buffer.
    """

    storage: Storage
    """Storage host used for existence checks and writes."""

    decoder: NoteDecoder
    """Decoder turning ``.note`` bytes into a NoteDocument."""

    rasterizer_factory: Callable[[], Rasterizer]
    """Creates a fresh rasterizer per export."""

    output: OutputConfig = field(default_factory=OutputConfig)
    """Destination folders and categorization."""

    dictionary: DictionaryConfig = field(default_factory=DictionaryConfig)
    """Recognized-text dictionary."""

    display: DisplayConfig = field(default_factory=DisplayConfig)
    """Link style and invert-colors settings."""

    show_progress: bool = True
    """Whether to display a progress bar while rendering pages."""


def note_stem(source_path: str) -> str:
    """Filename of a note without folder and ``.note`` extension."""
    return PurePosixPath(source_path).stem


class NoteExporter:
    """Orchestrates the export of a single note.

    Attributes:
        context: Shared collaborators and settings.
        logger: Logger instance for this exporter.
    """

    def __init__(self, context: ExportContext) -> None:
        self.context = context
        self.logger = logging.getLogger(__name__)

    def export_markdown(self, source_path: str, data: bytes) -> ExportResult:
        """Export the Markdown transcript only."""
        return self.export(source_path, data, ExportMode.MARKDOWN)

    def export_markdown_with_images(
        self,
        source_path: str,
        data: bytes,
        page_numbers: Sequence[int] | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ExportResult:
        """Export page images and a transcript that embeds them."""
        return self.export(
            source_path,
            data,
            ExportMode.MARKDOWN_WITH_IMAGES,
            page_numbers=page_numbers,
            cancel_event=cancel_event,
        )

    def export_pdf(
        self,
        source_path: str,
        data: bytes,
        page_numbers: Sequence[int] | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ExportResult:
        """Export a searchable PDF."""
        return self.export(
            source_path,
            data,
            ExportMode.PDF,
            page_numbers=page_numbers,
            cancel_event=cancel_event,
        )

    def export(
        self,
        source_path: str,
        data: bytes,
        mode: ExportMode,
        page_numbers: Sequence[int] | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ExportResult:
        """Export one note.

        Args:
            source_path: Vault-relative path of the source ``.note`` file.
            data: Raw content of the source file.
            mode: What to produce.
            page_numbers: 1-based pages to rasterize, in order. Defaults to all
                pages. Ignored for Markdown-only exports.
            cancel_event: Optional event checked between pages; when set, the
                export stops with ExportCancelled.

        Returns:
            ExportResult describing created files, warnings and the fatal
            error (if any). Errors are recorded on the result, never raised.
        """
        start_time = time.time()
        result = ExportResult(source_path=source_path, mode=mode)
        stage_kind = mode.primary_kind
        log_export_start(self.logger, source_path, mode.value)

        try:
            document = self.context.decoder.decode(data)
            result.pages_exported = document.page_count
            stem = note_stem(source_path)

            destinations = self.resolve_destinations(stem, mode)
            for destination in destinations.values():
                for warning in destination.warnings:
                    result.warnings.append(str(warning))

            if mode is ExportMode.MARKDOWN:
                self._persist_markdown(
                    document, source_path, stem, destinations[ArtifactKind.MARKDOWN],
                    None, result,
                )
            elif mode is ExportMode.MARKDOWN_WITH_IMAGES:
                stage_kind = ArtifactKind.IMAGE
                image_paths = self._persist_images(
                    document, stem, destinations[ArtifactKind.IMAGE],
                    page_numbers, cancel_event, result,
                )
                stage_kind = ArtifactKind.MARKDOWN
                self._persist_markdown(
                    document, source_path, stem, destinations[ArtifactKind.MARKDOWN],
                    image_paths, result,
                )
            else:
                images = self._render_images(document, page_numbers, cancel_event)
                pdf_bytes = PdfAssembler(self.context.dictionary).assemble(
                    document, images, title=stem
                )
                self._persist_pdf(pdf_bytes, stem, destinations[ArtifactKind.PDF], result)

            result.success = True

        except ExportPipelineError as e:
            message = f"{stage_kind.label} export failed: {e}"
            result.errors.append(message)
            result.failed_kind = stage_kind
            log_error(self.logger, message)
            if result.created:
                log_warning(
                    self.logger,
                    f"Kept {len(result.created)} file(s) written before the failure",
                )

        except Exception as e:
            # Catch any unexpected exceptions from decoder, rasterizer or assemblers
            message = (
                f"{stage_kind.label} export failed: "
                f"unexpected {type(e).__name__}: {e}"
            )
            result.errors.append(message)
            result.failed_kind = stage_kind
            self.logger.debug("Unexpected export failure", exc_info=True)
            log_error(self.logger, message)

        finally:
            result.processing_time = time.time() - start_time

        return result

    def resolve_destinations(
        self, stem: str, mode: ExportMode
    ) -> dict[ArtifactKind, ResolvedDestination]:
        """Resolve the folder for every artifact kind ``mode`` needs."""
        return {kind: resolve(kind, stem, self.context.output) for kind in mode.kinds}

    def plan(self, source_path: str, mode: ExportMode) -> ExportPlan:
        """Preview destinations without decoding or writing anything.

        Leaf paths reflect the storage state at call time; the image row shows
        the name of the first page.
        """
        stem = note_stem(source_path)
        plan = ExportPlan(source_path=source_path, mode=mode)

        for kind, destination in self.resolve_destinations(stem, mode).items():
            plan.warnings.extend(str(w) for w in destination.warnings)
            leaf_stem = f"{stem}-0" if kind is ArtifactKind.IMAGE else stem
            path = None
            if destination.is_custom or kind is ArtifactKind.MARKDOWN:
                path = allocate(
                    destination.folder, leaf_stem, kind.extension,
                    self.context.storage.exists,
                )
            plan.artifacts.append(
                PlannedArtifact(kind=kind, folder=destination.folder, path=path)
            )

        return plan

    def allocate_mirror_image_path(
        self, note_name: str, now: datetime | None = None
    ) -> str:
        """Pick a path for a screen-mirror capture attached to a note.

        Names follow ``supernote-mirror-{note}-{YYYYMMDD-HHMMSS}.png``. With a
        custom image folder the name is allocated there; otherwise (or if the
        folder cannot be created) the host's attachment naming decides.
        """
        timestamp = date_pattern.render(MIRROR_TIMESTAMP_FORMAT, now)
        stem = f"supernote-mirror-{note_name}-{timestamp}"
        folder = normalize_folder(self.context.output.images_path)
        storage = self.context.storage

        if folder:
            try:
                storage.create_folder(folder)
                return allocate(folder, stem, "png", storage.exists)
            except StorageError as e:
                log_warning(
                    self.logger,
                    f"Image folder '{folder}' unavailable ({e}); "
                    f"using the default attachment location",
                )

        return storage.default_attachment_path(f"{stem}.png")

    def _leaf_path(
        self, destination: ResolvedDestination, stem: str, extension: str
    ) -> str:
        storage = self.context.storage
        if destination.is_custom:
            return allocate(destination.folder, stem, extension, storage.exists)
        return storage.default_attachment_path(f"{stem}.{extension}")

    def _check_cancelled(
        self, cancel_event: threading.Event | None, page_number: int
    ) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise ExportCancelled(f"Export cancelled before page {page_number}")

    def _pages_to_render(
        self, document: NoteDocument, page_numbers: Sequence[int] | None
    ) -> list[int]:
        if document.page_count == 0:
            return []
        if page_numbers is None or len(page_numbers) == 0:
            return document.page_numbers()
        # each page is rendered once; first occurrence keeps its position
        return list(dict.fromkeys(page_numbers))

    def _render_images(
        self,
        document: NoteDocument,
        page_numbers: Sequence[int] | None,
        cancel_event: threading.Event | None,
    ) -> list[bytes | None]:
        """Render pages in memory, aligned with ``document.pages``."""
        images: list[bytes | None] = [None] * document.page_count
        numbers = self._pages_to_render(document, page_numbers)

        with self.context.rasterizer_factory().session() as rasterizer, ProgressBar(
            total=len(numbers),
            desc="Rendering pages",
            unit="page",
            disable=not self.context.show_progress,
        ) as pbar:
            for number in numbers:
                self._check_cancelled(cancel_event, number)
                images[number - 1] = rasterizer.render(document, [number])[0].data
                pbar.set_postfix({"page": number})
                pbar.update(1)

        return images

    def _persist_images(
        self,
        document: NoteDocument,
        stem: str,
        destination: ResolvedDestination,
        page_numbers: Sequence[int] | None,
        cancel_event: threading.Event | None,
        result: ExportResult,
    ) -> list[str | None]:
        """Render and write pages one at a time.

        Returns vault paths aligned with ``document.pages`` (None for pages
        that were not requested).
        """
        storage = self.context.storage
        paths: list[str | None] = [None] * document.page_count
        numbers = self._pages_to_render(document, page_numbers)

        if destination.is_custom and numbers:
            storage.create_folder(destination.folder)

        with self.context.rasterizer_factory().session() as rasterizer, ProgressBar(
            total=len(numbers),
            desc="Exporting images",
            unit="page",
            disable=not self.context.show_progress,
        ) as pbar:
            for number in numbers:
                self._check_cancelled(cancel_event, number)
                payload = rasterizer.render(document, [number])[0].data
                path = self._leaf_path(destination, f"{stem}-{number - 1}", "png")
                stored = storage.write_binary(path, payload)
                result.created.append(stored)
                log_artifact_created(self.logger, stored)
                paths[number - 1] = stored.path
                pbar.set_postfix({"page": number})
                pbar.update(1)

        return paths

    def _persist_markdown(
        self,
        document: NoteDocument,
        source_path: str,
        stem: str,
        destination: ResolvedDestination,
        image_paths: Sequence[str | None] | None,
        result: ExportResult,
    ) -> None:
        storage = self.context.storage
        if destination.folder:
            storage.create_folder(destination.folder)

        path = allocate(destination.folder, stem, "md", storage.exists)
        assembler = MarkdownAssembler(self.context.dictionary, self.context.display)
        content = assembler.assemble(document, source_path, image_paths)

        stored = storage.write_text(path, content)
        result.created.append(stored)
        log_artifact_created(self.logger, stored)

    def _persist_pdf(
        self,
        pdf_bytes: bytes,
        stem: str,
        destination: ResolvedDestination,
        result: ExportResult,
    ) -> None:
        storage = self.context.storage
        if destination.is_custom:
            storage.create_folder(destination.folder)

        path = self._leaf_path(destination, stem, "pdf")
        stored = storage.write_binary(path, pdf_bytes)
        result.created.append(stored)
        log_artifact_created(self.logger, stored)
