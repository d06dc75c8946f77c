"""
Page rasterizer interface and implementations.

A rasterizer renders pages of a decoded note to PNG payloads. Rendering may
hold an expensive resource (a converter, a worker), so rasterizers are used
through a scoped session that acquires the resource on entry and releases it
on every exit path:

    >>> with rasterizer.session() as active:
    ...     images = active.render(document, [1, 2])

Implementations:
- PlaceholderRasterizer: 1x1 transparent PNG per page.
- SupernoteRasterizer: draws pages with supernotelib and encodes them with Pillow.
"""

from abc import ABC, abstractmethod
import base64
from collections.abc import Generator, Sequence
from contextlib import contextmanager
from io import BytesIO
import logging

from supernotelib.converter import ImageConverter

from ..domain.models import GeneratedImage, NoteDocument
from .exceptions import RasterError

logger = logging.getLogger(__name__)

PLACEHOLDER_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)
"""A transparent 1x1 PNG."""


def _resolve_page_numbers(
    document: NoteDocument, page_numbers: Sequence[int] | None
) -> list[int]:
    if page_numbers is None:
        return document.page_numbers()
    for number in page_numbers:
        if number < 1 or number > document.page_count:
            raise RasterError(
                f"Page {number} is out of range (note has "
                f"{document.page_count} pages)",
                page_number=number,
            )
    return list(page_numbers)


class Rasterizer(ABC):
    """Abstract base class for page rasterizers."""

    def acquire(self) -> None:
        """Acquire rendering resources. Default: nothing to acquire."""

    def release(self) -> None:
        """Release rendering resources. Must be safe to call more than once."""

    @contextmanager
    def session(self) -> Generator["Rasterizer", None, None]:
        """Scoped acquisition: release is guaranteed even if rendering fails."""
        self.acquire()
        try:
            yield self
        finally:
            self.release()

    def render(
        self, document: NoteDocument, page_numbers: Sequence[int] | None = None
    ) -> list[GeneratedImage]:
        """Render pages to PNG images.

        Args:
            document: Decoded note.
            page_numbers: 1-based pages to render, in the order to return them.
                Defaults to all pages in order.

        Returns:
            Images with the same length and order as the requested
            pages. Empty when the note has no pages.

        Raises:
            RasterError: If a requested page is out of range or fails to
                render. The error carries the failing page number.
        """
        if document.page_count == 0:
            return []
        numbers = _resolve_page_numbers(document, page_numbers)
        return [
            GeneratedImage(number, self.render_page(document, number))
            for number in numbers
        ]

    @abstractmethod
    def render_page(self, document: NoteDocument, page_number: int) -> bytes:
        """Render one 1-based page to a PNG payload."""
        pass


class PlaceholderRasterizer(Rasterizer):
    """Returns a transparent 1x1 PNG for every page."""

    def render_page(self, document: NoteDocument, page_number: int) -> bytes:
        return PLACEHOLDER_PNG


class SupernoteRasterizer(Rasterizer):
    """Renders pages of a supernotelib notebook.

    Requires :attr:`NoteDocument.source` to hold the notebook produced by
    :class:`~supernote_export_pipeline.clients.decoder.SupernoteDecoder`.
    """

    def __init__(self) -> None:
        self._converter: ImageConverter | None = None
        self._notebook = None

    def acquire(self) -> None:
        self._converter = None
        self._notebook = None

    def release(self) -> None:
        if self._converter is not None:
            logger.debug("Releasing page converter")
        self._converter = None
        self._notebook = None

    def _converter_for(self, document: NoteDocument) -> ImageConverter:
        if document.source is None:
            raise RasterError("Note was decoded without a renderable notebook")
        if self._converter is None or self._notebook is not document.source:
            self._converter = ImageConverter(document.source)
            self._notebook = document.source
        return self._converter

    def render_page(self, document: NoteDocument, page_number: int) -> bytes:
        converter = self._converter_for(document)
        try:
            image = converter.convert(page_number - 1)
            buffer = BytesIO()
            image.save(buffer, format="PNG")
        except Exception as e:
            raise RasterError(
                f"Page {page_number} could not be rendered",
                page_number=page_number,
                original_exception=e,
            ) from e
        return buffer.getvalue()
