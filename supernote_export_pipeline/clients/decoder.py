"""
Note decoder interface and the supernotelib-backed implementation.

The pipeline treats the ``.note`` container format as opaque: a decoder turns
raw bytes into a :class:`NoteDocument` (page size plus per-page recognized
text) or raises :class:`DecodeError`. Nothing else in the pipeline knows about
the binary format.

Example workflow:
    # 1. decoder = SupernoteDecoder()
    # 2. document = decoder.decode(raw_bytes)
    # 3. document.pages[0].text
"""

from abc import ABC, abstractmethod
import io
import logging

import supernotelib
from supernotelib.converter import TextConverter

from ..domain.models import NoteDocument, Page
from .exceptions import DecodeError

logger = logging.getLogger(__name__)


class NoteDecoder(ABC):
    """Abstract base class for note decoders."""

    @abstractmethod
    def decode(self, data: bytes) -> NoteDocument:
        """Decode raw note bytes.

        Args:
            data: Content of the ``.note`` file.

        Returns:
            The decoded note with pages in file order.

        Raises:
            DecodeError: If the bytes are not a valid note.
        """
        pass


class SupernoteDecoder(NoteDecoder):
    """Decodes Supernote ``.note`` files with supernotelib.

    Recognized text is read per page with supernotelib's ``TextConverter``;
    pages without handwriting recognition data get ``text=None``. The parsed
    notebook is kept on :attr:`NoteDocument.source` for the rasterizer.

    Args:
        policy: supernotelib parser policy. ``"strict"`` rejects files from
            unknown firmware versions, ``"loose"`` tries to parse them anyway.
    """

    def __init__(self, policy: str = "strict") -> None:
        self.policy = policy

    def decode(self, data: bytes) -> NoteDocument:
        if not data:
            raise DecodeError("Note file is empty")

        try:
            notebook = supernotelib.load(io.BytesIO(data), policy=self.policy)
        except Exception as e:
            raise DecodeError("Failed to parse note file", original_exception=e) from e

        try:
            total_pages = notebook.get_total_pages()
            width = notebook.get_width()
            height = notebook.get_height()
        except Exception as e:
            raise DecodeError(
                "Note file has no readable page layout", original_exception=e
            ) from e

        converter = TextConverter(notebook)
        pages = []
        for index in range(total_pages):
            pages.append(Page(text=self._recognized_text(converter, index)))

        logger.debug(f"Decoded note: {total_pages} page(s), {width}x{height}")
        return NoteDocument(
            page_width=width,
            page_height=height,
            pages=tuple(pages),
            source=notebook,
        )

    def _recognized_text(self, converter, index: int) -> str | None:
        # pages without realtime recognition raise or return None
        try:
            text = converter.convert(index)
        except Exception as e:
            logger.debug(f"No recognized text on page {index + 1}: {e}")
            return None
        if not isinstance(text, str) or not text:
            return None
        return text
