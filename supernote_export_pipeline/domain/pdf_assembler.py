"""
PDF assembly for exported notes.

Builds a paginated PDF from a decoded note and its rendered page images using
ReportLab's canvas. Each note page becomes one PDF page of the note's pixel
size. Recognized text is written first as a zero-opacity text layer anchored
at the top-left, then the page image is drawn over the full canvas, so the
handwriting is the only visible content while the text stays selectable and
searchable.
"""

from collections.abc import Sequence
from io import BytesIO
import logging

from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from supernote_export_pipeline.clients.exceptions import RasterError
from supernote_export_pipeline.domain.config import DictionaryConfig
from supernote_export_pipeline.domain.dictionary import process_recognized_text
from supernote_export_pipeline.domain.models import NoteDocument

logger = logging.getLogger(__name__)


class PdfAssembler:
    """Assembles a note into PDF bytes.

    Attributes:
        dictionary: Dictionary applied to recognized text before it is laid
            into the text layer.
        font_name: Standard PDF font used for the invisible text layer.
        font_size: Font size of the text layer in PDF units (pixels).
        text_margin: Offset of the text layer from the top-left corner.
    """

    def __init__(
        self,
        dictionary: DictionaryConfig | None = None,
        font_name: str = "Helvetica",
        font_size: int = 100,
        text_margin: int = 20,
    ) -> None:
        self.dictionary = dictionary or DictionaryConfig()
        self.font_name = font_name
        self.font_size = font_size
        self.text_margin = text_margin

    def assemble(
        self,
        document: NoteDocument,
        images: Sequence[bytes | None],
        title: str | None = None,
    ) -> bytes:
        """Render the PDF.

        Args:
            document: Decoded note.
            images: PNG payloads aligned with ``document.pages``. Pages without
                an image (or with a None entry) carry only their text layer.
            title: Optional PDF document title.

        Returns:
            The PDF file content.

        Raises:
            RasterError: If a page image payload cannot be decoded.
        """
        width = document.effective_width
        height = document.effective_height

        buffer = BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=(width, height))
        if title:
            pdf.setTitle(title)

        for i, page in enumerate(document.pages):
            # the first page is current; later pages must be started explicitly
            if i > 0:
                pdf.showPage()

            if page.has_text:
                text = process_recognized_text(page.text, self.dictionary)
                self._draw_text_layer(pdf, text, width, height)

            if i < len(images) and images[i] is not None:
                self._draw_page_image(pdf, images[i], i + 1, width, height)

        pdf.showPage()
        pdf.save()

        logger.debug(f"Assembled PDF with {max(document.page_count, 1)} page(s)")
        return buffer.getvalue()

    def _draw_text_layer(
        self, pdf: canvas.Canvas, text: str, width: int, height: int
    ) -> None:
        max_width = max(width - 2 * self.text_margin, self.font_size)
        lines = simpleSplit(text, self.font_name, self.font_size, max_width)
        if not lines:
            return

        pdf.saveState()
        pdf.setFillColorRGB(0, 0, 0, alpha=0)
        text_object = pdf.beginText()
        text_object.setFont(self.font_name, self.font_size, leading=self.font_size * 1.15)
        text_object.setTextOrigin(self.text_margin, height - self.text_margin - self.font_size)
        for line in lines:
            text_object.textLine(line)
        pdf.drawText(text_object)
        pdf.restoreState()

    def _draw_page_image(
        self,
        pdf: canvas.Canvas,
        data: bytes,
        page_number: int,
        width: int,
        height: int,
    ) -> None:
        try:
            with Image.open(BytesIO(data)) as image:
                rgba = image.convert("RGBA")
        except (UnidentifiedImageError, OSError) as e:
            raise RasterError(
                f"Page {page_number} image could not be decoded",
                page_number=page_number,
                original_exception=e,
            ) from e

        # flatten onto white; transparency renders inconsistently across viewers
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.split()[3])
        pdf.drawInlineImage(background, 0, 0, width, height)
