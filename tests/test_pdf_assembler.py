from __future__ import annotations

from io import BytesIO

import pytest
from pypdf import PdfReader

from supernote_export_pipeline.clients.exceptions import RasterError
from supernote_export_pipeline.clients.rasterizer import PLACEHOLDER_PNG
from supernote_export_pipeline.domain.config import DictionaryConfig
from supernote_export_pipeline.domain.pdf_assembler import PdfAssembler

from conftest import make_document


def _read(data: bytes) -> PdfReader:
    return PdfReader(BytesIO(data))


def test_one_pdf_page_per_note_page() -> None:
    document = make_document(None, "hello", None)

    reader = _read(PdfAssembler().assemble(document, [PLACEHOLDER_PNG] * 3))

    assert len(reader.pages) == 3


def test_page_size_matches_note_dimensions() -> None:
    document = make_document("a", width=1404, height=1872)

    page = _read(PdfAssembler().assemble(document, [PLACEHOLDER_PNG])).pages[0]

    assert float(page.mediabox.width) == pytest.approx(1404)
    assert float(page.mediabox.height) == pytest.approx(1872)


def test_missing_dimensions_fall_back_to_defaults() -> None:
    document = make_document("a", width=0, height=-5)

    page = _read(PdfAssembler().assemble(document, [PLACEHOLDER_PNG])).pages[0]

    assert float(page.mediabox.width) == pytest.approx(1404)
    assert float(page.mediabox.height) == pytest.approx(1872)


def test_recognized_text_is_searchable() -> None:
    document = make_document(None, "meeting notes")

    reader = _read(PdfAssembler().assemble(document, [PLACEHOLDER_PNG, PLACEHOLDER_PNG]))

    assert "meeting notes" in reader.pages[1].extract_text()
    assert "meeting" not in reader.pages[0].extract_text()


def test_dictionary_applies_to_text_layer() -> None:
    assembler = PdfAssembler(dictionary=DictionaryConfig(enabled=True, entries={"teh": "the"}))

    reader = _read(assembler.assemble(make_document("teh plan"), [PLACEHOLDER_PNG]))

    assert "the plan" in reader.pages[0].extract_text()


def test_pages_without_image_still_get_a_page() -> None:
    document = make_document("a", "b")

    reader = _read(PdfAssembler().assemble(document, [None, PLACEHOLDER_PNG]))

    assert len(reader.pages) == 2


def test_zero_page_note_yields_single_blank_page() -> None:
    reader = _read(PdfAssembler().assemble(make_document(), []))

    assert len(reader.pages) == 1


def test_title_is_set() -> None:
    reader = _read(PdfAssembler().assemble(make_document(None), [PLACEHOLDER_PNG], title="idea"))

    assert reader.metadata.title == "idea"


def test_undecodable_image_raises_raster_error() -> None:
    with pytest.raises(RasterError) as excinfo:
        PdfAssembler().assemble(make_document(None, None), [PLACEHOLDER_PNG, b"not a png"])

    assert excinfo.value.page_number == 2
