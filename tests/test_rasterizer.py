from __future__ import annotations

import pytest

from supernote_export_pipeline.clients.exceptions import RasterError
from supernote_export_pipeline.clients.rasterizer import (
    PLACEHOLDER_PNG,
    PlaceholderRasterizer,
    SupernoteRasterizer,
)

from conftest import ScriptedRasterizer, make_document


def test_placeholder_renders_every_page_in_order() -> None:
    images = PlaceholderRasterizer().render(make_document("a", None, "c"))

    assert [image.page_number for image in images] == [1, 2, 3]
    assert all(image.data == PLACEHOLDER_PNG for image in images)
    assert PLACEHOLDER_PNG.startswith(b"\x89PNG")


def test_render_subset_keeps_requested_order() -> None:
    images = PlaceholderRasterizer().render(make_document("a", "b", "c"), [3, 1])

    assert [image.page_number for image in images] == [3, 1]


def test_zero_page_note_renders_nothing() -> None:
    assert PlaceholderRasterizer().render(make_document()) == []


def test_out_of_range_page_raises() -> None:
    with pytest.raises(RasterError) as excinfo:
        PlaceholderRasterizer().render(make_document("a"), [2])

    assert excinfo.value.page_number == 2


def test_session_releases_after_failure() -> None:
    rasterizer = ScriptedRasterizer(fail_on_page=1)

    with pytest.raises(RasterError):
        with rasterizer.session() as active:
            active.render(make_document("a"))

    assert (rasterizer.acquired, rasterizer.released) == (1, 1)


def test_supernote_rasterizer_needs_a_notebook() -> None:
    with pytest.raises(RasterError):
        SupernoteRasterizer().render(make_document("a"))
