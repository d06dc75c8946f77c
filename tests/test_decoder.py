from __future__ import annotations

import pytest

from supernote_export_pipeline.clients import decoder as decoder_module
from supernote_export_pipeline.clients.decoder import SupernoteDecoder
from supernote_export_pipeline.clients.exceptions import DecodeError


class _Notebook:
    def __init__(self, texts) -> None:
        self.texts = texts

    def get_total_pages(self) -> int:
        return len(self.texts)

    def get_width(self) -> int:
        return 1404

    def get_height(self) -> int:
        return 1872


class _TextConverter:
    def __init__(self, notebook: _Notebook) -> None:
        self.notebook = notebook

    def convert(self, index: int):
        text = self.notebook.texts[index]
        if isinstance(text, Exception):
            raise text
        return text


def test_empty_bytes_raise_decode_error() -> None:
    with pytest.raises(DecodeError, match="empty"):
        SupernoteDecoder().decode(b"")


def test_garbage_bytes_raise_decode_error_with_cause() -> None:
    with pytest.raises(DecodeError) as excinfo:
        SupernoteDecoder().decode(b"not a note file at all")

    assert "Failed to parse note file" in str(excinfo.value)
    assert excinfo.value.original_exception is not None


def test_pages_and_recognized_text_are_read(monkeypatch) -> None:
    notebook = _Notebook(["hello", None, "", RuntimeError("no recognition")])
    monkeypatch.setattr(decoder_module.supernotelib, "load", lambda stream, policy: notebook)
    monkeypatch.setattr(decoder_module, "TextConverter", _TextConverter)

    document = SupernoteDecoder(policy="loose").decode(b"data")

    assert (document.page_width, document.page_height) == (1404, 1872)
    assert [page.text for page in document.pages] == ["hello", None, None, None]
    assert document.source is notebook


def test_unreadable_layout_raises_decode_error(monkeypatch) -> None:
    class _Broken(_Notebook):
        def get_width(self) -> int:
            raise KeyError("WIDTH")

    monkeypatch.setattr(decoder_module.supernotelib, "load", lambda stream, policy: _Broken([]))

    with pytest.raises(DecodeError, match="page layout"):
        SupernoteDecoder().decode(b"data")
