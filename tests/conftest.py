"""Shared fixtures: in-memory storage, a fake decoder and scripted rasterizers."""
from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import PurePosixPath

import pytest

from supernote_export_pipeline.clients.decoder import NoteDecoder
from supernote_export_pipeline.clients.exceptions import DecodeError, RasterError, StorageError
from supernote_export_pipeline.clients.rasterizer import PLACEHOLDER_PNG, Rasterizer
from supernote_export_pipeline.clients.storage import Storage
from supernote_export_pipeline.domain.filename_allocator import build_file_path
from supernote_export_pipeline.domain.models import NoteDocument, Page, StoredFile
from supernote_export_pipeline.orchestration.exporter import ExportContext, NoteExporter

# keep log output plain regardless of the terminal running the tests
os.environ.setdefault("FORCE_ASCII", "1")


class InMemoryStorage(Storage):
    """Storage double that keeps files in a dict keyed by vault path."""

    def __init__(
        self,
        existing: Sequence[str] = (),
        attachment_folder: str = "",
        fail_on: Sequence[str] = (),
    ) -> None:
        self.files: dict[str, bytes] = {path: b"" for path in existing}
        self.folders: set[str] = set()
        self.attachment_folder = attachment_folder
        self.fail_on = set(fail_on)
        self.writes: list[str] = []

    def exists(self, path: str) -> bool:
        return path in self.files or path in self.folders

    def create_folder(self, path: str) -> None:
        if path in self.fail_on:
            raise StorageError(f"Failed to create folder '{path}'", path=path)
        if path:
            self.folders.add(path)

    def write_text(self, path: str, content: str) -> StoredFile:
        return self.write_binary(path, content.encode("utf-8"))

    def write_binary(self, path: str, data: bytes) -> StoredFile:
        if path in self.fail_on or PurePosixPath(path).suffix in self.fail_on:
            raise StorageError(f"Failed to write '{path}'", path=path)
        if path in self.files:
            raise StorageError(f"File already exists: '{path}'", path=path)
        self.files[path] = data
        self.writes.append(path)
        return StoredFile(path=path, size=len(data))

    def read_binary(self, path: str) -> bytes:
        if path not in self.files:
            raise StorageError(f"Failed to read '{path}'", path=path)
        return self.files[path]

    def default_attachment_path(self, suggested_name: str) -> str:
        name = PurePosixPath(suggested_name)
        candidate = build_file_path(self.attachment_folder, name.stem, name.suffix[1:])
        counter = 0
        while self.exists(candidate):
            counter += 1
            candidate = build_file_path(
                self.attachment_folder, f"{name.stem} {counter}", name.suffix[1:]
            )
        return candidate

    def text(self, path: str) -> str:
        return self.files[path].decode("utf-8")


class FakeDecoder(NoteDecoder):
    """Returns a prepared document, or raises DecodeError for bad bytes."""

    def __init__(self, document: NoteDocument) -> None:
        self.document = document
        self.calls = 0

    def decode(self, data: bytes) -> NoteDocument:
        self.calls += 1
        if data == b"corrupt":
            raise DecodeError("Failed to parse note file")
        return self.document


class ScriptedRasterizer(Rasterizer):
    """Placeholder images with hooks to fail on a page and record lifecycle."""

    def __init__(self, fail_on_page: int | None = None) -> None:
        self.fail_on_page = fail_on_page
        self.acquired = 0
        self.released = 0
        self.rendered: list[int] = []

    def acquire(self) -> None:
        self.acquired += 1

    def release(self) -> None:
        self.released += 1

    def render_page(self, document: NoteDocument, page_number: int) -> bytes:
        if page_number == self.fail_on_page:
            raise RasterError(f"Page {page_number} could not be rendered", page_number=page_number)
        self.rendered.append(page_number)
        return PLACEHOLDER_PNG


def make_document(*texts: str | None, width: int = 1404, height: int = 1872) -> NoteDocument:
    return NoteDocument(page_width=width, page_height=height, pages=tuple(Page(t) for t in texts))


def make_exporter(
    storage: Storage,
    document: NoteDocument,
    rasterizer: ScriptedRasterizer | None = None,
    **settings,
) -> NoteExporter:
    rasterizer = rasterizer or ScriptedRasterizer()
    context = ExportContext(
        storage=storage,
        decoder=FakeDecoder(document),
        rasterizer_factory=lambda: rasterizer,
        show_progress=False,
        **settings,
    )
    return NoteExporter(context)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def three_page_note() -> NoteDocument:
    return make_document(None, "hello", "")
