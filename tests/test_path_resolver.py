from __future__ import annotations

import pytest

from supernote_export_pipeline.clients.exceptions import PathResolutionWarning
from supernote_export_pipeline.domain.config import OutputConfig
from supernote_export_pipeline.domain.models import ArtifactKind, NoteCategory
from supernote_export_pipeline.domain.path_resolver import classify, normalize_folder, resolve


def _categorized(**overrides) -> OutputConfig:
    settings = dict(
        markdown_path="Inbox",
        images_path="_assets/img",
        pdf_path="_assets/pdf",
        use_note_categorization=True,
        daily_note_pattern="YYYYMMDD-HHMMSS",
        daily_note_output_folder="Daily Notes",
        concept_note_output_folder="Concepts",
    )
    settings.update(overrides)
    return OutputConfig(**settings)


def test_classify_daily_and_concept_notes() -> None:
    assert classify("20240115-093000", "YYYYMMDD-HHMMSS") is NoteCategory.DAILY
    assert classify("MyIdeas", "YYYYMMDD-HHMMSS") is NoteCategory.CONCEPT


@pytest.mark.parametrize("filename", ["20240115-093000", "MyIdeas", "20240115"])
@pytest.mark.parametrize(
    "kind, expected",
    [
        (ArtifactKind.MARKDOWN, "Inbox"),
        (ArtifactKind.IMAGE, "_assets/img"),
        (ArtifactKind.PDF, "_assets/pdf"),
    ],
)
def test_categorization_disabled_uses_base_path(filename, kind, expected) -> None:
    config = _categorized(use_note_categorization=False)

    destination = resolve(kind, filename, config)

    assert destination.folder == expected
    assert destination.warnings == ()


def test_daily_note_markdown_goes_to_daily_folder() -> None:
    config = _categorized()

    assert resolve(ArtifactKind.MARKDOWN, "20240115-093000", config).folder == "Daily Notes"
    assert resolve(ArtifactKind.IMAGE, "20240115-093000", config).folder == "_assets/img"
    assert resolve(ArtifactKind.PDF, "20240115-093000", config).folder == "_assets/pdf"


def test_concept_note_markdown_goes_to_concept_folder() -> None:
    config = _categorized()

    assert resolve(ArtifactKind.MARKDOWN, "MyIdeas", config).folder == "Concepts"
    assert resolve(ArtifactKind.PDF, "MyIdeas", config).folder == "_assets/pdf"


def test_empty_concept_folder_means_vault_root() -> None:
    config = _categorized(concept_note_output_folder="")

    destination = resolve(ArtifactKind.MARKDOWN, "MyIdeas", config)

    assert destination.folder == ""
    assert not destination.is_custom


def test_malformed_pattern_falls_back_with_warning() -> None:
    config = _categorized(daily_note_pattern="YYYY[MM")

    destination = resolve(ArtifactKind.MARKDOWN, "20240115-093000", config)

    assert destination.folder == "Inbox"
    assert len(destination.warnings) == 1
    assert isinstance(destination.warnings[0], PathResolutionWarning)
    assert "YYYY[MM" in str(destination.warnings[0])


@pytest.mark.parametrize(
    "kind, expected", [(ArtifactKind.IMAGE, "_assets/img"), (ArtifactKind.PDF, "_assets/pdf")]
)
def test_malformed_pattern_is_ignored_for_uncategorized_kinds(kind, expected) -> None:
    config = _categorized(daily_note_pattern="YYYY[MM")

    destination = resolve(kind, "20240115-093000", config)

    assert destination.folder == expected
    assert destination.warnings == ()


@pytest.mark.parametrize(
    "raw, expected",
    [("", ""), ("/", ""), ("/notes/out/", "notes/out"), (" a\\b ", "a/b")],
)
def test_normalize_folder(raw: str, expected: str) -> None:
    assert normalize_folder(raw) == expected
