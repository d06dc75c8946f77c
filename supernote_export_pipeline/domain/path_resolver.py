"""
Destination folder resolution for exported artifacts.

Given a note's filename, an artifact kind and the output configuration, decide
which folder the artifact goes to. When note categorization is enabled, only
Markdown transcripts are routed by filename: daily notes go to the daily
folder and everything else to the concept folder. Images and PDFs are linked
from the transcript rather than categorized on their own, so they always use
their configured base path.

Example usage:
    >>> config = OutputConfig(use_note_categorization=True)
    >>> resolve(ArtifactKind.MARKDOWN, "20240115-093000", config).folder
    'Daily Notes'
    >>> resolve(ArtifactKind.IMAGE, "20240115-093000", config).folder
    '_assets/supernote/images'
"""

import logging

from supernote_export_pipeline.clients.exceptions import PathResolutionWarning
from supernote_export_pipeline.domain.config import OutputConfig
from supernote_export_pipeline.domain.date_pattern import (
    DatePatternError,
    compile_pattern,
)
from supernote_export_pipeline.domain.models import (
    ArtifactKind,
    NoteCategory,
    ResolvedDestination,
)

logger = logging.getLogger(__name__)


def normalize_folder(path: str) -> str:
    """Normalize a vault-relative folder.

    Converts backslashes, strips whitespace and surrounding slashes, and
    collapses ``"/"`` to the empty string (vault root).
    """
    if not path:
        return ""
    return path.strip().replace("\\", "/").strip("/")


def classify(filename_base: str, pattern: str) -> NoteCategory:
    """Classify a note by filename.

    Raises:
        DatePatternError: If ``pattern`` is malformed.
    """
    if compile_pattern(pattern).test(filename_base):
        return NoteCategory.DAILY
    return NoteCategory.CONCEPT


def resolve(
    kind: ArtifactKind, filename_base: str, config: OutputConfig
) -> ResolvedDestination:
    """Resolve the destination folder for one artifact of a note.

    Args:
        kind: Artifact kind being written.
        filename_base: Source note filename without directory (the ``.note``
            extension is optional).
        config: Output configuration for this export.

    Returns:
        ResolvedDestination with the folder and any PathResolutionWarning
        raised while classifying. A malformed daily-note pattern never raises:
        the unclassified base path is returned instead.
    """
    base_path = normalize_folder(config.base_path(kind))

    # images and PDFs are linked from the transcript, never categorized
    if not config.use_note_categorization or kind is not ArtifactKind.MARKDOWN:
        return ResolvedDestination(kind=kind, folder=base_path)

    try:
        category = classify(filename_base, config.daily_note_pattern)
    except DatePatternError as e:
        warning = PathResolutionWarning(
            f"Daily note pattern {config.daily_note_pattern!r} is invalid ({e}); "
            f"using the {kind.label} base path"
        )
        logger.warning(str(warning))
        return ResolvedDestination(kind=kind, folder=base_path, warnings=(warning,))

    if category is NoteCategory.DAILY:
        folder = normalize_folder(config.daily_note_output_folder)
    else:
        folder = normalize_folder(config.concept_note_output_folder)

    logger.debug(f"Classified '{filename_base}' as {category.value} note -> '{folder}'")
    return ResolvedDestination(kind=kind, folder=folder)
