"""Logging utilities for the Supernote Export Pipeline.

This module provides structured logging functions that integrate with Hydra's
logging system and support unicode/emoji for user-friendly terminal output.
"""

import logging
import os
import sys

from tabulate import tabulate

from supernote_export_pipeline.domain.models import (
    ExportPlan,
    ExportResult,
    StoredFile,
)


def _supports_unicode() -> bool:
    """Detect if terminal supports unicode/emoji.

    Checks system encoding and environment variables to determine if the
    terminal can display unicode characters and emoji.

    Returns:
        True if terminal supports unicode, False otherwise
    """
    # Check for explicit ASCII-only mode
    if os.environ.get("FORCE_ASCII") == "1":
        return False

    encoding = getattr(sys.stdout, "encoding", None)
    if encoding is None:
        return False

    unicode_encodings = {"utf-8", "utf-16", "utf-32", "utf-8-sig"}
    return encoding.lower() in unicode_encodings


def _format_with_emoji(message: str, emoji: str, fallback: str) -> str:
    """Format message with emoji or fallback text.

    Args:
        message: The message text to format
        emoji: Unicode emoji character to prepend
        fallback: ASCII fallback text to use if unicode not supported

    Returns:
        Formatted message with emoji or fallback
    """
    if _supports_unicode():
        return f"{emoji} {message}"
    else:
        return f"{fallback} {message}"


def setup_logging() -> logging.Logger:
    """Return the pipeline logger.

    Hydra configures handlers and formatting when ``@hydra.main()`` is used,
    so this only hands back the package logger.

    Example:
        >>> logger = setup_logging()
        >>> logger.info("Export started")
    """
    return logging.getLogger("supernote_export_pipeline")


def log_export_start(logger: logging.Logger, source_path: str, mode: str) -> None:
    """Log the start of an export.

    Example:
        >>> log_export_start(logger, "Notes/idea.note", "pdf")
        # Output: "📄 Exporting "Notes/idea.note" as pdf"
    """
    message = f'Exporting "{source_path}" as {mode}'
    logger.info(_format_with_emoji(message, "📄", "[*]"))


def log_artifact_created(logger: logging.Logger, stored: StoredFile) -> None:
    """Log a created file with its size."""
    size_kb = stored.size / 1024
    message = f"Created {stored.path} ({size_kb:.1f} KB)"
    logger.info(_format_with_emoji(message, "✓", "[OK]"))


def log_warning(logger: logging.Logger, message: str) -> None:
    """Log a recoverable problem."""
    logger.warning(_format_with_emoji(message, "⚠️", "[WARN]"))


def log_error(logger: logging.Logger, message: str) -> None:
    """Log a fatal export error.

    Example:
        >>> log_error(logger, "PDF export failed: Failed to parse note file")
        # Output: "❌ PDF export failed: Failed to parse note file"
    """
    logger.error(_format_with_emoji(message, "❌", "[ERROR]"))


def log_export_summary(logger: logging.Logger, result: ExportResult) -> None:
    """Log a table of created files followed by the export status.

    Partial exports are reported as partial, listing what was written before
    the failure.
    """
    if result.created:
        rows = [[f.path, f"{f.size / 1024:.1f} KB"] for f in result.created]
        table = tabulate(rows, headers=["File", "Size"], tablefmt="simple")
        for line in table.splitlines():
            logger.info(line)

    for warning in result.warnings:
        log_warning(logger, warning)

    if result.success:
        message = (
            f"Export complete: {len(result.created)} file(s) from "
            f"{result.pages_exported} page(s) in {result.processing_time:.2f}s"
        )
        logger.info(_format_with_emoji(message, "✅", "[DONE]"))
    elif result.partial:
        message = (
            f"Export partially completed: {len(result.created)} file(s) written "
            f"before failure"
        )
        logger.warning(_format_with_emoji(message, "⚠️", "[PARTIAL]"))
        for error in result.errors:
            log_error(logger, error)
    else:
        for error in result.errors:
            log_error(logger, error)


def log_plan(logger: logging.Logger, plan: ExportPlan) -> None:
    """Log a dry-run plan as a table."""
    rows = [
        [
            artifact.kind.label,
            artifact.folder or "(vault root)",
            artifact.path or "(host attachment naming)",
        ]
        for artifact in plan.artifacts
    ]
    table = tabulate(rows, headers=["Artifact", "Folder", "Path"], tablefmt="simple")
    logger.info(_format_with_emoji(f'Dry-run plan for "{plan.source_path}"', "📋", "[PLAN]"))
    for line in table.splitlines():
        logger.info(line)
    for warning in plan.warnings:
        log_warning(logger, warning)
