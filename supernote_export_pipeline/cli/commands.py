"""Command implementations for the Supernote Export Pipeline CLI.

This module contains the command functions that implement the dry-run and
export workflows. These commands are called from the main entry point after
configuration validation and client initialization.
"""

import logging

from supernote_export_pipeline.clients.storage import Storage
from supernote_export_pipeline.domain.config import AppConfig
from supernote_export_pipeline.domain.models import ExportResult
from supernote_export_pipeline.orchestration.exporter import NoteExporter
from supernote_export_pipeline.utils.logging import (
    _format_with_emoji,
    log_export_summary,
    log_plan,
)


def dry_run_command(
    cfg: AppConfig, logger: logging.Logger, exporter: NoteExporter
) -> int:
    """Execute dry-run mode to preview destinations without exporting.

    Resolves the folder and leaf path of every artifact the configured mode
    would produce and displays them as a table. Nothing is decoded or written.

    Args:
        cfg: Application configuration object
        logger: Logger instance for logging messages
        exporter: Initialized note exporter

    Returns:
        Exit code: 0 for success
    """
    logger.info("Dry-run mode enabled - previewing destinations without exporting")
    plan = exporter.plan(cfg.export.source, cfg.export.export_mode)
    log_plan(logger, plan)
    return 0


def _determine_exit_code(result: ExportResult) -> int:
    """Determine the appropriate exit code based on the export result.

    Returns:
        Exit code: 0 for success, 1 for partial failure, 2 for complete failure
    """
    if result.success:
        return 0
    if result.partial:
        return 1
    return 2


def export_command(
    cfg: AppConfig,
    logger: logging.Logger,
    exporter: NoteExporter,
    storage: Storage,
) -> int:
    """Execute the configured export.

    Reads the source note from storage, runs the export and logs a summary
    of the created files.

    Args:
        cfg: Application configuration object
        logger: Logger instance for logging messages
        exporter: Initialized note exporter
        storage: Storage the source note is read from

    Returns:
        Exit code: 0 for success, 1 for partial failure, 2 for complete failure

    Raises:
        StorageError: If the source note cannot be read.
    """
    data = storage.read_binary(cfg.export.source)
    logger.debug(f"Read {len(data)} bytes from {cfg.export.source}")

    result = exporter.export(
        cfg.export.source,
        data,
        cfg.export.export_mode,
        page_numbers=cfg.export.pages or None,
    )

    logger.info("")
    logger.info(_format_with_emoji("Export Summary:", "📊", "[SUMMARY]"))
    log_export_summary(logger, result)

    return _determine_exit_code(result)
