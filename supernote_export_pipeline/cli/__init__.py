"""Command-line interface components for the Supernote Export Pipeline.

This package provides command implementations that handle the dry-run and
export workflows. Commands are called from the main entry point after
configuration validation and client initialization.
"""

from .commands import dry_run_command, export_command

__all__ = ["dry_run_command", "export_command"]
