"""
Custom exception classes for the export pipeline.

This module defines domain-specific exceptions that provide clear error context
for decoding, rasterization and storage operations, making abort-vs-continue
decisions in the orchestration layer explicit.

Exception Hierarchy:
- ExportPipelineError (base for all fatal export errors)
  ├── DecodeError        (malformed source note, nothing is written)
  ├── RasterError        (a page could not be rendered)
  ├── StorageError       (folder creation or file write failed)
  └── ExportCancelled    (caller requested cancellation between pages)
- PathResolutionWarning (recoverable, destination falls back to base path)
"""


class ExportPipelineError(Exception):
    """Base exception for all export pipeline errors.

    All fatal errors raised by collaborators (decoder, rasterizer, storage)
    inherit from this class, allowing the orchestrator to catch them in one
    place while keeping specific types for precise error handling.
    """

    def __init__(self, message: str, original_exception: Exception | None = None):
        """Initialize the exception.

        Args:
            message: Human-readable error message describing what went wrong.
            original_exception: Optional original exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception

    def __str__(self) -> str:
        """Return string representation with context."""
        if self.original_exception:
            orig_type = type(self.original_exception).__name__
            orig_msg = str(self.original_exception)
            return f"{self.message} (Original: {orig_type}: {orig_msg})"
        return self.message


class DecodeError(ExportPipelineError):
    """Exception raised when the source note bytes cannot be decoded.

    Decoding failures are fatal: the export is aborted before any folder is
    created or any file is written.
    """

    pass


class RasterError(ExportPipelineError):
    """Exception raised when a page cannot be rendered to an image.

    Carries the 1-based page number that failed so callers can report which
    page broke. Images written for earlier pages are kept.
    """

    def __init__(
        self,
        message: str,
        page_number: int | None = None,
        original_exception: Exception | None = None,
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message describing what went wrong.
            page_number: 1-based page number that failed, if known.
            original_exception: Optional original exception that caused this error.
        """
        super().__init__(message, original_exception)
        self.page_number = page_number


class StorageError(ExportPipelineError):
    """Exception raised when storage cannot create a folder or write a file.

    Fatal for the artifact being written. Sibling artifacts that were already
    written are not rolled back.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        original_exception: Exception | None = None,
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message describing what went wrong.
            path: Vault-relative path of the failed operation, if known.
            original_exception: Optional original exception that caused this error.
        """
        super().__init__(message, original_exception)
        self.path = path


class ExportCancelled(ExportPipelineError):
    """Exception raised when an export is cancelled between pages."""

    pass


class PathResolutionWarning(UserWarning):
    """Warning attached to a resolved destination when categorization failed.

    Raised (as a value, not thrown) when the daily-note pattern is malformed.
    The destination falls back to the unclassified base path and the export
    continues.
    """

    pass
