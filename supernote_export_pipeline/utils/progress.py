"""Progress bar utilities for the Supernote Export Pipeline.

This module provides a ProgressBar class that wraps tqdm for consistent
progress display across the pipeline with unicode/emoji support.
"""

from tqdm import tqdm

from supernote_export_pipeline.utils.logging import _supports_unicode


class ProgressBar:
    """Progress bar wrapper around tqdm for consistent styling.

    Provides a context manager interface for progress tracking with automatic
    cleanup and graceful unicode handling.

    Args:
        total: Total number of items to process
        desc: Description text to display with the progress bar
        unit: Unit label for items (e.g., "page")
        disable: Hide the bar entirely (e.g., in tests or non-interactive runs)

    Example:
        >>> with ProgressBar(total=5, desc="Rendering pages", unit="page") as pbar:
        ...     for page in pages:
        ...         # render page
        ...         pbar.update(1)
    """

    def __init__(
        self, total: int, desc: str, unit: str = "item", disable: bool = False
    ) -> None:
        self.total = total
        self.desc = desc
        self.unit = unit
        self.disable = disable
        self._pbar: tqdm | None = None

    def __enter__(self) -> "ProgressBar":
        bar_format = "{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}]"

        self._pbar = tqdm(
            total=self.total,
            desc=self.desc,
            unit=self.unit,
            ncols=80,
            bar_format=bar_format,
            ascii=not _supports_unicode(),
            disable=self.disable,
            leave=False,
        )

        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def update(self, n: int = 1) -> None:
        """Update progress bar by n items."""
        if self._pbar is not None:
            self._pbar.update(n)

    def set_postfix(self, postfix: dict) -> None:
        """Set postfix text displayed after the progress bar."""
        if self._pbar is not None:
            self._pbar.set_postfix(postfix)

    def close(self) -> None:
        """Manually close and cleanup progress bar."""
        if self._pbar is not None:
            self._pbar.close()
            self._pbar = None
