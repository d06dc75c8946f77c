"""Custom dictionary replacement for recognized handwriting text."""

import re

from supernote_export_pipeline.domain.config import DictionaryConfig


def _build_pattern(entries: dict[str, str]) -> re.Pattern[str]:
    # longest keys first so "Supernote" wins over "Super"
    keys = sorted(entries, key=len, reverse=True)
    return re.compile("|".join(re.escape(key) for key in keys))


def apply_dictionary(text: str, config: DictionaryConfig) -> str:
    """Replace every dictionary key in ``text`` with its value.

    Replacement is a single left-to-right pass; replaced text is never
    scanned again, so entries cannot chain into each other.
    """
    if not config.enabled or not config.entries or not text:
        return text
    pattern = _build_pattern(config.entries)
    return pattern.sub(lambda m: config.entries[m.group(0)], text)


def process_recognized_text(text: str, config: DictionaryConfig) -> str:
    """Text-processing hook shared by the Markdown and PDF assemblers."""
    return apply_dictionary(text, config)
