"""
Markdown transcript assembly for exported notes.

This module builds the Markdown file written next to a note export: a link
back to the source ``.note`` file, then one ``## Page N`` section per page
holding the recognized text and the embedded page image. Pages are emitted
strictly in decoder order with no deduplication.

Recognized text is handwriting, not Markdown, so it is parsed with markdown-it
before being emitted: lines the parser would read as headings are escaped, and
text that would swallow the following page heading (an unclosed code fence or
HTML comment) has its block markers escaped. The transcript therefore always
contains exactly one level-2 heading per page.

Example usage:
    >>> from supernote_export_pipeline.domain.models import NoteDocument, Page
    >>> assembler = MarkdownAssembler()
    >>> doc = NoteDocument(1404, 1872, (Page(), Page("hello")))
    >>> print(assembler.assemble(doc, "Notes/idea.note"))
    [[Notes/idea.note]]
    <BLANKLINE>
    ## Page 1
    <BLANKLINE>
    ## Page 2
    <BLANKLINE>
    hello
    <BLANKLINE>
"""

from collections.abc import Sequence
import logging
from urllib.parse import quote

from markdown_it import MarkdownIt

from supernote_export_pipeline.domain.config import DictionaryConfig, DisplayConfig
from supernote_export_pipeline.domain.dictionary import process_recognized_text
from supernote_export_pipeline.domain.models import NoteDocument

logger = logging.getLogger(__name__)

INVERT_DARK_SUBPATH = "supernote-invert-dark"
"""Subpath appended to image embeds so a CSS snippet can invert them in
dark themes."""

_SENTINEL_HEADING = "## sentinel"
_ASCII_PUNCTUATION = set("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")


class MarkdownAssembler:
    """Builds the Markdown transcript of a decoded note.

    Attributes:
        dictionary: Dictionary applied to each page's recognized text.
        display: Link style and invert-colors settings.
    """

    def __init__(
        self,
        dictionary: DictionaryConfig | None = None,
        display: DisplayConfig | None = None,
    ) -> None:
        self.dictionary = dictionary or DictionaryConfig()
        self.display = display or DisplayConfig()
        self.md = MarkdownIt("commonmark")

    def assemble(
        self,
        document: NoteDocument,
        source_path: str,
        image_paths: Sequence[str | None] | None = None,
    ) -> str:
        """Assemble the transcript.

        Args:
            document: Decoded note.
            source_path: Vault-relative path of the source ``.note`` file.
            image_paths: Optional vault-relative image paths aligned with
                ``document.pages``. Pages without a corresponding entry (or
                with a None entry) get no embed.

        Returns:
            Markdown text ending with a newline.
        """
        blocks = [self.link(source_path)]

        for i, page in enumerate(document.pages):
            blocks.append(f"## Page {i + 1}")
            if page.has_text:
                text = process_recognized_text(page.text, self.dictionary)
                text = self.sanitize_text(text)
                if text:
                    blocks.append(text)
            if image_paths is not None and i < len(image_paths) and image_paths[i]:
                subpath = INVERT_DARK_SUBPATH if self.display.invert_colors_when_dark else ""
                blocks.append(self.embed(image_paths[i], subpath))

        return "\n\n".join(blocks) + "\n"

    def link(self, path: str) -> str:
        """Link to a vault file in the configured style."""
        if self.display.link_style == "markdown":
            return f"[{_display_name(path)}]({quote(path, safe='/')})"
        return f"[[{path}]]"

    def embed(self, path: str, subpath: str = "") -> str:
        """Embed a vault file in the configured style."""
        suffix = f"#{subpath}" if subpath else ""
        if self.display.link_style == "markdown":
            return f"![{_display_name(path)}]({quote(path, safe='/')}{suffix})"
        return f"![[{path}{suffix}]]"

    def sanitize_text(self, text: str) -> str:
        """Neutralize Markdown structure that would break the page outline."""
        text = text.replace("\r\n", "\n").replace("\r", "\n").rstrip("\n")
        if not text.strip():
            return ""

        text = self._escape_headings(text)

        if not self._keeps_following_heading(text):
            logger.debug("Recognized text swallows following heading; escaping blocks")
            text = "\n".join(_escape_line(line) for line in text.split("\n"))

        return text

    def _escape_headings(self, text: str) -> str:
        lines = text.split("\n")
        for token in self.md.parse(text):
            if token.type != "heading_open" or token.map is None:
                continue
            start, end = token.map
            # ATX headings start on their first line, setext on the underline
            index = start if token.markup.startswith("#") else end - 1
            lines[index] = _escape_line(lines[index], force=True)
        return "\n".join(lines)

    def _keeps_following_heading(self, text: str) -> bool:
        sentinel_line = len(text.split("\n")) + 1
        for token in self.md.parse(f"{text}\n\n{_SENTINEL_HEADING}"):
            if (
                token.type == "heading_open"
                and token.tag == "h2"
                and token.level == 0
                and token.map is not None
                and token.map[0] == sentinel_line
            ):
                return True
        return False


def _display_name(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def _escape_line(line: str, force: bool = False) -> str:
    stripped = line.lstrip(" ")
    if not stripped:
        return line
    if not force and stripped[0] not in _ASCII_PUNCTUATION:
        return line
    indent = line[: len(line) - len(stripped)]
    return f"{indent}\\{stripped}"
