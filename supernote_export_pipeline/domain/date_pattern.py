"""
Date/time filename templates.

Compiles Moment.js-style templates such as ``YYYYMMDD-HHMMSS`` into a matcher
that tests whether a note filename conforms to the template, and renders a
timestamp into the same template. Only a small token set is supported:

    YYYY  4-digit year            YY  2-digit year
    MM    2-digit month           M   month, 1 or 2 digits
    DD    2-digit day             D   day, 1 or 2 digits
    HH    2-digit hour            H   hour, 1 or 2 digits
    mm    2-digit minute          m   minute, 1 or 2 digits
    ss    2-digit second          s   second, 1 or 2 digits

Tokens are recognised greedily from left to right, so ``MM`` always wins over
two ``M`` tokens. Text inside square brackets is a literal block
(``[Daily]-YYYYMMDD``). Any other character is a literal. A token may appear
more than once; each occurrence matches and renders independently, so the
device scheme ``YYYYMMDD-HHMMSS`` puts the month where the minutes would be.

Example usage:
    >>> from datetime import datetime
    >>> matcher = compile_pattern("YYYYMMDD-HHMMSS")
    >>> matcher.test("20240115-093000.note")
    True
    >>> compile_pattern("YYYYMMDD-HHmmss").render(datetime(2024, 1, 15, 9, 30))
    '20240115-093000'
"""

from dataclasses import dataclass
from datetime import datetime
import re

NOTE_EXTENSION = ".note"

# (token, field, digits-regex, render width); longest tokens first
_TOKENS: tuple[tuple[str, str, str, int], ...] = (
    ("YYYY", "year", r"\d{4}", 4),
    ("YY", "year", r"\d{2}", 2),
    ("MM", "month", r"\d{2}", 2),
    ("M", "month", r"\d{1,2}", 0),
    ("DD", "day", r"\d{2}", 2),
    ("D", "day", r"\d{1,2}", 0),
    ("HH", "hour", r"\d{2}", 2),
    ("H", "hour", r"\d{1,2}", 0),
    ("mm", "minute", r"\d{2}", 2),
    ("m", "minute", r"\d{1,2}", 0),
    ("ss", "second", r"\d{2}", 2),
    ("s", "second", r"\d{1,2}", 0),
)


class DatePatternError(ValueError):
    """Raised when a date template cannot be compiled."""


@dataclass(frozen=True)
class _Token:
    text: str
    field: str | None = None
    regex: str = ""
    width: int = 0

    @property
    def is_literal(self) -> bool:
        return self.field is None


def _tokenize(template: str) -> list[_Token]:
    if not template or not template.strip():
        raise DatePatternError("Date pattern is empty")

    tokens: list[_Token] = []
    i = 0
    while i < len(template):
        char = template[i]

        if char == "[":
            end = template.find("]", i + 1)
            if end == -1:
                raise DatePatternError(
                    f"Unclosed '[' at position {i} in date pattern {template!r}"
                )
            literal = template[i + 1 : end]
            if literal:
                tokens.append(_Token(literal))
            i = end + 1
            continue

        for text, field, regex, width in _TOKENS:
            if template.startswith(text, i):
                tokens.append(_Token(text, field, regex, width))
                i += len(text)
                break
        else:
            tokens.append(_Token(char))
            i += 1

    return tokens


def _field_value(now: datetime, field: str) -> int:
    if field == "year":
        return now.year
    if field == "month":
        return now.month
    if field == "day":
        return now.day
    if field == "hour":
        return now.hour
    if field == "minute":
        return now.minute
    return now.second


class DatePatternMatcher:
    """Compiled date template.

    Instances are immutable and cheap to keep around; build them with
    :func:`compile_pattern`.
    """

    def __init__(self, template: str) -> None:
        self.template = template
        self._tokens = _tokenize(template)
        body = "".join(
            re.escape(token.text) if token.is_literal else token.regex
            for token in self._tokens
        )
        self._regex = re.compile(f"^{body}$")

    @property
    def regex(self) -> re.Pattern[str]:
        """The anchored regular expression the template compiles to."""
        return self._regex

    def test(self, filename: str) -> bool:
        """Return True if the filename (minus a ``.note`` extension) matches.

        Partial matches do not count: the whole name must conform.
        """
        basename = filename
        if basename.endswith(NOTE_EXTENSION):
            basename = basename[: -len(NOTE_EXTENSION)]
        return self._regex.fullmatch(basename) is not None

    def render(self, now: datetime) -> str:
        """Render ``now`` into the template."""
        parts: list[str] = []
        for token in self._tokens:
            if token.is_literal:
                parts.append(token.text)
                continue
            value = _field_value(now, token.field)  # type: ignore[arg-type]
            if token.text == "YY":
                value %= 100
            if token.width:
                parts.append(str(value).zfill(token.width))
            else:
                parts.append(str(value))
        return "".join(parts)

    def __repr__(self) -> str:
        return f"DatePatternMatcher({self.template!r})"


def compile_pattern(template: str) -> DatePatternMatcher:
    """Compile a date template into a matcher.

    Raises:
        DatePatternError: If the template is empty or has an unclosed literal
            block.
    """
    return DatePatternMatcher(template)


def render(template: str, now: datetime | None = None) -> str:
    """Render ``now`` (default: current local time) into ``template``."""
    return compile_pattern(template).render(now or datetime.now())


def matches(filename: str, template: str) -> bool:
    """Return True if ``filename`` conforms to ``template``."""
    return compile_pattern(template).test(filename)
