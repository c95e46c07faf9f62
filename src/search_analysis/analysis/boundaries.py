"""Word-boundary engines driven by the segmenting tokenizer.

An engine is a shared, immutable resource. For every input text it hands out
a fresh :class:`BoundaryCursor` that walks boundaries in order and reports
the rule status of the span that ends at the current boundary. Status values
follow ICU's word-break tags so engines are interchangeable.
"""

from __future__ import annotations

import logging
from typing import Protocol

import regex

from search_analysis.analysis.offsets import CodeUnit
from search_analysis.analysis.tokens import TokenType
from search_analysis.analysis.unicode import classify, is_southeast_asian


logger = logging.getLogger(__name__)

DONE = -1

WORD_NONE = 0
WORD_NUMBER = 100
WORD_LETTER = 200
WORD_KANA = 300
WORD_IDEO = 400
WORD_IDEO_LIMIT = 500


class BoundaryCursor(Protocol):
    """Iterates boundaries of one text, ICU break-iterator style."""

    def first(self) -> int:  # pragma: no cover - interface definition
        ...

    def next(self) -> int:  # pragma: no cover - interface definition
        ...

    def rule_status(self) -> int:  # pragma: no cover - interface definition
        ...


class BoundaryEngine(Protocol):
    """Factory of boundary cursors; positions are in ``code_unit`` units."""

    code_unit: CodeUnit

    def cursor(self, text: str) -> BoundaryCursor:  # pragma: no cover - interface definition
        ...


def status_for(text: str) -> int:
    """Map a span's character class onto an ICU word-break status."""
    token_type = classify(text)
    if token_type is TokenType.NUM:
        return WORD_NUMBER
    if token_type in (TokenType.HIRAGANA, TokenType.KATAKANA):
        return WORD_KANA
    if token_type is TokenType.IDEOGRAPHIC:
        return WORD_IDEO
    if token_type is TokenType.OTHER:
        return WORD_NONE
    return WORD_LETTER


class _RegexCursor:
    def __init__(self, pattern: regex.Pattern[str], text: str) -> None:
        self._text = text
        self._matches = pattern.finditer(text)
        self._current = 0
        self._status = WORD_NONE
        self._done = False

    def first(self) -> int:
        self._current = 0
        return 0

    def next(self) -> int:
        if self._done:
            return DONE
        end = len(self._text)
        for match in self._matches:
            position = match.start()
            if position > self._current and not self._inside_run(position):
                return self._move(position)
        if self._current < end:
            return self._move(end)
        self._done = True
        return DONE

    def rule_status(self) -> int:
        return self._status

    def _inside_run(self, position: int) -> bool:
        text = self._text
        if not 0 < position < len(text):
            return False
        return is_southeast_asian(text[position - 1]) and is_southeast_asian(text[position])

    def _move(self, position: int) -> int:
        self._status = status_for(self._text[self._current : position])
        self._current = position
        return position


class RegexWordBreaker:
    """Default engine: Unicode (UAX #29) word boundaries from ``regex``.

    Positions are code points. Boundaries never fall inside a grapheme
    cluster. Thai, Lao, Myanmar and Khmer need a dictionary to find word
    boundaries, which this engine lacks, so a run of those scripts stays
    one span. Use :class:`search_analysis.icu.IcuWordBreaker` to split such
    runs into words.
    """

    code_unit = CodeUnit.CODE_POINT

    def __init__(self) -> None:
        self._pattern = regex.compile(r"\b", regex.VERSION1 | regex.WORD)
        logger.debug("Regex word breaker compiled")

    def cursor(self, text: str) -> BoundaryCursor:
        return _RegexCursor(self._pattern, text)
