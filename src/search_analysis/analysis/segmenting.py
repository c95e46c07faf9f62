"""Unicode word segmentation with offset remapping and character-class tags."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import logging

from search_analysis.analysis.boundaries import (
    DONE,
    WORD_LETTER,
    WORD_NONE,
    WORD_NUMBER,
    BoundaryCursor,
    BoundaryEngine,
    RegexWordBreaker,
)
from search_analysis.analysis.offsets import OffsetMap, decode_input
from search_analysis.analysis.tokens import Token, TokenStream, TokenType
from search_analysis.analysis.unicode import classify, has_letter_or_digit


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Segment:
    """One span between two consecutive boundaries."""

    text: str
    start_offset: int
    end_offset: int
    rule_status: int
    is_token: bool


def _token_type(rule_status: int, text: str) -> TokenType:
    if WORD_NUMBER <= rule_status < WORD_LETTER:
        return TokenType.NUM
    return classify(text)


def _iter_segments(offsets: OffsetMap, cursor: BoundaryCursor) -> Iterator[Segment]:
    start = cursor.first()
    while True:
        end = cursor.next()
        if end == DONE or end < 0:
            return
        status = cursor.rule_status()
        start_char = offsets.to_char(start)
        end_char = offsets.to_char(end)
        start = end
        if end_char <= start_char:
            continue
        text = offsets.text[start_char:end_char]
        yield Segment(
            text=text,
            start_offset=offsets.char_to_source(start_char),
            end_offset=offsets.char_to_source(end_char),
            rule_status=status,
            is_token=status != WORD_NONE or has_letter_or_digit(text),
        )


class SegmentingTokenStream(TokenStream):
    def __init__(self, segments: Iterator[Segment]) -> None:
        super().__init__()
        self._segments = segments
        self._position = -1

    def _advance(self) -> bool:
        for segment in self._segments:
            if not segment.is_token:
                continue
            self._position += 1
            self._token = Token(
                text=segment.text,
                position=self._position,
                start_offset=segment.start_offset,
                end_offset=segment.end_offset,
                token_type=_token_type(segment.rule_status, segment.text),
            )
            return True
        return False


class SegmentingTokenizer:
    """Tokenizer following Unicode word-boundary rules.

    Boundary discovery is delegated to a :class:`BoundaryEngine`. The engine
    may index text in a different code-unit width than the caller; offsets of
    emitted tokens are translated back through an :class:`OffsetMap` built
    once per input. ``str`` input yields character offsets, UTF-8 ``bytes``
    input yields byte offsets.
    """

    def __init__(self, engine: BoundaryEngine | None = None) -> None:
        self.engine: BoundaryEngine = engine if engine is not None else RegexWordBreaker()
        logger.debug("Segmenting tokenizer using %s", type(self.engine).__name__)

    def _segments(self, text: str | bytes) -> Iterator[Segment]:
        decoded, source_unit = decode_input(text)
        offsets = OffsetMap(decoded, self.engine.code_unit, source_unit)
        return _iter_segments(offsets, self.engine.cursor(decoded))

    def segments(self, text: str | bytes) -> list[Segment]:
        """Every span of the input, separators included, in order."""
        return list(self._segments(text))

    def token_stream(self, text: str | bytes) -> TokenStream:
        return SegmentingTokenStream(self._segments(text))
