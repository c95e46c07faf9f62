"""Hierarchical path tokenizer.

Forward mode grows tokens from the root::

    /part1/part2/part3  ->  /part1, /part1/part2, /part1/part2/part3

Reverse mode grows them from the leaf, which suits domain names::

    mail.google.com  ->  com, google.com, mail.google.com

A leading delimiter (trailing, in reverse mode) is kept on the first
component, so the last token is always the full input unless ``max_depth``
truncates the stream. Reverse mode scans the input's grapheme clusters in
reverse order and restores each token with the same reversal primitive the
reverse filter uses.
"""

from __future__ import annotations

import enum
import logging

from search_analysis.analysis.offsets import CodeUnit, OffsetMap, decode_input
from search_analysis.analysis.tokens import Token, TokenStream
from search_analysis.analysis.unicode import graphemes, join_reversed
from search_analysis.errors import ConfigurationError


logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "/"


class _State(enum.Enum):
    SCANNING = "scanning-segment"
    AT_DELIMITER = "at-delimiter"
    END = "end-of-input"


class PathTokenStream(TokenStream):
    def __init__(self, tokenizer: PathTokenizer, text: str, offsets: OffsetMap) -> None:
        super().__init__()
        self._delimiter = tokenizer.delimiter
        self._separator = tokenizer.replacement or tokenizer.delimiter
        self._reverse = tokenizer.reverse
        self._max_depth = tokenizer.max_depth
        self._offsets = offsets
        self._length = len(text)

        units = graphemes(text)
        if self._reverse:
            units.reverse()
        self._units = units
        self._cursor = 0
        self._clusters: list[str] = []
        self._consumed = 0
        self._origin = 0
        self._depth = 0
        self._position = -1
        self._root_pending = False
        self._state = _State.SCANNING if units else _State.END

        self._needs_separator = bool(units) and units[0] == self._delimiter
        if self._needs_separator:
            self._cursor = 1
            self._root_pending = tokenizer.emit_root and tokenizer.skip == 0
        for _ in range(tokenizer.skip):
            if self._state is _State.END:
                break
            self._skip_component()

    def _scan_segment(self) -> list[str]:
        units = self._units
        start = self._cursor
        while self._cursor < len(units) and units[self._cursor] != self._delimiter:
            self._cursor += 1
        return units[start : self._cursor]

    def _skip_component(self) -> None:
        self._scan_segment()
        if self._cursor >= len(self._units):
            self._state = _State.END
            return
        # The delimiter ending the skipped component opens the first token.
        self._origin = sum(len(unit) for unit in self._units[: self._cursor])
        self._cursor += 1
        self._needs_separator = True

    def _emit(self, clusters: list[str]) -> None:
        width = sum(len(cluster) for cluster in clusters)
        if self._reverse:
            text = join_reversed(clusters)
            end = self._length - self._origin
            start = end - width
        else:
            text = "".join(clusters)
            start = self._origin
            end = start + width
        self._position += 1
        self._token = Token(
            text=text,
            position=self._position,
            start_offset=self._offsets.char_to_source(start),
            end_offset=self._offsets.char_to_source(end),
        )

    def _advance(self) -> bool:
        if self._root_pending:
            self._root_pending = False
            self._emit([self._separator])
            if self._cursor >= len(self._units):
                self._state = _State.END
            return True
        if self._state is _State.END:
            return False

        segment = self._scan_segment()
        if self._needs_separator:
            self._clusters.append(self._separator)
        else:
            self._needs_separator = True
        self._clusters.extend(segment)

        if self._cursor < len(self._units):
            self._cursor += 1
            self._state = _State.AT_DELIMITER
        else:
            self._state = _State.END

        self._depth += 1
        if self._max_depth is not None and self._depth >= self._max_depth:
            self._state = _State.END

        self._emit(self._clusters)
        return True


class PathTokenizer:
    """Tokenizer emitting successive path prefixes (or suffixes in reverse mode).

    Args:
        delimiter: Character separating path components.
        replacement: Character written in place of the delimiter inside
            emitted tokens; defaults to the delimiter itself.
        reverse: Grow tokens from the leaf instead of the root.
        skip: Number of leading components (trailing, in reverse mode) to drop.
        max_depth: Maximum number of tokens per input; deeper paths are
            truncated silently.
        emit_root: Emit a token made of the lone delimiter when the path
            starts (ends, in reverse mode) with one.
    """

    def __init__(
        self,
        *,
        delimiter: str = DEFAULT_SEPARATOR,
        replacement: str | None = None,
        reverse: bool = False,
        skip: int = 0,
        max_depth: int | None = None,
        emit_root: bool = False,
    ) -> None:
        if len(delimiter) != 1:
            raise ConfigurationError(f"Path delimiter must be a single character, got {delimiter!r}")
        if replacement is not None and len(replacement) != 1:
            raise ConfigurationError(f"Path replacement must be a single character, got {replacement!r}")
        if skip < 0:
            raise ConfigurationError(f"skip must be >= 0, got {skip}")
        if max_depth is not None and max_depth < 1:
            raise ConfigurationError(f"max_depth must be >= 1, got {max_depth}")
        self.delimiter = delimiter
        self.replacement = replacement
        self.reverse = reverse
        self.skip = skip
        self.max_depth = max_depth
        self.emit_root = emit_root
        logger.debug("Path tokenizer on %r (reverse=%s, skip=%d)", delimiter, reverse, skip)

    def token_stream(self, text: str | bytes) -> TokenStream:
        decoded, source_unit = decode_input(text)
        offsets = OffsetMap(decoded, CodeUnit.CODE_POINT, source_unit)
        return PathTokenStream(self, decoded, offsets)
