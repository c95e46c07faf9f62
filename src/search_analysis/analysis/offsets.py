"""Offset remapping between a boundary engine's code units and caller offsets.

Boundary engines index text in their own code units (ICU uses UTF-16, the
``regex`` engine uses code points) while callers expect offsets in the unit
they supplied: characters for ``str`` input, bytes for UTF-8 ``bytes``
input. :class:`OffsetMap` is built once per input in a single pass and then
answers every boundary lookup in O(1).
"""

from __future__ import annotations

from array import array
import enum

import regex

from search_analysis.errors import InputEncodingError


class CodeUnit(enum.Enum):
    """Index space a boundary engine reports positions in."""

    CODE_POINT = "code_point"
    UTF16 = "utf-16"


class SourceUnit(enum.Enum):
    """Unit the caller's offsets are measured in."""

    CHARACTER = "character"
    UTF8_BYTE = "utf-8"


_SURROGATE = regex.compile(r"[\ud800-\udfff]")

# Marks the second UTF-16 unit of a surrogate pair: not a character boundary.
_INSIDE = -1


def decode_input(text: str | bytes) -> tuple[str, SourceUnit]:
    """Return the text to segment and the unit offsets must be reported in."""
    if isinstance(text, (bytes, bytearray, memoryview)):
        raw = bytes(text)
        try:
            return raw.decode("utf-8"), SourceUnit.UTF8_BYTE
        except UnicodeDecodeError as exc:
            raise InputEncodingError(
                "Input is not valid UTF-8", start_offset=exc.start, end_offset=exc.end
            ) from exc
    return text, SourceUnit.CHARACTER


def _utf8_width(code_point: int) -> int:
    if code_point < 0x80:
        return 1
    if code_point < 0x800:
        return 2
    if code_point < 0x10000:
        return 3
    return 4


class OffsetMap:
    """Position-mapping table for one input text."""

    def __init__(self, text: str, engine_unit: CodeUnit, source_unit: SourceUnit) -> None:
        self.text = text
        self.engine_unit = engine_unit
        self.source_unit = source_unit
        self._engine_to_char: array | None = None
        self._char_to_source: array | None = None
        self.source_length = len(text)
        self._build()

    def _build(self) -> None:
        text = self.text
        surrogate = _SURROGATE.search(text)
        if surrogate is not None:
            # Only reachable for str input: decoded UTF-8 never holds surrogates.
            index = surrogate.start()
            raise InputEncodingError("Unpaired surrogate in input", start_offset=index, end_offset=index + 1)

        wide = self.engine_unit is CodeUnit.UTF16
        utf8 = self.source_unit is SourceUnit.UTF8_BYTE
        if not wide and not utf8:
            return

        engine_to_char = array("q") if wide else None
        char_to_source = array("q") if utf8 else None
        source = 0
        for index, char in enumerate(text):
            code_point = ord(char)
            if char_to_source is not None:
                char_to_source.append(source)
                source += _utf8_width(code_point)
            if engine_to_char is not None:
                engine_to_char.append(index)
                if code_point > 0xFFFF:
                    engine_to_char.append(_INSIDE)
        if char_to_source is not None:
            char_to_source.append(source)
            self.source_length = source
        if engine_to_char is not None:
            engine_to_char.append(len(text))

        self._engine_to_char = engine_to_char
        self._char_to_source = char_to_source

    @property
    def engine_length(self) -> int:
        if self._engine_to_char is None:
            return len(self.text)
        return len(self._engine_to_char) - 1

    def to_char(self, engine_index: int) -> int:
        """Character index in ``text`` for an engine boundary position."""
        if self._engine_to_char is None:
            if not 0 <= engine_index <= len(self.text):
                raise self._out_of_range(engine_index)
            return engine_index
        if not 0 <= engine_index < len(self._engine_to_char):
            raise self._out_of_range(engine_index)
        char_index = self._engine_to_char[engine_index]
        if char_index == _INSIDE:
            owner = self._engine_to_char[engine_index - 1]
            start = self.char_to_source(owner)
            raise InputEncodingError(
                "Boundary splits a surrogate pair",
                start_offset=start,
                end_offset=self.char_to_source(owner + 1),
            )
        return char_index

    def char_to_source(self, char_index: int) -> int:
        if self._char_to_source is None:
            return char_index
        return self._char_to_source[char_index]

    def to_source(self, engine_index: int) -> int:
        """Caller offset for an engine boundary position."""
        return self.char_to_source(self.to_char(engine_index))

    def _out_of_range(self, engine_index: int) -> InputEncodingError:
        return InputEncodingError(
            f"Boundary {engine_index} lies outside the input",
            start_offset=self.source_length,
            end_offset=self.source_length,
        )
