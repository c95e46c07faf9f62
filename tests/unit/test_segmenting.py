"""Unit tests for the Unicode segmenting tokenizer."""

import pytest

from search_analysis.analysis.boundaries import DONE, WORD_LETTER, WORD_NONE, RegexWordBreaker
from search_analysis.analysis.offsets import CodeUnit
from search_analysis.analysis.segmenting import SegmentingTokenizer
from search_analysis.analysis.tokens import TokenType
from search_analysis.errors import InputEncodingError


class _ScriptedCursor:
    def __init__(self, boundaries, statuses):
        self._boundaries = boundaries
        self._statuses = statuses
        self._index = 0

    def first(self):
        self._index = 0
        return self._boundaries[0]

    def next(self):
        self._index += 1
        if self._index >= len(self._boundaries):
            return DONE
        return self._boundaries[self._index]

    def rule_status(self):
        return self._statuses[self._index - 1]


class ScriptedUtf16Engine:
    """Boundary engine double reporting fixed UTF-16 boundaries."""

    code_unit = CodeUnit.UTF16

    def __init__(self, boundaries, statuses):
        self.boundaries = boundaries
        self.statuses = statuses

    def cursor(self, text):
        return _ScriptedCursor(self.boundaries, self.statuses)


@pytest.mark.unit
class TestSegmentingTokenizer:
    """Default regex engine: word tokens, separators skipped."""

    def test_emits_words_with_offsets_and_positions(self):
        tokens = list(SegmentingTokenizer().token_stream("Hello, world!"))

        assert [t.text for t in tokens] == ["Hello", "world"]
        assert [(t.start_offset, t.end_offset) for t in tokens] == [(0, 5), (7, 12)]
        assert [t.position for t in tokens] == [0, 1]

    def test_non_ascii_str_offsets_are_characters(self):
        tokens = list(SegmentingTokenizer().token_stream("café noir"))

        assert [(t.text, t.start_offset, t.end_offset) for t in tokens] == [("café", 0, 4), ("noir", 5, 9)]

    def test_bytes_offsets_are_utf8(self):
        text = "café noir".encode()
        tokens = list(SegmentingTokenizer().token_stream(text))

        assert [(t.text, t.start_offset, t.end_offset) for t in tokens] == [("café", 0, 5), ("noir", 6, 10)]
        assert text[6:10].decode() == "noir"

    def test_combining_marks_stay_in_their_word(self):
        tokens = list(SegmentingTokenizer().token_stream("cafe\u0301 ok"))

        assert tokens[0].text == "cafe\u0301"
        assert tokens[0].end_offset == 5

    def test_token_types(self):
        tokens = list(SegmentingTokenizer().token_stream("abc 123 東京"))
        by_text = {t.text: t.token_type for t in tokens}

        assert by_text["abc"] is TokenType.ALPHANUM
        assert by_text["123"] is TokenType.NUM
        han = [t for t in tokens if t.token_type is TokenType.IDEOGRAPHIC]
        assert "".join(t.text for t in han) == "東京"

    def test_southeast_asian_runs_stay_whole(self):
        tokens = list(SegmentingTokenizer().token_stream("ไทยภาษา ok ລາວ"))

        assert [(t.text, t.start_offset, t.end_offset) for t in tokens] == [
            ("ไทยภาษา", 0, 7),
            ("ok", 8, 10),
            ("ລາວ", 11, 14),
        ]
        assert tokens[0].token_type is TokenType.SOUTHEAST_ASIAN
        assert [t.position for t in tokens] == [0, 1, 2]

    @pytest.mark.parametrize("text", ["Hello, world!", "  l'arbre — 3.14 東京 ", "a\u0301 😀 b", "ไทยภาษา, ok", ""])
    def test_segments_reconstruct_input(self, text):
        segments = SegmentingTokenizer().segments(text)

        assert "".join(segment.text for segment in segments) == text
        assert all(segment.start_offset < segment.end_offset for segment in segments)

    def test_offsets_stay_within_input(self):
        text = "Ünïcödé wörds, 数字 42"
        for token in SegmentingTokenizer().token_stream(text):
            assert 0 <= token.start_offset <= token.end_offset <= len(text)
            assert text[token.start_offset : token.end_offset] == token.text

    def test_empty_input_yields_nothing(self):
        stream = SegmentingTokenizer().token_stream("")

        assert stream.advance() is False

    def test_lone_surrogate_fails_before_streaming(self):
        with pytest.raises(InputEncodingError):
            SegmentingTokenizer().token_stream("ab\udc00")

    def test_default_engine_is_regex(self):
        assert isinstance(SegmentingTokenizer().engine, RegexWordBreaker)


@pytest.mark.unit
class TestWideEngineOffsets:
    """Engines indexing UTF-16 units get their boundaries translated back."""

    def test_utf16_boundaries_map_to_characters(self):
        engine = ScriptedUtf16Engine([0, 1, 3, 4], [WORD_LETTER, WORD_NONE, WORD_LETTER])
        tokens = list(SegmentingTokenizer(engine).token_stream("a😀b"))

        assert [(t.text, t.start_offset, t.end_offset) for t in tokens] == [("a", 0, 1), ("b", 2, 3)]
        assert [t.position for t in tokens] == [0, 1]

    def test_utf16_boundaries_map_to_bytes(self):
        engine = ScriptedUtf16Engine([0, 1, 3, 4], [WORD_LETTER, WORD_NONE, WORD_LETTER])
        tokens = list(SegmentingTokenizer(engine).token_stream("a😀b".encode()))

        assert [(t.text, t.start_offset, t.end_offset) for t in tokens] == [("a", 0, 1), ("b", 5, 6)]

    def test_split_surrogate_pair_is_fatal(self):
        engine = ScriptedUtf16Engine([0, 2, 4], [WORD_LETTER, WORD_LETTER])
        stream = SegmentingTokenizer(engine).token_stream("a😀b")

        with pytest.raises(InputEncodingError) as excinfo:
            stream.advance()

        assert (excinfo.value.start_offset, excinfo.value.end_offset) == (1, 2)
        assert stream.advance() is False

    def test_zero_length_spans_are_skipped(self):
        engine = ScriptedUtf16Engine([0, 0, 2, 2], [WORD_LETTER, WORD_LETTER, WORD_LETTER])
        tokens = list(SegmentingTokenizer(engine).token_stream("ab"))

        assert [t.text for t in tokens] == ["ab"]
