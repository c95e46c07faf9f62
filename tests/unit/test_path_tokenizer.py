"""Unit tests for the hierarchical path tokenizer."""

import pytest

from search_analysis.analysis.path import PathTokenizer
from search_analysis.errors import ConfigurationError


def _spans(tokenizer, text):
    return [(t.text, t.start_offset, t.end_offset) for t in tokenizer.token_stream(text)]


@pytest.mark.unit
class TestForwardPaths:
    """Forward mode grows prefixes from the root."""

    def test_leading_delimiter_is_kept_on_first_component(self):
        tokens = list(PathTokenizer().token_stream("/a/b/c"))

        assert [t.text for t in tokens] == ["/a", "/a/b", "/a/b/c"]
        assert [(t.start_offset, t.end_offset) for t in tokens] == [(0, 2), (0, 4), (0, 6)]
        assert [t.position for t in tokens] == [0, 1, 2]

    def test_relative_path(self):
        assert [t for t, _, _ in _spans(PathTokenizer(), "a/b")] == ["a", "a/b"]

    def test_trailing_delimiter_ends_the_last_token(self):
        assert [t for t, _, _ in _spans(PathTokenizer(), "a/b/")] == ["a", "a/b", "a/b/"]

    def test_replacement_character(self):
        tokenizer = PathTokenizer(delimiter="\\", replacement="/")

        assert _spans(tokenizer, "c:\\a\\b") == [("c:", 0, 2), ("c:/a", 0, 4), ("c:/a/b", 0, 6)]

    def test_skip_drops_leading_components(self):
        assert _spans(PathTokenizer(skip=1), "/a/b/c") == [("/b", 2, 4), ("/b/c", 2, 6)]

    def test_skip_past_end_yields_nothing(self):
        assert _spans(PathTokenizer(skip=5), "/a/b") == []

    def test_max_depth_truncates(self):
        assert [t for t, _, _ in _spans(PathTokenizer(max_depth=2), "/a/b/c")] == ["/a", "/a/b"]

    def test_emit_root(self):
        assert _spans(PathTokenizer(emit_root=True), "/a/b") == [("/", 0, 1), ("/a", 0, 2), ("/a/b", 0, 4)]

    def test_bare_root(self):
        assert [t for t, _, _ in _spans(PathTokenizer(), "/")] == ["/"]

    def test_empty_input(self):
        assert _spans(PathTokenizer(), "") == []

    def test_bytes_input_reports_byte_offsets(self):
        assert _spans(PathTokenizer(), "/é/b".encode()) == [("/é", 0, 3), ("/é/b", 0, 5)]


@pytest.mark.unit
class TestReversePaths:
    """Reverse mode grows suffixes from the leaf."""

    def test_mirrors_forward_growth(self):
        tokens = list(PathTokenizer(reverse=True).token_stream("/a/b/c"))

        assert [t.text for t in tokens] == ["c", "b/c", "a/b/c", "/a/b/c"]
        assert [(t.start_offset, t.end_offset) for t in tokens] == [(5, 6), (3, 6), (1, 6), (0, 6)]
        assert [t.position for t in tokens] == [0, 1, 2, 3]

    def test_domain_names(self):
        tokenizer = PathTokenizer(delimiter=".", reverse=True)

        assert [t for t, _, _ in _spans(tokenizer, "mail.google.com")] == ["com", "google.com", "mail.google.com"]

    def test_replacement_and_skip(self):
        tokenizer = PathTokenizer(delimiter="\\", replacement="/", reverse=True, skip=1)

        assert _spans(tokenizer, "c:\\a\\b\\c") == [("b/", 5, 7), ("a/b/", 3, 7), ("c:/a/b/", 0, 7)]

    def test_components_keep_grapheme_order(self):
        tokenizer = PathTokenizer(delimiter=".", reverse=True)

        assert [t for t, _, _ in _spans(tokenizer, "cafe\u0301.fr")] == ["fr", "cafe\u0301.fr"]


@pytest.mark.unit
class TestPathTokenizerConfiguration:
    @pytest.mark.parametrize(
        "options",
        [{"delimiter": ""}, {"delimiter": "//"}, {"replacement": "ab"}, {"skip": -1}, {"max_depth": 0}],
    )
    def test_invalid_options_fail_at_construction(self, options):
        with pytest.raises(ConfigurationError):
            PathTokenizer(**options)
