"""Unit tests for the elision filter."""

import pytest

from search_analysis.analysis.elision import ElisionFilter, elisions_for
from search_analysis.analysis.simple import WhitespaceTokenizer
from search_analysis.errors import ConfigurationError


def _run(token_filter, text):
    stream = token_filter.transform(WhitespaceTokenizer().token_stream(text))
    return [(t.text, t.position, t.start_offset, t.end_offset) for t in stream]


@pytest.mark.unit
class TestElisionFilter:
    """French articles are stripped once, offsets shrink to the remainder."""

    def test_strips_article(self):
        assert _run(ElisionFilter(), "l'arbre") == [("arbre", 0, 2, 7)]

    def test_word_without_marker_passes_through(self):
        assert _run(ElisionFilter(), "arbre") == [("arbre", 0, 0, 5)]

    def test_case_insensitive_with_typographic_apostrophe(self):
        assert _run(ElisionFilter(), "L’avion Qu'il") == [("avion", 0, 2, 7), ("il", 1, 11, 13)]

    def test_unknown_prefix_is_untouched(self):
        assert _run(ElisionFilter(), "aujourd'hui") == [("aujourd'hui", 0, 0, 11)]

    def test_strips_only_once(self):
        assert _run(ElisionFilter(), "l'l'arbre") == [("l'arbre", 0, 2, 9)]

    def test_empty_remainder_drops_token_without_gap(self):
        assert _run(ElisionFilter(), "l' arbre") == [("arbre", 0, 3, 8)]

    def test_case_sensitive_matching(self):
        assert _run(ElisionFilter(ignore_case=False), "L'arbre") == [("L'arbre", 0, 0, 7)]

    def test_other_languages(self):
        assert _run(ElisionFilter(language="italian"), "dell'anno")[0][0] == "anno"
        assert _run(ElisionFilter(language="catalan"), "d'aigua")[0][0] == "aigua"

    def test_explicit_elisions_override_language(self):
        assert _run(ElisionFilter(["zz"]), "zz'top l'arbre") == [("top", 0, 3, 6), ("l'arbre", 1, 7, 14)]

    def test_unknown_language(self):
        with pytest.raises(ConfigurationError):
            ElisionFilter(language="klingon")

    def test_invalid_markers(self):
        with pytest.raises(ConfigurationError):
            ElisionFilter(markers=["''"])

    def test_builtin_sets(self):
        assert "qu" in elisions_for("French")
        assert elisions_for("irish") == frozenset({"d", "m", "b"})
