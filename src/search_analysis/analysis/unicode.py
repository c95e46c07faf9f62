"""Grapheme and script helpers shared by tokenizers and filters."""

from __future__ import annotations

from collections.abc import Sequence

import regex

from search_analysis.analysis.tokens import TokenType


_REGEX_FLAGS = regex.VERSION1 | regex.UNICODE

# Extended grapheme clusters: base characters keep their combining marks,
# emoji sequences and surrogate-free multi-code-point characters stay whole.
_GRAPHEME_PATTERN = regex.compile(r"\X", _REGEX_FLAGS)

_HAN = regex.compile(r"\p{Script=Han}", _REGEX_FLAGS)
_HIRAGANA = regex.compile(r"\p{Script=Hiragana}", _REGEX_FLAGS)
_KATAKANA = regex.compile(r"\p{Script=Katakana}", _REGEX_FLAGS)
_HANGUL = regex.compile(r"\p{Script=Hangul}", _REGEX_FLAGS)
_SOUTHEAST_ASIAN = regex.compile(
    r"[\p{Script=Thai}\p{Script=Lao}\p{Script=Myanmar}\p{Script=Khmer}]", _REGEX_FLAGS
)
_DIGITS_ONLY = regex.compile(r"[\p{Nd}.,]*\p{Nd}[\p{Nd}.,]*", _REGEX_FLAGS)
_LET_OR_DIGIT = regex.compile(r"[\p{L}\p{Nd}]", _REGEX_FLAGS)


def graphemes(text: str) -> list[str]:
    """Split text into user-perceived characters."""
    return _GRAPHEME_PATTERN.findall(text)


def join_reversed(clusters: Sequence[str]) -> str:
    """Concatenate grapheme clusters in reverse order."""
    return "".join(reversed(clusters))


def reverse_graphemes(text: str) -> str:
    """Reverse text grapheme by grapheme.

    Combining marks and multi-code-point characters stay attached to their
    base, so ``reverse_graphemes(reverse_graphemes(s)) == s``.
    """
    return join_reversed(graphemes(text))


def is_southeast_asian(char: str) -> bool:
    """True for characters of scripts written without spaces between words (Thai, Lao, Myanmar, Khmer)."""
    return _SOUTHEAST_ASIAN.match(char) is not None


def has_letter_or_digit(text: str) -> bool:
    return _LET_OR_DIGIT.search(text) is not None


def classify(text: str) -> TokenType:
    """Return the dominant character class of a segmented span."""
    if _HAN.search(text):
        return TokenType.IDEOGRAPHIC
    if _HIRAGANA.search(text):
        return TokenType.HIRAGANA
    if _KATAKANA.search(text):
        return TokenType.KATAKANA
    if _HANGUL.search(text):
        return TokenType.HANGUL
    if _SOUTHEAST_ASIAN.search(text):
        return TokenType.SOUTHEAST_ASIAN
    if _DIGITS_ONLY.fullmatch(text):
        return TokenType.NUM
    if _LET_OR_DIGIT.search(text):
        return TokenType.ALPHANUM
    return TokenType.OTHER
