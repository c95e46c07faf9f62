"""Simple tokenizers and single-predicate filters.

These components need no lookahead: each upstream token is either passed on
(possibly with its text rewritten) or dropped.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
import re

from search_analysis.analysis.offsets import CodeUnit, OffsetMap, decode_input
from search_analysis.analysis.tokens import (
    PositionCompactor,
    Token,
    TokenFilterStream,
    TokenStream,
    sub_offsets,
)
from search_analysis.errors import ConfigurationError


class _MatchTokenStream(TokenStream):
    def __init__(self, matches: Iterator[re.Match[str]], offsets: OffsetMap) -> None:
        super().__init__()
        self._matches = matches
        self._offsets = offsets
        self._position = -1

    def _advance(self) -> bool:
        match = next(self._matches, None)
        if match is None:
            return False
        self._position += 1
        self._token = Token(
            text=match.group(0),
            position=self._position,
            start_offset=self._offsets.char_to_source(match.start()),
            end_offset=self._offsets.char_to_source(match.end()),
        )
        return True


class RegexTokenizer:
    """Regex-based tokenizer that yields one token per match."""

    def __init__(self, pattern: str = r"[\w']+", flags: int = re.UNICODE | re.MULTILINE) -> None:
        try:
            self.pattern = re.compile(pattern, flags)
        except re.error as exc:
            raise ConfigurationError(f"Invalid tokenizer pattern {pattern!r}: {exc}") from exc

    def token_stream(self, text: str | bytes) -> TokenStream:
        decoded, source_unit = decode_input(text)
        offsets = OffsetMap(decoded, CodeUnit.CODE_POINT, source_unit)
        return _MatchTokenStream(self.pattern.finditer(decoded), offsets)


class WhitespaceTokenizer(RegexTokenizer):
    """Splits on runs of whitespace."""

    def __init__(self) -> None:
        super().__init__(r"\S+")


class RawTokenizer(RegexTokenizer):
    """Emits the whole input as a single token (nothing for empty input)."""

    def __init__(self) -> None:
        super().__init__(r"\A.+\Z", re.DOTALL)


class TextMapTokenStream(TokenFilterStream):
    def __init__(self, tail: TokenStream, func: Callable[[str], str]) -> None:
        super().__init__(tail)
        self._func = func

    def _advance(self) -> bool:
        token = self._pull()
        if token is None:
            return False
        token.text = self._func(token.text)
        self._token = token
        return True


class _PredicateStream(TokenFilterStream):
    def __init__(self, tail: TokenStream, keep: Callable[[Token], bool]) -> None:
        super().__init__(tail)
        self._keep = keep
        self._positions = PositionCompactor()

    def _advance(self) -> bool:
        while (token := self._pull()) is not None:
            if self._keep(token):
                token.position = self._positions.assign(token.position)
                self._token = token
                return True
        return False


class LowercaseFilter:
    """Filter that lowercases token text."""

    def transform(self, stream: TokenStream) -> TokenStream:
        return TextMapTokenStream(stream, str.lower)


DEFAULT_STOPWORDS = [
    "a",
    "an",
    "and",
    "are",
    "as",
    "at",
    "be",
    "but",
    "by",
    "for",
    "if",
    "in",
    "into",
    "is",
    "it",
    "no",
    "not",
    "of",
    "on",
    "or",
    "such",
    "that",
    "the",
    "their",
    "then",
    "there",
    "these",
    "they",
    "this",
    "to",
    "was",
    "will",
    "with",
]


class StopFilter:
    """Removes stopwords from the stream."""

    def __init__(self, stopwords: Sequence[str] | None = None, *, ignore_case: bool = True) -> None:
        vocab = stopwords if stopwords is not None else DEFAULT_STOPWORDS
        self.ignore_case = ignore_case
        self.stopwords = frozenset(word.lower() if ignore_case else word for word in vocab)

    def _keep(self, token: Token) -> bool:
        text = token.text.lower() if self.ignore_case else token.text
        return text not in self.stopwords

    def transform(self, stream: TokenStream) -> TokenStream:
        return _PredicateStream(stream, self._keep)


class LengthFilter:
    """Keeps tokens whose character length lies in ``[min_length, max_length]``."""

    def __init__(self, min_length: int = 0, max_length: int | None = None) -> None:
        if min_length < 0 or (max_length is not None and max_length < min_length):
            raise ConfigurationError(f"Invalid length bounds: min={min_length}, max={max_length}")
        self.min_length = min_length
        self.max_length = max_length

    def _keep(self, token: Token) -> bool:
        length = len(token.text)
        if length < self.min_length:
            return False
        return self.max_length is None or length <= self.max_length

    def transform(self, stream: TokenStream) -> TokenStream:
        return _PredicateStream(stream, self._keep)


class _LimitStream(TokenFilterStream):
    def __init__(self, tail: TokenStream, max_tokens: int) -> None:
        super().__init__(tail)
        self._remaining = max_tokens

    def _advance(self) -> bool:
        if self._remaining <= 0:
            return False
        token = self._pull()
        if token is None:
            return False
        self._remaining -= 1
        self._token = token
        return True


class LimitTokenCountFilter:
    """Stops the stream after ``max_tokens`` tokens."""

    def __init__(self, max_tokens: int) -> None:
        if max_tokens < 0:
            raise ConfigurationError(f"max_tokens must be >= 0, got {max_tokens}")
        self.max_tokens = max_tokens

    def transform(self, stream: TokenStream) -> TokenStream:
        return _LimitStream(stream, self.max_tokens)


class _TrimStream(TokenFilterStream):
    def __init__(self, tail: TokenStream) -> None:
        super().__init__(tail)
        self._positions = PositionCompactor()

    def _advance(self) -> bool:
        while (token := self._pull()) is not None:
            text = token.text
            stripped = text.lstrip()
            head = len(text) - len(stripped)
            stripped = stripped.rstrip()
            if not stripped:
                continue
            token.start_offset, token.end_offset = sub_offsets(token, head, head + len(stripped))
            token.text = stripped
            token.position = self._positions.assign(token.position)
            self._token = token
            return True
        return False


class TrimFilter:
    """Strips leading and trailing whitespace; whitespace-only tokens are dropped."""

    def transform(self, stream: TokenStream) -> TokenStream:
        return _TrimStream(stream)
