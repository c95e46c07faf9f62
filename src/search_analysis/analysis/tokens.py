"""Token model and the pull-based token stream contract.

Tokenizers turn raw text into a :class:`TokenStream`; token filters wrap an
upstream stream and produce another one. Consumers drive a stream with
``advance()`` and read the current token with ``current_token()``. Nothing is
materialized eagerly: each stage asks its upstream for the next token only
when it needs one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, fields
import enum
from typing import Any, Protocol


class TokenType(enum.Enum):
    """Coarse character class of a token."""

    WORD = "word"
    ALPHANUM = "alphanum"
    NUM = "num"
    IDEOGRAPHIC = "ideographic"
    HIRAGANA = "hiragana"
    KATAKANA = "katakana"
    HANGUL = "hangul"
    SOUTHEAST_ASIAN = "southeast_asian"
    OTHER = "other"


@dataclass
class Token:
    """Represents a token flowing through an analysis chain.

    Offsets always point into the original input, in the unit the caller
    supplied, as an inclusive-exclusive range.
    """

    text: str
    position: int = 0
    start_offset: int = 0
    end_offset: int = 0
    position_length: int = 1
    token_type: TokenType = TokenType.WORD

    def copy_with(self, **updates: Any) -> Token:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data.update(updates)
        return Token(**data)


class TokenStream(ABC):
    """Single-pass, lazily produced sequence of tokens.

    Subclasses implement :meth:`_advance`. Once it reports the end of the
    stream (or raises), every later call to :meth:`advance` returns False.
    """

    def __init__(self) -> None:
        self._token = Token(text="")
        self._exhausted = False

    def advance(self) -> bool:
        """Move to the next token; False once the stream is exhausted."""
        if self._exhausted:
            return False
        try:
            produced = self._advance()
        except Exception:
            self._exhausted = True
            raise
        if not produced:
            self._exhausted = True
        return produced

    def current_token(self) -> Token:
        """Token produced by the last successful :meth:`advance`."""
        return self._token

    @abstractmethod
    def _advance(self) -> bool:  # pragma: no cover - interface definition
        ...

    def __iter__(self) -> Iterator[Token]:
        while self.advance():
            yield self._token.copy_with()


class TokenFilterStream(TokenStream):
    """Stream stage that pulls from an upstream stream."""

    def __init__(self, tail: TokenStream) -> None:
        super().__init__()
        self.tail = tail

    def _pull(self) -> Token | None:
        """Advance upstream and return a private copy of its token."""
        if not self.tail.advance():
            return None
        return self.tail.current_token().copy_with()


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def token_stream(self, text: str | bytes) -> TokenStream:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters.

    A filter is an immutable configuration object; ``transform`` wraps an
    upstream stream in a fresh stream stage that owns all per-stream state.
    """

    def transform(self, stream: TokenStream) -> TokenStream:  # pragma: no cover - interface definition
        ...


class PositionCompactor:
    """Renumbers positions so that dropped tokens leave no hole.

    Tokens sharing an upstream position keep sharing one output position.
    """

    def __init__(self) -> None:
        self._last_upstream: int | None = None
        self._last_assigned = -1

    def assign(self, upstream_position: int) -> int:
        if self._last_upstream is None or upstream_position != self._last_upstream:
            self._last_assigned += 1
            self._last_upstream = upstream_position
        return self._last_assigned


def sub_offsets(token: Token, start: int, end: int) -> tuple[int, int]:
    """Return original-input offsets for ``token.text[start:end]``.

    This is exact while the token text still spans its offsets, either in
    characters or in UTF-8 bytes. Text rewritten by an earlier stage no longer
    lines up with the input, so the token's own offsets are returned.
    """
    text = token.text
    span = token.end_offset - token.start_offset
    if span == len(text):
        return token.start_offset + start, token.start_offset + end
    if span == len(text.encode("utf-8", "surrogatepass")):
        head = len(text[:start].encode("utf-8", "surrogatepass"))
        width = len(text[start:end].encode("utf-8", "surrogatepass"))
        return token.start_offset + head, token.start_offset + head + width
    return token.start_offset, token.end_offset
