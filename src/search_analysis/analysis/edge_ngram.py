"""Edge n-gram expansion."""

from __future__ import annotations

from collections import deque
import enum

from search_analysis.analysis.tokens import (
    PositionCompactor,
    Token,
    TokenFilterStream,
    TokenStream,
    sub_offsets,
)
from search_analysis.errors import ConfigurationError


class Side(str, enum.Enum):
    FRONT = "front"
    BACK = "back"


class EdgeNgramTokenStream(TokenFilterStream):
    def __init__(self, tail: TokenStream, config: EdgeNgramFilter) -> None:
        super().__init__(tail)
        self._config = config
        self._pending: deque[Token] = deque()
        self._positions = PositionCompactor()

    def _expand(self, token: Token) -> None:
        config = self._config
        text = token.text
        length = len(text)
        if length < config.min_gram:
            if config.preserve_original:
                self._pending.append(token)
            return
        stop = length if config.max_gram is None else min(config.max_gram, length)
        for size in range(config.min_gram, stop + 1):
            if config.side is Side.FRONT:
                start, end = 0, size
            else:
                start, end = length - size, length
            start_offset, end_offset = sub_offsets(token, start, end)
            self._pending.append(
                token.copy_with(text=text[start:end], start_offset=start_offset, end_offset=end_offset)
            )
        if config.preserve_original and stop < length:
            self._pending.append(token)

    def _advance(self) -> bool:
        while not self._pending:
            token = self._pull()
            if token is None:
                return False
            self._expand(token)
            if self._pending:
                position = self._positions.assign(token.position)
                for gram in self._pending:
                    gram.position = position
        self._token = self._pending.popleft()
        return True


class EdgeNgramFilter:
    """Expands each token into grams anchored at its front or back.

    Grams are emitted in increasing length order and share the input's
    position. Front grams keep the input's start offset and back grams keep
    its end offset; the other offset follows the gram length. Tokens shorter
    than ``min_gram`` are dropped unless ``preserve_original`` is set, in
    which case the untouched token is emitted instead. With
    ``preserve_original`` a token longer than ``max_gram`` is also emitted
    whole after its grams.
    """

    def __init__(
        self,
        min_gram: int = 1,
        max_gram: int | None = None,
        *,
        side: Side | str = Side.FRONT,
        preserve_original: bool = False,
    ) -> None:
        if min_gram < 1:
            raise ConfigurationError(f"min_gram must be >= 1, got {min_gram}")
        if max_gram is not None and max_gram < min_gram:
            raise ConfigurationError(
                f"Maximum '{max_gram}' must be greater or equal to minimum '{min_gram}' or should be None"
            )
        try:
            self.side = Side(side)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown edge n-gram side {side!r}") from exc
        self.min_gram = min_gram
        self.max_gram = max_gram
        self.preserve_original = preserve_original

    def transform(self, stream: TokenStream) -> TokenStream:
        return EdgeNgramTokenStream(stream, self)
