"""Elision stripping for languages that contract articles onto words."""

from __future__ import annotations

from collections.abc import Iterable
import logging

from search_analysis.analysis.tokens import (
    PositionCompactor,
    TokenFilterStream,
    TokenStream,
    sub_offsets,
)
from search_analysis.errors import ConfigurationError


logger = logging.getLogger(__name__)

DEFAULT_MARKERS = ("'", "’")

FRENCH_ELISIONS = frozenset(
    ["l", "m", "t", "qu", "n", "s", "j", "d", "c", "jusqu", "quoiqu", "lorsqu", "puisqu"]
)
CATALAN_ELISIONS = frozenset(["d", "l", "m", "n", "s", "t"])
ITALIAN_ELISIONS = frozenset(
    [
        "c",
        "l",
        "all",
        "dall",
        "dell",
        "nell",
        "sull",
        "coll",
        "pell",
        "gl",
        "agl",
        "dagl",
        "degl",
        "negl",
        "sugl",
        "un",
        "m",
        "t",
        "s",
        "v",
        "d",
    ]
)
IRISH_ELISIONS = frozenset(["d", "m", "b"])

ELISION_LANGUAGES: dict[str, frozenset[str]] = {
    "french": FRENCH_ELISIONS,
    "catalan": CATALAN_ELISIONS,
    "italian": ITALIAN_ELISIONS,
    "irish": IRISH_ELISIONS,
}


def elisions_for(language: str) -> frozenset[str]:
    """Return the built-in elision set for ``language``."""
    try:
        return ELISION_LANGUAGES[language.lower()]
    except KeyError:
        available = ", ".join(sorted(ELISION_LANGUAGES))
        raise ConfigurationError(f"Unknown elision language '{language}'. Available: {available}") from None


class ElisionTokenStream(TokenFilterStream):
    def __init__(self, tail: TokenStream, config: ElisionFilter) -> None:
        super().__init__(tail)
        self._config = config
        self._positions = PositionCompactor()

    def _advance(self) -> bool:
        config = self._config
        while (token := self._pull()) is not None:
            text = token.text
            marker_index = next((i for i, char in enumerate(text) if char in config.markers), -1)
            if marker_index >= 0:
                prefix = text[:marker_index]
                if config.ignore_case:
                    prefix = prefix.lower()
                if prefix in config.elisions:
                    head = marker_index + 1
                    remainder = text[head:]
                    if not remainder:
                        continue
                    token.start_offset, token.end_offset = sub_offsets(token, head, len(text))
                    token.text = remainder
            token.position = self._positions.assign(token.position)
            self._token = token
            return True
        return False


class ElisionFilter:
    """Removes one leading elided article such as ``l'`` or ``qu'``.

    The token is scanned for its first marker character. When the text
    before it is a known elision, the prefix and marker are dropped and the
    offsets shrink to the retained part. Tokens that become empty are removed
    from the stream.

    Args:
        elisions: Elided fragments without their marker, e.g. ``["l", "qu"]``.
            Defaults to the set of ``language``.
        language: Name of a built-in elision set (french, italian, catalan, irish).
        markers: Characters that end an elided fragment.
        ignore_case: Compare fragments case-insensitively.
    """

    def __init__(
        self,
        elisions: Iterable[str] | None = None,
        *,
        language: str = "french",
        markers: Iterable[str] = DEFAULT_MARKERS,
        ignore_case: bool = True,
    ) -> None:
        entries = elisions_for(language) if elisions is None else frozenset(elisions)
        self.ignore_case = ignore_case
        self.elisions = frozenset(entry.lower() for entry in entries) if ignore_case else entries
        self.markers = frozenset(markers)
        if not self.markers or any(len(marker) != 1 for marker in self.markers):
            logger.warning("Rejected elision markers %r", sorted(self.markers))
            raise ConfigurationError("Elision markers must be non-empty single characters")

    def transform(self, stream: TokenStream) -> TokenStream:
        return ElisionTokenStream(stream, self)
