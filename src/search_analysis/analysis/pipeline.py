"""Analyzer composition and the named analyzer registry."""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging

from search_analysis.analysis.edge_ngram import EdgeNgramFilter
from search_analysis.analysis.elision import ElisionFilter
from search_analysis.analysis.path import PathTokenizer
from search_analysis.analysis.phonetic import PhoneticFilter
from search_analysis.analysis.reverse import ReverseFilter
from search_analysis.analysis.segmenting import SegmentingTokenizer
from search_analysis.analysis.simple import LowercaseFilter, RawTokenizer, WhitespaceTokenizer
from search_analysis.analysis.tokens import Token, TokenFilter, Tokenizer, TokenStream
from search_analysis.config import get_settings
from search_analysis.errors import ConfigurationError


logger = logging.getLogger(__name__)


class TextAnalyzer:
    """Composable analyzer (tokenizer + filters).

    The analyzer itself is immutable and may be shared between threads. Each
    call to :meth:`token_stream` builds a fresh chain of stream stages, so
    nothing is carried over from one input to the next.
    """

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = tuple(filters or ())

    def token_stream(self, text: str | bytes) -> TokenStream:
        stream = self.tokenizer.token_stream(text)
        for token_filter in self.filters:
            stream = token_filter.transform(stream)
        return stream

    def analyze(self, text: str | bytes) -> list[Token]:
        return list(self.token_stream(text))

    def __call__(self, text: str | bytes) -> list[Token]:
        return self.analyze(text)


_ANALYZER_FACTORIES: dict[str, Callable[[], TextAnalyzer]] = {
    "standard": lambda: TextAnalyzer(SegmentingTokenizer(), [LowercaseFilter()]),
    "whitespace": lambda: TextAnalyzer(WhitespaceTokenizer()),
    "keyword": lambda: TextAnalyzer(RawTokenizer()),
    "path": lambda: TextAnalyzer(PathTokenizer()),
    "reverse-path": lambda: TextAnalyzer(PathTokenizer(reverse=True)),
    "domain": lambda: TextAnalyzer(PathTokenizer(delimiter=".", reverse=True), [LowercaseFilter()]),
    "autocomplete": lambda: TextAnalyzer(
        SegmentingTokenizer(),
        [LowercaseFilter(), EdgeNgramFilter(1, get_settings().edge_ngram_max_gram)],
    ),
    "french": lambda: TextAnalyzer(
        SegmentingTokenizer(),
        [ElisionFilter(language=get_settings().elision_language), LowercaseFilter()],
    ),
    "phonetic": lambda: TextAnalyzer(
        SegmentingTokenizer(),
        [PhoneticFilter("double_metaphone", inject=True, max_codes=get_settings().phonetic_max_codes)],
    ),
    "suffix": lambda: TextAnalyzer(SegmentingTokenizer(), [LowercaseFilter(), ReverseFilter()]),
}


def available_analyzers() -> list[str]:
    return sorted(_ANALYZER_FACTORIES)


def register_analyzer(name: str, factory: Callable[[], TextAnalyzer], *, replace: bool = False) -> None:
    """Register ``factory`` under ``name`` for :func:`get_analyzer`."""
    normalized = name.lower()
    if normalized in _ANALYZER_FACTORIES and not replace:
        raise ConfigurationError(f"Analyzer '{name}' is already registered")
    _ANALYZER_FACTORIES[normalized] = factory
    logger.debug("Registered analyzer %s", normalized)


def get_analyzer(name: str | None = None) -> TextAnalyzer:
    """Return analyzer by name, defaulting to the configured default analyzer."""

    if name is None:
        name = get_settings().default_analyzer
    normalized = name.lower()
    if normalized not in _ANALYZER_FACTORIES:
        msg = f"Unknown analyzer '{name}'. Available: {available_analyzers()}"
        logger.warning(msg)
        raise ConfigurationError(msg)
    return _ANALYZER_FACTORIES[normalized]()
