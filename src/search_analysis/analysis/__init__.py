"""
Text analysis components.

This package provides tokenizers and token filters that speak a pull-based
token stream contract:
- tokens: Token model, TokenStream contract, position compaction
- offsets / boundaries / segmenting: Unicode word segmentation with offset remapping
- path: hierarchical path tokenizer
- simple: whitespace/raw tokenizers and single-predicate filters
- transform: reversible transliteration and Unicode normalization
- edge_ngram, elision, phonetic, reverse: token rewriting filters
- pipeline / schema: analyzer composition, registry and declarative config
"""

from search_analysis.analysis.edge_ngram import EdgeNgramFilter, Side
from search_analysis.analysis.elision import ElisionFilter
from search_analysis.analysis.path import PathTokenizer
from search_analysis.analysis.phonetic import PhoneticFilter, get_encoder
from search_analysis.analysis.pipeline import TextAnalyzer, get_analyzer, register_analyzer
from search_analysis.analysis.reverse import ReverseFilter
from search_analysis.analysis.schema import AnalyzerConfig, build_analyzer
from search_analysis.analysis.segmenting import SegmentingTokenizer
from search_analysis.analysis.simple import (
    LengthFilter,
    LimitTokenCountFilter,
    LowercaseFilter,
    RawTokenizer,
    StopFilter,
    TrimFilter,
    WhitespaceTokenizer,
)
from search_analysis.analysis.tokens import Token, TokenStream, TokenType
from search_analysis.analysis.transform import Direction, NormalizerFilter, TransformFilter


__all__ = [
    "AnalyzerConfig",
    "Direction",
    "EdgeNgramFilter",
    "ElisionFilter",
    "LengthFilter",
    "LimitTokenCountFilter",
    "LowercaseFilter",
    "NormalizerFilter",
    "PathTokenizer",
    "PhoneticFilter",
    "RawTokenizer",
    "ReverseFilter",
    "SegmentingTokenizer",
    "Side",
    "StopFilter",
    "TextAnalyzer",
    "Token",
    "TokenStream",
    "TokenType",
    "TransformFilter",
    "TrimFilter",
    "WhitespaceTokenizer",
    "build_analyzer",
    "get_analyzer",
    "get_encoder",
    "register_analyzer",
]
