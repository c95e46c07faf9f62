"""Declarative analyzer configuration.

Each component has a frozen pydantic model discriminated by its ``type``
field; :func:`build_analyzer` validates a mapping (for example parsed from
JSON or YAML) and assembles a :class:`TextAnalyzer` from it::

    build_analyzer({
        "tokenizer": {"type": "segmenting"},
        "filters": [{"type": "elision", "language": "french"}, {"type": "lowercase"}],
    })
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, ValidationError, model_validator

from search_analysis.analysis.edge_ngram import EdgeNgramFilter, Side
from search_analysis.analysis.elision import DEFAULT_MARKERS, ElisionFilter
from search_analysis.analysis.path import DEFAULT_SEPARATOR, PathTokenizer
from search_analysis.analysis.phonetic import PhoneticFilter
from search_analysis.analysis.pipeline import TextAnalyzer
from search_analysis.analysis.reverse import ReverseFilter
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
from search_analysis.analysis.tokens import TokenFilter, Tokenizer, TokenType
from search_analysis.analysis.transform import Direction, NormalizationMode, NormalizerFilter, TransformFilter
from search_analysis.errors import ConfigurationError


logger = logging.getLogger(__name__)

_FROZEN = {"extra": "forbid", "frozen": True}


def _icu_module():
    try:
        import search_analysis.icu as icu_components
    except ImportError as exc:
        raise ConfigurationError("ICU components need PyICU; install search-analysis[icu]") from exc
    return icu_components


class SegmentingTokenizerConfig(BaseModel):
    """Unicode word segmentation."""

    model_config = _FROZEN

    type: Literal["segmenting"] = "segmenting"
    engine: Annotated[
        Literal["regex", "icu"],
        Field(description="Boundary engine: the regex module or ICU's break iterator"),
    ] = "regex"
    rules: Annotated[
        str | None,
        Field(description="Custom ICU break rules (icu engine only)"),
    ] = None

    @model_validator(mode="after")
    def validate_rules_engine(self) -> SegmentingTokenizerConfig:
        if self.rules is not None and self.engine != "icu":
            raise ValueError("segmenting.rules requires engine 'icu'")
        return self

    def build(self) -> Tokenizer:
        if self.engine == "icu":
            return SegmentingTokenizer(_icu_module().IcuWordBreaker(rules=self.rules))
        return SegmentingTokenizer()


class WhitespaceTokenizerConfig(BaseModel):
    model_config = _FROZEN

    type: Literal["whitespace"] = "whitespace"

    def build(self) -> Tokenizer:
        return WhitespaceTokenizer()


class RawTokenizerConfig(BaseModel):
    model_config = _FROZEN

    type: Literal["raw"] = "raw"

    def build(self) -> Tokenizer:
        return RawTokenizer()


class PathTokenizerConfig(BaseModel):
    """Hierarchical path prefixes (or suffixes in reverse mode)."""

    model_config = _FROZEN

    type: Literal["path"] = "path"
    delimiter: Annotated[str, Field(min_length=1, max_length=1)] = DEFAULT_SEPARATOR
    replacement: Annotated[str | None, Field(min_length=1, max_length=1)] = None
    reverse: bool = False
    skip: Annotated[int, Field(ge=0)] = 0
    max_depth: Annotated[int | None, Field(ge=1, description="Truncate after this many tokens")] = None
    emit_root: bool = False

    def build(self) -> Tokenizer:
        return PathTokenizer(
            delimiter=self.delimiter,
            replacement=self.replacement,
            reverse=self.reverse,
            skip=self.skip,
            max_depth=self.max_depth,
            emit_root=self.emit_root,
        )


class LowercaseFilterConfig(BaseModel):
    model_config = _FROZEN

    type: Literal["lowercase"] = "lowercase"

    def build(self) -> TokenFilter:
        return LowercaseFilter()


class StopFilterConfig(BaseModel):
    model_config = _FROZEN

    type: Literal["stop"] = "stop"
    stopwords: tuple[str, ...] | None = None
    ignore_case: bool = True

    def build(self) -> TokenFilter:
        return StopFilter(self.stopwords, ignore_case=self.ignore_case)


class LengthFilterConfig(BaseModel):
    model_config = _FROZEN

    type: Literal["length"] = "length"
    min_length: Annotated[int, Field(ge=0)] = 0
    max_length: Annotated[int | None, Field(ge=0)] = None

    def build(self) -> TokenFilter:
        return LengthFilter(self.min_length, self.max_length)


class LimitFilterConfig(BaseModel):
    model_config = _FROZEN

    type: Literal["limit"] = "limit"
    max_tokens: Annotated[int, Field(ge=0)]

    def build(self) -> TokenFilter:
        return LimitTokenCountFilter(self.max_tokens)


class TrimFilterConfig(BaseModel):
    model_config = _FROZEN

    type: Literal["trim"] = "trim"

    def build(self) -> TokenFilter:
        return TrimFilter()


class EdgeNgramFilterConfig(BaseModel):
    model_config = _FROZEN

    type: Literal["edge_ngram"] = "edge_ngram"
    min_gram: Annotated[int, Field(ge=1)] = 1
    max_gram: Annotated[int | None, Field(ge=1, description="None keeps growing up to the token length")] = None
    side: Side = Side.FRONT
    preserve_original: bool = False

    def build(self) -> TokenFilter:
        return EdgeNgramFilter(
            self.min_gram, self.max_gram, side=self.side, preserve_original=self.preserve_original
        )


class ElisionFilterConfig(BaseModel):
    model_config = _FROZEN

    type: Literal["elision"] = "elision"
    language: str = "french"
    elisions: Annotated[
        tuple[str, ...] | None,
        Field(description="Explicit elided fragments without their marker; overrides language"),
    ] = None
    markers: tuple[str, ...] = DEFAULT_MARKERS
    ignore_case: bool = True

    def build(self) -> TokenFilter:
        return ElisionFilter(
            self.elisions, language=self.language, markers=self.markers, ignore_case=self.ignore_case
        )


class ReverseFilterConfig(BaseModel):
    model_config = _FROZEN

    type: Literal["reverse"] = "reverse"

    def build(self) -> TokenFilter:
        return ReverseFilter()


class TransformFilterConfig(BaseModel):
    """Transliteration by transform id or, with the icu engine, custom rules."""

    model_config = _FROZEN

    type: Literal["transform"] = "transform"
    id: str | None = None
    rules: str | None = None
    direction: Direction = Direction.FORWARD
    engine: Literal["builtin", "icu"] = "builtin"

    @model_validator(mode="after")
    def validate_source(self) -> TransformFilterConfig:
        if (self.id is None) == (self.rules is None):
            raise ValueError("transform needs exactly one of 'id' or 'rules'")
        if self.rules is not None and self.engine != "icu":
            raise ValueError("transform.rules requires engine 'icu'")
        return self

    def build(self) -> TokenFilter:
        if self.engine == "icu":
            transform = _icu_module().IcuTransform(self.id, rules=self.rules)
            return TransformFilter(transform, self.direction)
        return TransformFilter(self.id, self.direction)


class NormalizerFilterConfig(BaseModel):
    model_config = _FROZEN

    type: Literal["normalizer"] = "normalizer"
    mode: NormalizationMode = NormalizationMode.NFKC_CASEFOLD

    def build(self) -> TokenFilter:
        return NormalizerFilter(self.mode)


class PhoneticFilterConfig(BaseModel):
    model_config = _FROZEN

    type: Literal["phonetic"] = "phonetic"
    algorithm: str = "double_metaphone"
    inject: bool = False
    max_codes: Annotated[int | None, Field(ge=1)] = None
    max_code_length: Annotated[int | None, Field(ge=1)] = None
    language: str | None = None
    skip_types: tuple[TokenType, ...] = ()

    def build(self) -> TokenFilter:
        return PhoneticFilter(
            self.algorithm,
            inject=self.inject,
            max_codes=self.max_codes,
            language=self.language,
            skip_types=self.skip_types,
            max_code_length=self.max_code_length,
        )


TokenizerConfig = Annotated[
    Union[SegmentingTokenizerConfig, WhitespaceTokenizerConfig, RawTokenizerConfig, PathTokenizerConfig],
    Field(discriminator="type"),
]

FilterConfig = Annotated[
    Union[
        LowercaseFilterConfig,
        StopFilterConfig,
        LengthFilterConfig,
        LimitFilterConfig,
        TrimFilterConfig,
        EdgeNgramFilterConfig,
        ElisionFilterConfig,
        ReverseFilterConfig,
        TransformFilterConfig,
        NormalizerFilterConfig,
        PhoneticFilterConfig,
    ],
    Field(discriminator="type"),
]


class AnalyzerConfig(BaseModel):
    """A tokenizer followed by an ordered chain of filters."""

    model_config = _FROZEN

    tokenizer: TokenizerConfig = Field(default_factory=SegmentingTokenizerConfig)
    filters: tuple[FilterConfig, ...] = ()


def build_analyzer(config: AnalyzerConfig | Mapping[str, Any]) -> TextAnalyzer:
    """Validate ``config`` and build the analyzer it describes.

    Raises:
        ConfigurationError: if validation fails or a component rejects its options.
    """
    if not isinstance(config, AnalyzerConfig):
        try:
            config = AnalyzerConfig.model_validate(config)
        except ValidationError as exc:
            logger.warning("Invalid analyzer configuration: %s", exc.errors(include_url=False))
            raise ConfigurationError(f"Invalid analyzer configuration: {exc}") from exc
    tokenizer = config.tokenizer.build()
    filters = [filter_config.build() for filter_config in config.filters]
    logger.debug("Built analyzer %s with %d filter(s)", type(tokenizer).__name__, len(filters))
    return TextAnalyzer(tokenizer, filters)
