"""Rule-based text transforms and the filters that apply them.

A transform is identified the way ICU transliterators are: a single id such
as ``NFD`` or ``Any-Lower``, a filtered removal such as
``[:Nonspacing Mark:] Remove``, or a compound id joining several steps with
``;``. Every built-in step knows its inverse, so a compound transform can be
run in reverse by applying the inverse steps in reverse order.

ICU-backed transforms with custom rule text live in :mod:`search_analysis.icu`
and plug into :class:`TransformFilter` through the same :class:`Transform`
protocol.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import enum
import functools
import logging
from typing import Protocol
import unicodedata

import regex

from search_analysis.analysis.simple import TextMapTokenStream
from search_analysis.analysis.tokens import TokenStream
from search_analysis.errors import ConfigurationError


logger = logging.getLogger(__name__)


class Direction(str, enum.Enum):
    FORWARD = "forward"
    REVERSE = "reverse"


class Transform(Protocol):
    """Compiled, immutable text rewrite."""

    id: str

    def apply(self, text: str) -> str:  # pragma: no cover - interface definition
        ...

    def inverse(self) -> Transform:  # pragma: no cover - interface definition
        ...


@dataclass(frozen=True)
class _FunctionTransform:
    id: str
    func: Callable[[str], str]
    inverse_id: str

    def apply(self, text: str) -> str:
        return self.func(text)

    def inverse(self) -> Transform:
        return _BUILTINS[self.inverse_id.lower()]


@dataclass(frozen=True)
class _RemoveTransform:
    """Deletes every character of a Unicode set; its inverse is ``Null``."""

    id: str
    pattern: regex.Pattern

    def apply(self, text: str) -> str:
        return self.pattern.sub("", text)

    def inverse(self) -> Transform:
        return _BUILTINS["null"]


@dataclass(frozen=True)
class CompoundTransform:
    id: str
    steps: tuple[Transform, ...]

    def apply(self, text: str) -> str:
        for step in self.steps:
            text = step.apply(text)
        return text

    def inverse(self) -> Transform:
        steps = tuple(step.inverse() for step in reversed(self.steps))
        return CompoundTransform(id=";".join(step.id for step in steps), steps=steps)


def _normalizer(form: str) -> Callable[[str], str]:
    return functools.partial(unicodedata.normalize, form)


_BUILTINS: dict[str, Transform] = {
    transform.id.lower(): transform
    for transform in (
        _FunctionTransform("NFC", _normalizer("NFC"), "NFD"),
        _FunctionTransform("NFD", _normalizer("NFD"), "NFC"),
        _FunctionTransform("NFKC", _normalizer("NFKC"), "NFKD"),
        _FunctionTransform("NFKD", _normalizer("NFKD"), "NFKC"),
        _FunctionTransform("Lower", str.lower, "Upper"),
        _FunctionTransform("Upper", str.upper, "Lower"),
        _FunctionTransform("Null", str, "Null"),
    )
}

_REMOVE_STEP = regex.compile(r"^\[:\s*(?P<property>[^:\]]+?)\s*:\]\s*Remove$", regex.IGNORECASE)


def _compile_step(step_id: str) -> Transform:
    removal = _REMOVE_STEP.match(step_id)
    if removal:
        try:
            pattern = regex.compile(r"\p{%s}" % removal.group("property"), regex.VERSION1)
        except regex.error as exc:
            raise ConfigurationError(f"Unknown Unicode set in transform step '{step_id}': {exc}") from exc
        return _RemoveTransform(id=step_id, pattern=pattern)

    key = step_id.lower()
    if key.startswith("any-"):
        key = key[len("any-") :]
    try:
        return _BUILTINS[key]
    except KeyError:
        available = ", ".join(sorted(transform.id for transform in _BUILTINS.values()))
        raise ConfigurationError(f"Unknown transform id '{step_id}'. Available: {available}") from None


def compile_transform(transform_id: str, direction: Direction | str = Direction.FORWARD) -> Transform:
    """Compile a built-in (possibly compound) transform id.

    Raises:
        ConfigurationError: if any step is unknown or the id is empty.
    """
    steps = tuple(_compile_step(part.strip()) for part in transform_id.split(";") if part.strip())
    if not steps:
        raise ConfigurationError("Transform id must name at least one step")
    transform: Transform = steps[0] if len(steps) == 1 else CompoundTransform(id=transform_id, steps=steps)
    if Direction(direction) is Direction.REVERSE:
        transform = transform.inverse()
    logger.debug("Compiled transform %s (%s)", transform.id, Direction(direction).value)
    return transform


class TransformFilter:
    """Rewrites token text through a transform; offsets and positions are unchanged.

    ``transform`` is either a built-in id understood by
    :func:`compile_transform` or an already compiled :class:`Transform`
    (for example an ICU transliterator). In the reverse direction the
    inverse rule composition is applied.
    """

    def __init__(self, transform: Transform | str, direction: Direction | str = Direction.FORWARD) -> None:
        try:
            self.direction = Direction(direction)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown transform direction {direction!r}") from exc
        if isinstance(transform, str):
            self.transform_rules = compile_transform(transform, self.direction)
        elif self.direction is Direction.REVERSE:
            self.transform_rules = transform.inverse()
        else:
            self.transform_rules = transform

    def transform(self, stream: TokenStream) -> TokenStream:
        return TextMapTokenStream(stream, self.transform_rules.apply)


class NormalizationMode(str, enum.Enum):
    NFC = "nfc"
    NFD = "nfd"
    NFKC = "nfkc"
    NFKD = "nfkd"
    NFKC_CASEFOLD = "nfkc_cf"


def _nfkc_casefold(text: str) -> str:
    return unicodedata.normalize("NFKC", unicodedata.normalize("NFKC", text).casefold())


_NORMALIZERS: dict[NormalizationMode, Callable[[str], str]] = {
    NormalizationMode.NFC: _normalizer("NFC"),
    NormalizationMode.NFD: _normalizer("NFD"),
    NormalizationMode.NFKC: _normalizer("NFKC"),
    NormalizationMode.NFKD: _normalizer("NFKD"),
    NormalizationMode.NFKC_CASEFOLD: _nfkc_casefold,
}


class NormalizerFilter:
    """Applies a Unicode normalization form to each token."""

    def __init__(self, mode: NormalizationMode | str = NormalizationMode.NFKC_CASEFOLD) -> None:
        try:
            self.mode = NormalizationMode(mode.lower() if isinstance(mode, str) else mode)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown normalization mode {mode!r}") from exc

    def transform(self, stream: TokenStream) -> TokenStream:
        return TextMapTokenStream(stream, _NORMALIZERS[self.mode])
