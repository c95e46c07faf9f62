"""ICU word break iterator as a boundary engine."""

from __future__ import annotations

import logging

import icu

from search_analysis.analysis.boundaries import BoundaryCursor
from search_analysis.analysis.offsets import CodeUnit
from search_analysis.errors import ConfigurationError


logger = logging.getLogger(__name__)


class _IcuCursor:
    def __init__(self, iterator: icu.BreakIterator, text: str) -> None:
        iterator.setText(text)
        self._iterator = iterator

    def first(self) -> int:
        return self._iterator.first()

    def next(self) -> int:
        return self._iterator.nextBoundary()

    def rule_status(self) -> int:
        return self._iterator.getRuleStatus()


class IcuWordBreaker:
    """Word boundaries from ICU, reported in UTF-16 code units.

    ``rules`` replaces the root locale's word rules with custom RBBI rule
    text. Rules are compiled once here so invalid text fails at construction;
    each cursor gets its own iterator because ICU iterators carry position
    state.
    """

    code_unit = CodeUnit.UTF16

    def __init__(self, rules: str | None = None, locale: str | None = None) -> None:
        self.rules = rules
        self.locale = icu.Locale(locale) if locale else icu.Locale.getRoot()
        try:
            self._prototype = self._create()
        except icu.ICUError as exc:
            logger.warning("Rejected ICU break rules: %s", exc)
            raise ConfigurationError(f"Invalid ICU break rules: {exc}") from exc
        logger.debug("ICU word breaker ready (custom rules: %s)", rules is not None)

    def _create(self) -> icu.BreakIterator:
        if self.rules is not None:
            return icu.RuleBasedBreakIterator(self.rules)
        return icu.BreakIterator.createWordInstance(self.locale)

    def cursor(self, text: str) -> BoundaryCursor:
        return _IcuCursor(self._create(), text)
