"""ICU transliterators exposed through the transform protocol."""

from __future__ import annotations

import logging

import icu

from search_analysis.analysis.transform import Direction
from search_analysis.errors import ConfigurationError


logger = logging.getLogger(__name__)

_DIRECTIONS = {
    Direction.FORWARD: icu.UTransDirection.FORWARD,
    Direction.REVERSE: icu.UTransDirection.REVERSE,
}


class IcuTransform:
    """Compiled ICU transliterator.

    Built either from a compound transform id (``"Any-Latin; Latin-ASCII;
    Lower"``) or from custom rule text. ``inverse()`` compiles the same
    source in the opposite direction, which ICU resolves to the inverse
    rule composition.
    """

    def __init__(
        self,
        transform_id: str | None = None,
        *,
        rules: str | None = None,
        direction: Direction | str = Direction.FORWARD,
    ) -> None:
        if (transform_id is None) == (rules is None):
            raise ConfigurationError("IcuTransform needs exactly one of transform_id or rules")
        self.transform_id = transform_id
        self.rules = rules
        self.direction = Direction(direction)
        try:
            if rules is not None:
                self._transliterator = icu.Transliterator.createFromRules(
                    "search-analysis-rules", rules, _DIRECTIONS[self.direction]
                )
            else:
                self._transliterator = icu.Transliterator.createInstance(
                    transform_id, _DIRECTIONS[self.direction]
                )
        except icu.ICUError as exc:
            logger.warning("Rejected ICU transform %r: %s", transform_id or "<rules>", exc)
            raise ConfigurationError(f"Invalid ICU transform: {exc}") from exc
        self.id = str(self._transliterator)
        logger.debug("Compiled ICU transform %s (%s)", self.id, self.direction.value)

    def apply(self, text: str) -> str:
        return self._transliterator.transliterate(text)

    def inverse(self) -> IcuTransform:
        opposite = Direction.REVERSE if self.direction is Direction.FORWARD else Direction.FORWARD
        return IcuTransform(self.transform_id, rules=self.rules, direction=opposite)
