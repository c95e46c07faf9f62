"""ICU-backed components (needs the ``icu`` extra, i.e. PyICU and the ICU library)."""

from search_analysis.icu.breaker import IcuWordBreaker
from search_analysis.icu.transform import IcuTransform


__all__ = ["IcuTransform", "IcuWordBreaker"]
