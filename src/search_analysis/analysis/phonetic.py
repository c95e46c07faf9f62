"""Phonetic encoding with fan-out at a shared position.

Encoders are selected by name when the filter is built. Each one reduces a
word to an ordered set of codes. Rule-based encoders (double metaphone,
Daitch-Mokotoff, Beider-Morse) may return several alternatives for one
word. An encoder returns nothing for a word without letters from the
scripts it knows how to map.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable, Iterable
import functools
import logging

from abydos.phonetic import BeiderMorse, Caverphone, DaitchMokotoff, Koelner
import jellyfish
from metaphone import doublemetaphone
from pyphonetics import RefinedSoundex
import regex

from search_analysis.analysis.tokens import (
    PositionCompactor,
    Token,
    TokenFilterStream,
    TokenStream,
    TokenType,
)
from search_analysis.errors import ConfigurationError


logger = logging.getLogger(__name__)

_LATIN_LETTERS = regex.compile(r"[\p{L}&&\p{Script=Latin}]+", regex.VERSION1)
_BEIDER_MORSE_LETTERS = regex.compile(
    r"[\p{L}&&[\p{Script=Latin}\p{Script=Greek}\p{Script=Cyrillic}\p{Script=Hebrew}\p{Script=Arabic}]]+",
    regex.VERSION1,
)
_CODE_SEPARATORS = regex.compile(r"[,\s]+")

BEIDER_MORSE_LANGUAGES = frozenset(
    [
        "any",
        "arabic",
        "cyrillic",
        "czech",
        "dutch",
        "english",
        "french",
        "german",
        "greek",
        "greeklatin",
        "hebrew",
        "hungarian",
        "italian",
        "latvian",
        "polish",
        "portuguese",
        "romanian",
        "russian",
        "spanish",
        "turkish",
    ]
)


def _branches(encoded: str | Iterable[str]) -> list[str]:
    """Split a multi-valued encoder result into its alternatives."""
    if isinstance(encoded, str):
        return [code for code in _CODE_SEPARATORS.split(encoded) if code]
    return sorted(encoded)


class PhoneticEncoder(ABC):
    """Encodes one word into zero or more phonetic codes."""

    name: str = ""
    alphabet: regex.Pattern = _LATIN_LETTERS

    def __init__(self, max_code_length: int | None = None) -> None:
        if max_code_length is not None and max_code_length < 1:
            raise ConfigurationError(f"max_code_length must be >= 1, got {max_code_length}")
        self.max_code_length = max_code_length

    @abstractmethod
    def _codes(self, letters: str, language: str | None) -> Iterable[str]:  # pragma: no cover - interface definition
        ...

    def check_language(self, language: str | None) -> None:
        """Reject a language hint this encoder cannot use; most encoders ignore it."""

    def encode(self, word: str, language: str | None = None) -> list[str]:
        """Return the distinct codes of ``word`` in order, possibly none.

        Only letters from :attr:`alphabet` are encoded; a word with none of
        them yields no code. ``language`` is a hint for encoders with
        language-specific rules.
        """
        letters = "".join(self.alphabet.findall(word))
        if not letters:
            return []
        codes: list[str] = []
        for code in self._codes(letters, language):
            if self.max_code_length is not None:
                code = code[: self.max_code_length]
            if code and code not in codes:
                codes.append(code)
        return codes


class _FunctionEncoder(PhoneticEncoder):
    func: Callable[[str], str]

    def _codes(self, letters: str, language: str | None) -> Iterable[str]:
        return [self.func(letters)]


class SoundexEncoder(_FunctionEncoder):
    name = "soundex"
    func = staticmethod(jellyfish.soundex)


class MetaphoneEncoder(_FunctionEncoder):
    name = "metaphone"
    func = staticmethod(jellyfish.metaphone)


class NysiisEncoder(_FunctionEncoder):
    name = "nysiis"
    func = staticmethod(jellyfish.nysiis)


class MatchRatingEncoder(_FunctionEncoder):
    name = "match_rating"
    func = staticmethod(jellyfish.match_rating_codex)


class RefinedSoundexEncoder(PhoneticEncoder):
    name = "refined_soundex"

    def __init__(self, max_code_length: int | None = None) -> None:
        super().__init__(max_code_length)
        self._soundex = RefinedSoundex()

    def _codes(self, letters: str, language: str | None) -> Iterable[str]:
        return [self._soundex.phonetics(letters)]


class DoubleMetaphoneEncoder(PhoneticEncoder):
    """Primary code followed by the alternate code when it differs."""

    name = "double_metaphone"

    def __init__(self, max_code_length: int | None = None, *, alternate: bool = True) -> None:
        super().__init__(max_code_length)
        self.alternate = alternate

    def _codes(self, letters: str, language: str | None) -> Iterable[str]:
        primary, secondary = doublemetaphone(letters)
        return [primary, secondary] if self.alternate else [primary]


class Caverphone1Encoder(_FunctionEncoder):
    name = "caverphone1"
    func = staticmethod(Caverphone(version=1).encode)


class Caverphone2Encoder(_FunctionEncoder):
    name = "caverphone2"
    func = staticmethod(Caverphone(version=2).encode)


class CologneEncoder(_FunctionEncoder):
    """Kölner Phonetik, tuned for German names."""

    name = "cologne"
    func = staticmethod(Koelner().encode)


class DaitchMokotoffEncoder(PhoneticEncoder):
    """Daitch-Mokotoff soundex; ambiguous letter groups branch into several codes.

    With ``branching=False`` only the first code is kept.
    """

    name = "daitch_mokotoff"

    def __init__(self, max_code_length: int | None = None, *, branching: bool = True) -> None:
        super().__init__(max_code_length)
        self.branching = branching
        self._soundex = DaitchMokotoff()

    def _codes(self, letters: str, language: str | None) -> Iterable[str]:
        codes = _branches(self._soundex.encode(letters))
        return codes if self.branching else codes[:1]


@functools.lru_cache(maxsize=None)
def _beider_morse(language: str, name_mode: str, match_mode: str, concat: bool) -> BeiderMorse:
    # A language choice of 0 lets the rules guess the language from the spelling.
    language_arg = 0 if language == "any" else language
    return BeiderMorse(language_arg=language_arg, name_mode=name_mode, match_mode=match_mode, concat=concat)


class BeiderMorseEncoder(PhoneticEncoder):
    """Beider-Morse phonetic matching.

    Every phonetic branch the rules produce becomes a separate code. The
    language hint picks the rule set; without one the rules guess the
    language from the spelling. Compiled rule sets are cached per language
    and never modified afterwards, so encoders can be shared across streams.

    Args:
        max_code_length: Truncate codes.
        language: Default language when the filter passes no hint.
        name_mode: ``gen`` (generic), ``ash`` (Ashkenazi) or ``sep`` (Sephardic).
        match_mode: ``approx`` or ``exact``.
        concat: Encode multi-part names as one word.
    """

    name = "beider_morse"
    alphabet = _BEIDER_MORSE_LETTERS

    def __init__(
        self,
        max_code_length: int | None = None,
        *,
        language: str | None = None,
        name_mode: str = "gen",
        match_mode: str = "approx",
        concat: bool = False,
    ) -> None:
        super().__init__(max_code_length)
        if name_mode not in ("gen", "ash", "sep"):
            raise ConfigurationError(f"Unknown Beider-Morse name mode {name_mode!r}")
        if match_mode not in ("approx", "exact"):
            raise ConfigurationError(f"Unknown Beider-Morse match mode {match_mode!r}")
        self.name_mode = name_mode
        self.match_mode = match_mode
        self.concat = concat
        self.language = self._rules_language(language)
        self.check_language(self.language)

    @staticmethod
    def _rules_language(language: str | None) -> str:
        return (language or "any").lower()

    def _rules(self, language: str) -> BeiderMorse:
        return _beider_morse(language, self.name_mode, self.match_mode, self.concat)

    def check_language(self, language: str | None) -> None:
        rules_language = self._rules_language(language or self.language)
        if rules_language not in BEIDER_MORSE_LANGUAGES:
            available = ", ".join(sorted(BEIDER_MORSE_LANGUAGES))
            raise ConfigurationError(f"Unknown Beider-Morse language '{language}'. Available: {available}")
        try:
            self._rules(rules_language)
        except (KeyError, ValueError) as exc:
            raise ConfigurationError(
                f"Beider-Morse has no {self.name_mode} rules for language '{rules_language}'"
            ) from exc

    def _codes(self, letters: str, language: str | None) -> Iterable[str]:
        rules = self._rules(self._rules_language(language or self.language))
        return _branches(rules.encode(letters))


PHONETIC_ALGORITHMS: dict[str, type[PhoneticEncoder]] = {
    encoder.name: encoder
    for encoder in (
        SoundexEncoder,
        RefinedSoundexEncoder,
        MetaphoneEncoder,
        DoubleMetaphoneEncoder,
        NysiisEncoder,
        MatchRatingEncoder,
        Caverphone1Encoder,
        Caverphone2Encoder,
        CologneEncoder,
        DaitchMokotoffEncoder,
        BeiderMorseEncoder,
    )
}


def get_encoder(name: str, **options) -> PhoneticEncoder:
    """Build the encoder registered under ``name``."""
    try:
        encoder_cls = PHONETIC_ALGORITHMS[name.lower()]
    except KeyError:
        available = ", ".join(sorted(PHONETIC_ALGORITHMS))
        raise ConfigurationError(f"Unknown phonetic algorithm '{name}'. Available: {available}") from None
    try:
        return encoder_cls(**options)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid options for phonetic algorithm '{name}': {exc}") from exc


class PhoneticTokenStream(TokenFilterStream):
    def __init__(self, tail: TokenStream, config: PhoneticFilter) -> None:
        super().__init__(tail)
        self._config = config
        self._pending: deque[Token] = deque()
        self._positions = PositionCompactor()

    def _expand(self, token: Token) -> None:
        config = self._config
        if token.token_type in config.skip_types:
            self._pending.append(token)
            return
        codes = config.encoder.encode(token.text, config.language)
        if config.max_codes is not None:
            codes = codes[: config.max_codes]
        if not codes:
            return
        if config.inject:
            self._pending.append(token)
        for code in codes:
            if config.inject and code == token.text:
                continue
            self._pending.append(token.copy_with(text=code))

    def _advance(self) -> bool:
        while not self._pending:
            token = self._pull()
            if token is None:
                return False
            self._expand(token)
            if self._pending:
                position = self._positions.assign(token.position)
                for alternative in self._pending:
                    alternative.position = position
        self._token = self._pending.popleft()
        return True


class PhoneticFilter:
    """Replaces (or, with ``inject``, augments) tokens with phonetic codes.

    Every code derived from one token is emitted at that token's position
    with its offsets. When injecting, the original token comes first. Tokens
    that yield no code are dropped and later positions close the gap.

    Args:
        algorithm: Registered algorithm name or an encoder instance.
        inject: Also emit the original token.
        max_codes: Keep at most this many codes per token.
        language: Language hint passed to the encoder; Beider-Morse selects
            its rule set with it and the other encoders ignore it.
        skip_types: Token types passed through without encoding.
        max_code_length: Truncate codes; only used when ``algorithm`` is a name.
    """

    def __init__(
        self,
        algorithm: str | PhoneticEncoder = "double_metaphone",
        *,
        inject: bool = False,
        max_codes: int | None = None,
        language: str | None = None,
        skip_types: Iterable[TokenType] = (),
        max_code_length: int | None = None,
    ) -> None:
        if max_codes is not None and max_codes < 1:
            raise ConfigurationError(f"max_codes must be >= 1, got {max_codes}")
        if isinstance(algorithm, str):
            self.encoder = get_encoder(algorithm, max_code_length=max_code_length)
        else:
            self.encoder = algorithm
        self.encoder.check_language(language)
        self.inject = inject
        self.max_codes = max_codes
        self.language = language
        self.skip_types = frozenset(TokenType(item) for item in skip_types)
        logger.debug("Phonetic filter using %s", self.encoder.name or type(self.encoder).__name__)

    def transform(self, stream: TokenStream) -> TokenStream:
        return PhoneticTokenStream(stream, self)
