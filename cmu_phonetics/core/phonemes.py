"""Static ARPAbet phoneme classification and pronunciation projections."""

from __future__ import annotations

import re
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Sequence, Tuple, Union

Phones = Union[str, Sequence[str]]


class PhonemeClass(Enum):
    """Category a phoneme token falls into."""

    VOWEL = "vowel"
    CONSONANT = "consonant"
    OTHER = "other"


def _with_stress_variants(symbols: Iterable[str]) -> FrozenSet[str]:
    variants = set()
    for symbol in symbols:
        variants.add(symbol)
        variants.update(f"{symbol}{digit}" for digit in STRESS_DIGITS)
    return frozenset(variants)


STRESS_DIGITS: Tuple[str, ...] = ("0", "1", "2")
RHYME_STRESS_DIGITS: FrozenSet[str] = frozenset({"1", "2"})

VOWEL_SYMBOLS: Tuple[str, ...] = (
    "AO", "AA", "IY", "UW", "EH", "IH", "UH", "AH", "AX",
    "AE", "EY", "AY", "OW", "AW", "OY", "ER", "AXR",
)

ARPABET_VOWELS: FrozenSet[str] = _with_stress_variants(VOWEL_SYMBOLS)

ARPABET_CONSONANTS: FrozenSet[str] = frozenset({
    "P", "B", "T", "D", "K",
    "G", "CH", "JH", "F", "V",
    "TH", "DH", "S", "Z", "SH",
    "ZH", "HH", "M", "EM", "N",
    "EN", "NG", "ENG", "L", "EL",
    "R", "DX", "NX", "Y", "W", "Q",
})

_NON_STRESS_PATTERN = re.compile(r"[^012]")
_TRAILING_STRESS_PATTERN = re.compile(r"[012]$")


def as_tokens(phones: Phones) -> Tuple[str, ...]:
    """Normalise ``phones`` to a tuple of tokens.

    Accepts the space-joined form (``"P EH1 S T"``) or any sequence of tokens.
    """

    if isinstance(phones, str):
        return tuple(phones.split())
    return tuple(token for token in phones if token)


def join_phones(tokens: Iterable[str]) -> str:
    return " ".join(tokens)


def classify(token: str) -> PhonemeClass:
    """Return the :class:`PhonemeClass` for ``token``.

    Unknown tokens classify as :attr:`PhonemeClass.OTHER`.
    """

    if token in ARPABET_VOWELS:
        return PhonemeClass.VOWEL
    if token in ARPABET_CONSONANTS:
        return PhonemeClass.CONSONANT
    return PhonemeClass.OTHER


def is_vowel(token: str) -> bool:
    return token in ARPABET_VOWELS


def is_consonant(token: str) -> bool:
    return token in ARPABET_CONSONANTS


def stress_digit(token: str) -> Optional[str]:
    """Return the trailing stress digit of ``token`` or ``None``."""

    if token and token[-1] in STRESS_DIGITS:
        return token[-1]
    return None


def base_symbol(token: str) -> str:
    """Strip the stress digit from ``token`` (``"EH1"`` -> ``"EH"``)."""

    return _TRAILING_STRESS_PATTERN.sub("", token)


def stress(phones: Phones) -> str:
    """Return the stress digits of ``phones`` in order.

    This filters characters of the space-joined pronunciation rather than
    tokens, so every ``0``/``1``/``2`` anywhere in the string is kept.
    """

    joined = phones if isinstance(phones, str) else join_phones(phones)
    return _NON_STRESS_PATTERN.sub("", joined)


def vowel_tokens(phones: Phones) -> Tuple[str, ...]:
    return tuple(token for token in as_tokens(phones) if token in ARPABET_VOWELS)


def consonant_tokens(phones: Phones) -> Tuple[str, ...]:
    return tuple(token for token in as_tokens(phones) if token in ARPABET_CONSONANTS)


def vowels_for_phones(phones: Phones) -> str:
    """Vowel projection of ``phones`` as a space-joined key."""

    return join_phones(vowel_tokens(phones))


def consonants_for_phones(phones: Phones) -> str:
    """Consonant projection of ``phones`` as a space-joined key."""

    return join_phones(consonant_tokens(phones))


def rhyming_chunk_tokens(phones: Phones) -> Tuple[str, ...]:
    tokens = as_tokens(phones)
    for index in range(len(tokens) - 1, -1, -1):
        if stress_digit(tokens[index]) in RHYME_STRESS_DIGITS:
            return tokens[index:]
    return tokens


def rhyming_chunk_for_phones(phones: Phones) -> str:
    """Return the suffix starting at the last phoneme with stress 1 or 2.

    Pronunciations without such a phoneme are returned whole.
    """

    return join_phones(rhyming_chunk_tokens(phones))


__all__ = [
    "ARPABET_CONSONANTS",
    "ARPABET_VOWELS",
    "PhonemeClass",
    "Phones",
    "RHYME_STRESS_DIGITS",
    "STRESS_DIGITS",
    "as_tokens",
    "base_symbol",
    "classify",
    "consonant_tokens",
    "consonants_for_phones",
    "is_consonant",
    "is_vowel",
    "join_phones",
    "rhyming_chunk_for_phones",
    "rhyming_chunk_tokens",
    "stress",
    "stress_digit",
    "vowel_tokens",
    "vowels_for_phones",
]
