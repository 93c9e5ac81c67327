"""Core phonetic matching for :mod:`cmu_phonetics`."""

from .cmudict_loader import (
    CMUDictLoader,
    load_engine,
    parse_arpabet_table,
    parse_cmudict_lines,
)
from .dictionary import DictionaryEntry, Pronunciation, PronunciationDictionary
from .errors import (
    DictionaryLoadError,
    IpaLookupError,
    PhoneticsError,
    RatioContractError,
)
from .ipa import ArpaToIpaTable
from .matching import (
    DEFAULT_WEAK_CONSONANCE_RATIO,
    MIN_WEAK_CONSONANCE_RATIO,
    PhoneticQueryEngine,
    WeakConsonanceMatch,
    weak_consonance_score,
)
from .phonemes import (
    ARPABET_CONSONANTS,
    ARPABET_VOWELS,
    PhonemeClass,
    classify,
    consonants_for_phones,
    rhyming_chunk_for_phones,
    stress,
    stress_digit,
    vowels_for_phones,
)

__all__ = [
    "ARPABET_CONSONANTS",
    "ARPABET_VOWELS",
    "ArpaToIpaTable",
    "CMUDictLoader",
    "DictionaryEntry",
    "DictionaryLoadError",
    "DEFAULT_WEAK_CONSONANCE_RATIO",
    "IpaLookupError",
    "MIN_WEAK_CONSONANCE_RATIO",
    "PhonemeClass",
    "PhoneticQueryEngine",
    "PhoneticsError",
    "Pronunciation",
    "PronunciationDictionary",
    "RatioContractError",
    "WeakConsonanceMatch",
    "classify",
    "consonants_for_phones",
    "load_engine",
    "parse_arpabet_table",
    "parse_cmudict_lines",
    "rhyming_chunk_for_phones",
    "stress",
    "stress_digit",
    "vowels_for_phones",
    "weak_consonance_score",
]
