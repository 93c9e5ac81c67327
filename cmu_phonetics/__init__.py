"""Phonetic queries over the CMU pronouncing dictionary."""

from .core import (
    ArpaToIpaTable,
    CMUDictLoader,
    PhoneticQueryEngine,
    PronunciationDictionary,
    WeakConsonanceMatch,
    load_engine,
)

__all__ = [
    "ArpaToIpaTable",
    "CMUDictLoader",
    "PhoneticQueryEngine",
    "PronunciationDictionary",
    "WeakConsonanceMatch",
    "load_engine",
]
