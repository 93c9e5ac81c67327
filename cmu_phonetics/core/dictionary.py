"""In-memory pronunciation dictionary with precomputed projection indices."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence, Tuple

from .phonemes import (
    Phones,
    as_tokens,
    consonant_tokens,
    join_phones,
    stress,
    vowel_tokens,
)

Pronunciation = Tuple[str, ...]


def _normalize_word(word: str) -> str:
    return word.strip().lower() if word else ""


def _freeze(groups: Dict) -> Mapping:
    return MappingProxyType(
        {key: tuple(dict.fromkeys(values)) for key, values in groups.items()}
    )


@dataclass(frozen=True)
class DictionaryEntry:
    """One ``(word, pronunciation)`` row of the dictionary."""

    word: str
    phones: Pronunciation

    @property
    def text(self) -> str:
        return join_phones(self.phones)

    @property
    def vowels(self) -> Pronunciation:
        return vowel_tokens(self.phones)

    @property
    def consonants(self) -> Pronunciation:
        return consonant_tokens(self.phones)


class PronunciationDictionary:
    """Read-only table of dictionary rows plus the indices queries rely on.

    Rows are kept verbatim and in load order. Every derived index is built
    eagerly in the constructor and wrapped in a read-only proxy, which makes a
    constructed dictionary safe to share between threads without locking.
    """

    def __init__(self, rows: Iterable[Tuple[str, Phones]] = ()) -> None:
        entries: List[DictionaryEntry] = []
        for word, phones in rows:
            entries.append(DictionaryEntry(_normalize_word(word), as_tokens(phones)))
        self._entries: Tuple[DictionaryEntry, ...] = tuple(entries)

        rows_by_word: Dict[str, List[int]] = {}
        rows_by_phones: Dict[Pronunciation, List[int]] = {}
        words_by_vowels: Dict[str, List[str]] = {}
        words_by_consonants: Dict[str, List[str]] = {}
        words_by_stress: Dict[str, List[str]] = {}
        words_by_onset: Dict[str, List[str]] = {}
        consonant_projections: Dict[Tuple[str, Pronunciation], None] = {}

        for index, entry in enumerate(self._entries):
            rows_by_word.setdefault(entry.word, []).append(index)
            rows_by_phones.setdefault(entry.phones, []).append(index)

            words_by_vowels.setdefault(join_phones(entry.vowels), []).append(entry.word)
            consonants = entry.consonants
            words_by_consonants.setdefault(join_phones(consonants), []).append(entry.word)
            consonant_projections.setdefault((entry.word, consonants), None)

            words_by_stress.setdefault(stress(entry.phones), []).append(entry.word)
            if entry.phones:
                words_by_onset.setdefault(entry.phones[0], []).append(entry.word)

        self._rows_by_word: Mapping[str, Tuple[int, ...]] = _freeze(rows_by_word)
        self._rows_by_phones: Mapping[Pronunciation, Tuple[int, ...]] = _freeze(rows_by_phones)
        self._words_by_vowels: Mapping[str, Tuple[str, ...]] = _freeze(words_by_vowels)
        self._words_by_consonants: Mapping[str, Tuple[str, ...]] = _freeze(words_by_consonants)
        self._words_by_stress: Mapping[str, Tuple[str, ...]] = _freeze(words_by_stress)
        self._words_by_onset: Mapping[str, Tuple[str, ...]] = _freeze(words_by_onset)
        self._consonant_projections: Tuple[Tuple[str, Pronunciation], ...] = tuple(
            consonant_projections
        )

    @classmethod
    def from_rows(cls, rows: Iterable[Tuple[str, Phones]]) -> "PronunciationDictionary":
        return cls(rows)

    # Container protocol ----------------------------------------------------
    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DictionaryEntry]:
        return iter(self._entries)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.contains(word)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} entries, {self.word_count} words)"

    # Lookups ---------------------------------------------------------------
    @property
    def entries(self) -> Tuple[DictionaryEntry, ...]:
        return self._entries

    @property
    def word_count(self) -> int:
        return len(self._rows_by_word)

    def entry_at(self, index: int) -> DictionaryEntry:
        return self._entries[index]

    def rows_for_word(self, word: str) -> Tuple[int, ...]:
        """Row indices stored for ``word`` (case-insensitive), in load order."""

        return self._rows_by_word.get(_normalize_word(word), ())

    def entries_for_word(self, word: str) -> List[DictionaryEntry]:
        return [self._entries[index] for index in self.rows_for_word(word)]

    def lookup(self, word: str) -> List[Pronunciation]:
        """Return every pronunciation stored for ``word`` in load order."""

        return [entry.phones for entry in self.entries_for_word(word)]

    def contains(self, word: str) -> bool:
        return bool(self.rows_for_word(word))

    def rows_with_phones(self, phones: Phones) -> Tuple[int, ...]:
        return self._rows_by_phones.get(as_tokens(phones), ())

    def words_with_vowels(self, vowels: str) -> Tuple[str, ...]:
        return self._words_by_vowels.get(vowels, ())

    def words_with_consonants(self, consonants: str) -> Tuple[str, ...]:
        return self._words_by_consonants.get(consonants, ())

    def words_with_stress(self, pattern: str) -> Tuple[str, ...]:
        return self._words_by_stress.get(pattern, ())

    def words_with_onset(self, token: str) -> Tuple[str, ...]:
        return self._words_by_onset.get(token, ())

    def consonant_projections(self) -> Sequence[Tuple[str, Pronunciation]]:
        """Distinct ``(word, consonant tokens)`` pairs in first-seen order."""

        return self._consonant_projections


__all__ = ["DictionaryEntry", "Pronunciation", "PronunciationDictionary"]
