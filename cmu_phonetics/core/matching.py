"""Phonetic query engine: rhyme, alliteration, assonance and consonance lookups."""

from __future__ import annotations

import math
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import (
    Any,
    Dict,
    FrozenSet,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)

from cmu_phonetics.utils.observability import (
    create_counter,
    create_gauge,
    create_histogram,
    get_logger,
    record_exception,
    start_span,
)

from .dictionary import Pronunciation, PronunciationDictionary
from .errors import RatioContractError
from .ipa import ArpaToIpaTable
from .phonemes import (
    PhonemeClass,
    Phones,
    as_tokens,
    classify,
    consonant_tokens,
    consonants_for_phones,
    join_phones,
    rhyming_chunk_for_phones,
    rhyming_chunk_tokens,
    stress,
    vowels_for_phones,
)

MIN_WEAK_CONSONANCE_RATIO: float = 0.25
DEFAULT_WEAK_CONSONANCE_RATIO: float = 0.7

T = TypeVar("T")


def _unique(values: Iterable[T]) -> List[T]:
    """Drop repeated values while keeping first-seen order."""

    return list(dict.fromkeys(values))


def _normalize_word(word: str) -> str:
    return word.strip().lower() if word else ""


@dataclass(frozen=True)
class WeakConsonanceMatch:
    """A candidate word that shares part of the query's consonants."""

    word: str
    intersection: Tuple[str, ...]
    score: float

    @property
    def key(self) -> Tuple[str, FrozenSet[str], float]:
        """Identity used to collapse repeated matches; overlap order is ignored."""

        return self.word, frozenset(self.intersection), self.score

    def as_dict(self) -> Dict[str, Any]:
        return {
            "word": self.word,
            "intersection": list(self.intersection),
            "score": self.score,
        }


def weak_consonance_score(
    consonants: Sequence[str],
    candidate: Sequence[str],
) -> Optional[Tuple[Tuple[str, ...], float]]:
    """Score the consonant overlap between two consonant projections.

    The overlap counts each distinct consonant once, however often it occurs
    on either side. It is divided by the full length of each projection and
    the two coverages are averaged. Returns ``(overlap, score)`` with the
    overlap ordered as it occurs in ``candidate``, or ``None`` when either
    projection is empty.
    """

    if not consonants or not candidate:
        return None

    query = set(consonants)
    intersection = tuple(dict.fromkeys(token for token in candidate if token in query))
    coverage = len(intersection) / float(len(consonants))
    candidate_coverage = len(intersection) / float(len(candidate))
    return intersection, (coverage + candidate_coverage) / 2.0


def validate_ratio(ratio: Any) -> float:
    """Return ``ratio`` as a float or raise :class:`RatioContractError`."""

    if isinstance(ratio, bool) or not isinstance(ratio, (int, float)):
        raise RatioContractError(ratio, MIN_WEAK_CONSONANCE_RATIO)
    if math.isnan(ratio) or ratio < MIN_WEAK_CONSONANCE_RATIO:
        raise RatioContractError(ratio, MIN_WEAK_CONSONANCE_RATIO)
    return float(ratio)


class PhoneticQueryEngine:
    """Answers phonetic queries against a :class:`PronunciationDictionary`.

    Every word query is case-insensitive, returns its results without
    duplicates in first-seen order and returns an empty list for words the
    dictionary does not contain. Pronunciations are reported in their
    space-joined form (``"P EH1 S T"``).
    """

    def __init__(
        self,
        dictionary: PronunciationDictionary,
        ipa_table: Optional[ArpaToIpaTable] = None,
        default_ratio: float = DEFAULT_WEAK_CONSONANCE_RATIO,
    ) -> None:
        self.dictionary = dictionary
        self.ipa_table = ipa_table if ipa_table is not None else ArpaToIpaTable()
        self.default_ratio = validate_ratio(default_ratio)
        self._logger = get_logger(__name__).bind(component="phonetic_query_engine")

        self._metric_queries = create_counter(
            "phonetic_queries_total",
            "Phonetic queries answered by the engine.",
            label_names=("operation",),
        )
        self._metric_failures = create_counter(
            "phonetic_query_failures_total",
            "Phonetic queries that raised an exception.",
            label_names=("operation",),
        )
        self._metric_duration = create_histogram(
            "phonetic_query_seconds",
            "Latency of phonetic queries.",
            label_names=("operation",),
        )
        create_gauge(
            "phonetic_index_entries",
            "Rows held by the most recently built pronunciation index.",
        ).set(len(dictionary))

        self._logger.info(
            "Phonetic query engine ready",
            context={
                "entries": len(dictionary),
                "words": dictionary.word_count,
                "ipa_symbols": len(self.ipa_table),
                "default_ratio": self.default_ratio,
            },
        )

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Tuple[str, Phones]],
        ipa_table: Optional[Dict[str, str]] = None,
        default_ratio: float = DEFAULT_WEAK_CONSONANCE_RATIO,
    ) -> "PhoneticQueryEngine":
        table = ipa_table if isinstance(ipa_table, ArpaToIpaTable) else ArpaToIpaTable(ipa_table)
        return cls(PronunciationDictionary(rows), table, default_ratio)

    # Instrumentation -------------------------------------------------------
    @contextmanager
    def _query(self, operation: str, **attributes: Any) -> Iterator[None]:
        context = {"operation": operation, **attributes}
        start = time.perf_counter()
        self._metric_queries.labels(operation=operation).inc()
        with start_span(f"cmu_phonetics.{operation}", context) as span:
            try:
                yield
            except Exception as exc:
                self._metric_failures.labels(operation=operation).inc()
                record_exception(span, exc)
                self._logger.error(
                    "Phonetic query failed",
                    context={**context, "error": str(exc), "error_type": type(exc).__name__},
                )
                raise
            finally:
                elapsed = time.perf_counter() - start
                self._metric_duration.labels(operation=operation).observe(elapsed)
        self._logger.debug("Phonetic query answered", context={**context, "elapsed": elapsed})

    # Internal helpers ------------------------------------------------------
    def _pronunciations(self, word: str) -> List[Pronunciation]:
        return self.dictionary.lookup(word)

    def _words_ending_with(self, chunk: Sequence[str]) -> List[str]:
        size = len(chunk)
        if not size:
            return []
        chunk = tuple(chunk)
        return _unique(
            entry.word
            for entry in self.dictionary
            if len(entry.phones) >= size and entry.phones[-size:] == chunk
        )

    def _weak_matches(
        self,
        consonants: Sequence[str],
        ratio: float,
    ) -> List[WeakConsonanceMatch]:
        matches: List[WeakConsonanceMatch] = []
        for word, candidate in self.dictionary.consonant_projections():
            scored = weak_consonance_score(consonants, candidate)
            if scored is None:
                continue
            intersection, score = scored
            if score >= ratio:
                matches.append(WeakConsonanceMatch(word, intersection, score))
        return matches

    @staticmethod
    def _rank(matches: Iterable[WeakConsonanceMatch]) -> List[WeakConsonanceMatch]:
        distinct: Dict[Tuple[str, FrozenSet[str], float], WeakConsonanceMatch] = {}
        for match in matches:
            distinct.setdefault(match.key, match)
        # sorted() is stable, so equal scores keep discovery order
        return sorted(distinct.values(), key=lambda match: -match.score)

    def _threshold(self, ratio: Optional[float]) -> float:
        return validate_ratio(self.default_ratio if ratio is None else ratio)

    # Pure pronunciation helpers --------------------------------------------
    @staticmethod
    def stress(phones: Phones) -> str:
        return stress(phones)

    @staticmethod
    def rhyming_chunk_for_phones(phones: Phones) -> str:
        return rhyming_chunk_for_phones(phones)

    @staticmethod
    def vowels_for_phones(phones: Phones) -> str:
        return vowels_for_phones(phones)

    @staticmethod
    def consonants_for_phones(phones: Phones) -> str:
        return consonants_for_phones(phones)

    def ipa_for_phones(self, phones: Phones) -> str:
        """IPA transcription of ``phones``; raises ``IpaLookupError`` on unknown phonemes."""

        with self._query("ipa_for_phones"):
            return self.ipa_table.ipa_for_phones(phones)

    # Word lookups ----------------------------------------------------------
    def contains(self, word: str) -> bool:
        return self.dictionary.contains(word)

    def __contains__(self, word: object) -> bool:
        return word in self.dictionary

    def phones_for_word(self, word: str) -> List[str]:
        with self._query("phones_for_word", word=word):
            return _unique(entry.text for entry in self.dictionary.entries_for_word(word))

    def ipa_for_word(self, word: str) -> List[str]:
        with self._query("ipa_for_word", word=word):
            return _unique(
                self.ipa_table.ipa_for_phones(phones)
                for phones in self._pronunciations(word)
            )

    def vowels_for_word(self, word: str) -> List[str]:
        with self._query("vowels_for_word", word=word):
            return _unique(vowels_for_phones(phones) for phones in self._pronunciations(word))

    def consonants_for_word(self, word: str) -> List[str]:
        with self._query("consonants_for_word", word=word):
            return _unique(
                consonants_for_phones(phones) for phones in self._pronunciations(word)
            )

    def stress_for_word(self, word: str) -> List[str]:
        with self._query("stress_for_word", word=word):
            return _unique(stress(phones) for phones in self._pronunciations(word))

    def syllable_count_for_word(self, word: str) -> List[int]:
        with self._query("syllable_count_for_word", word=word):
            return _unique(len(stress(phones)) for phones in self._pronunciations(word))

    def rhyming_chunks_for_word(self, word: str) -> List[str]:
        with self._query("rhyming_chunks_for_word", word=word):
            return _unique(
                rhyming_chunk_for_phones(phones) for phones in self._pronunciations(word)
            )

    # Reverse lookups -------------------------------------------------------
    def words_by_stress(self, pattern: str) -> List[str]:
        """Words with any pronunciation whose stress digits equal ``pattern``."""

        with self._query("words_by_stress", pattern=pattern):
            return list(self.dictionary.words_with_stress(pattern))

    def words_by_rhyming_chunk(self, chunk: Phones) -> List[str]:
        """Words with any pronunciation ending in the phoneme tokens of ``chunk``.

        Matching compares whole tokens, so ``"AH0 T"`` does not match a
        pronunciation ending in ``"HAH0 T"``. An empty chunk matches nothing.
        """

        with self._query("words_by_rhyming_chunk", chunk=join_phones(as_tokens(chunk))):
            return self._words_ending_with(as_tokens(chunk))

    def words_by_rhyme(self, word: str) -> List[str]:
        """Words sharing a rhyming chunk with ``word``, excluding ``word`` itself."""

        with self._query("words_by_rhyme", word=word):
            normalized = _normalize_word(word)
            chunks = _unique(
                rhyming_chunk_tokens(phones) for phones in self._pronunciations(word)
            )
            return _unique(
                candidate
                for chunk in chunks
                for candidate in self._words_ending_with(chunk)
                if candidate != normalized
            )

    def homophones_by_word(self, word: str) -> List[str]:
        """Words pronounced exactly like one of ``word``'s pronunciations.

        A row never matches itself, so ``word`` is only reported when another
        row repeats both the word and one of its pronunciations.
        """

        with self._query("homophones_by_word", word=word):
            homophones: List[str] = []
            for row in self.dictionary.rows_for_word(word):
                phones = self.dictionary.entry_at(row).phones
                for match in self.dictionary.rows_with_phones(phones):
                    if match != row:
                        homophones.append(self.dictionary.entry_at(match).word)
            return _unique(homophones)

    def words_by_alliteration(self, word: str) -> List[str]:
        """Words whose pronunciation opens on the same consonant as ``word``.

        Pronunciations of ``word`` that start with a vowel (or anything other
        than a consonant) contribute no onset.
        """

        with self._query("words_by_alliteration", word=word):
            normalized = _normalize_word(word)
            onsets = _unique(
                phones[0]
                for phones in self._pronunciations(word)
                if phones and classify(phones[0]) is PhonemeClass.CONSONANT
            )
            return _unique(
                candidate
                for onset in onsets
                for candidate in self.dictionary.words_with_onset(onset)
                if candidate != normalized
            )

    def words_by_phones_strict_assonance(self, phones: Phones) -> List[str]:
        with self._query("words_by_phones_strict_assonance"):
            return list(self.dictionary.words_with_vowels(vowels_for_phones(phones)))

    def words_by_strict_assonance(self, word: str) -> List[str]:
        """Words whose vowels match ``word``'s in number, order and identity."""

        with self._query("words_by_strict_assonance", word=word):
            return _unique(
                candidate
                for phones in self._pronunciations(word)
                for candidate in self.dictionary.words_with_vowels(vowels_for_phones(phones))
            )

    def words_by_phones_strict_consonance(self, phones: Phones) -> List[str]:
        with self._query("words_by_phones_strict_consonance"):
            return list(
                self.dictionary.words_with_consonants(consonants_for_phones(phones))
            )

    def words_by_strict_consonance(self, word: str) -> List[str]:
        """Words whose consonants match ``word``'s in number, order and identity."""

        with self._query("words_by_strict_consonance", word=word):
            return _unique(
                candidate
                for phones in self._pronunciations(word)
                for candidate in self.dictionary.words_with_consonants(
                    consonants_for_phones(phones)
                )
            )

    def words_by_phones_weak_consonance(
        self,
        phones: Phones,
        ratio: Optional[float] = None,
    ) -> List[WeakConsonanceMatch]:
        """Rank words by partial consonant overlap with ``phones``.

        ``ratio`` defaults to the engine's ``default_ratio``. Raises
        :class:`RatioContractError` before scanning if it is below
        ``MIN_WEAK_CONSONANCE_RATIO``.
        """

        with self._query("words_by_phones_weak_consonance", ratio=ratio):
            threshold = self._threshold(ratio)
            return self._rank(self._weak_matches(consonant_tokens(phones), threshold))

    def words_by_weak_consonance(
        self,
        word: str,
        ratio: Optional[float] = None,
    ) -> List[WeakConsonanceMatch]:
        """Weak consonance: words matching any of ``word``'s consonants, in any order.

        For every candidate the share of ``word``'s consonants it covers and
        the share of its own consonants covered by ``word`` are averaged; the
        candidate is kept when that average reaches ``ratio`` (the engine's
        ``default_ratio`` when omitted). Matches that differ only in the order
        of their shared consonants count once. Results are ordered by score,
        highest first, with ties in discovery order.
        """

        with self._query("words_by_weak_consonance", word=word, ratio=ratio):
            threshold = self._threshold(ratio)
            matches: List[WeakConsonanceMatch] = []
            for phones in self._pronunciations(word):
                matches.extend(self._weak_matches(consonant_tokens(phones), threshold))
            return self._rank(matches)


__all__ = [
    "DEFAULT_WEAK_CONSONANCE_RATIO",
    "MIN_WEAK_CONSONANCE_RATIO",
    "PhoneticQueryEngine",
    "WeakConsonanceMatch",
    "validate_ratio",
    "weak_consonance_score",
]
