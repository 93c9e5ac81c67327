"""Loading the CMU pronouncing dictionary and the ARPAbet to IPA table."""

from __future__ import annotations

import re
import threading
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Tuple

import pronouncing

from cmu_phonetics.utils.observability import get_logger

from .dictionary import Pronunciation, PronunciationDictionary
from .errors import DictionaryLoadError
from .ipa import ArpaToIpaTable
from .matching import DEFAULT_WEAK_CONSONANCE_RATIO, PhoneticQueryEngine

if TYPE_CHECKING:  # pragma: no cover - typing only
    from cmu_phonetics.config import PhoneticsSettings

COMMENT_PREFIX = ";;;"
CMUDICT_ENCODING = "latin-1"
IPA_TABLE_RESOURCE = "arpabet_to_ipa.tsv"

_WORD_VARIANT_PATTERN = re.compile(r"\(\d+\)$")

Row = Tuple[str, Pronunciation]


def _strip_variant(word: str) -> str:
    return _WORD_VARIANT_PATTERN.sub("", word).lower()


def parse_cmudict_lines(lines: Iterable[str]) -> Iterator[Row]:
    """Yield ``(word, phones)`` rows from cmudict-formatted ``lines``.

    Comment and blank lines are skipped, as are lines carrying no phonemes.
    The ``(N)`` alternate-pronunciation suffix is removed from the word.
    """

    for line in lines:
        entry = line.strip()
        if not entry or entry.startswith(COMMENT_PREFIX):
            continue

        parts = entry.split()
        if len(parts) < 2:
            continue

        raw_word, *phones = parts
        word = _strip_variant(raw_word)
        if not word:
            continue
        yield word, tuple(phones)


def parse_arpabet_table(lines: Iterable[str]) -> ArpaToIpaTable:
    """Parse ``symbol<TAB>ipa`` lines; a repeated symbol keeps its last value."""

    pairs: List[Tuple[str, str]] = []
    for line in lines:
        entry = line.rstrip("\r\n")
        if not entry.strip():
            continue
        symbol, sep, ipa = entry.partition("\t")
        if not sep:
            continue
        pairs.append((symbol.strip(), ipa.strip()))
    return ArpaToIpaTable(pairs)


class CMUDictLoader:
    """Lazy, thread-safe loader for dictionary rows and the IPA table.

    Without ``dict_path`` the dictionary bundled with :mod:`pronouncing` is
    used; without ``ipa_path`` the table shipped in ``cmu_phonetics.data``.
    A failed load is not cached, so a later call retries the source.
    """

    def __init__(
        self,
        dict_path: Optional[Path | str] = None,
        ipa_path: Optional[Path | str] = None,
        *,
        encoding: str = CMUDICT_ENCODING,
    ) -> None:
        self.dict_path: Optional[Path] = Path(dict_path) if dict_path is not None else None
        self.ipa_path: Optional[Path] = Path(ipa_path) if ipa_path is not None else None
        self.encoding = encoding
        self._lock = threading.RLock()
        self._rows: Optional[Tuple[Row, ...]] = None
        self._ipa_table: Optional[ArpaToIpaTable] = None
        self._logger = get_logger(__name__).bind(component="cmudict_loader")

    @property
    def loaded(self) -> bool:
        return self._rows is not None

    # Sources ---------------------------------------------------------------
    def _read_dict_file(self, path: Path) -> Tuple[Row, ...]:
        try:
            with path.open("r", encoding=self.encoding) as handle:
                return tuple(parse_cmudict_lines(handle))
        except (OSError, UnicodeDecodeError) as exc:
            self._logger.error(
                "Unable to read pronunciation dictionary",
                context={"path": str(path), "error": str(exc)},
            )
            raise DictionaryLoadError(str(path), exc) from exc

    def _read_bundled_dict(self) -> Tuple[Row, ...]:
        try:
            pronouncing.init_cmu()
        except (OSError, UnicodeDecodeError) as exc:
            raise DictionaryLoadError("pronouncing", exc) from exc
        return tuple(
            (_strip_variant(word), tuple(phones.split()))
            for word, phones in pronouncing.pronunciations
            if word and phones
        )

    def _read_ipa_file(self) -> ArpaToIpaTable:
        if self.ipa_path is not None:
            source = str(self.ipa_path)
            resource = self.ipa_path
        else:
            source = f"cmu_phonetics.data/{IPA_TABLE_RESOURCE}"
            resource = resources.files("cmu_phonetics.data").joinpath(IPA_TABLE_RESOURCE)
        try:
            with resource.open("r", encoding="utf-8") as handle:
                return parse_arpabet_table(handle)
        except (OSError, UnicodeDecodeError) as exc:
            self._logger.error(
                "Unable to read ARPAbet to IPA table",
                context={"path": source, "error": str(exc)},
            )
            raise DictionaryLoadError(source, exc) from exc

    # Public API ------------------------------------------------------------
    def load_rows(self) -> Tuple[Row, ...]:
        with self._lock:
            if self._rows is None:
                if self.dict_path is not None:
                    rows = self._read_dict_file(self.dict_path)
                else:
                    rows = self._read_bundled_dict()
                self._rows = rows
                self._logger.info(
                    "Pronunciation dictionary loaded",
                    context={
                        "source": str(self.dict_path or "pronouncing"),
                        "rows": len(rows),
                    },
                )
            return self._rows

    def load_ipa_table(self) -> ArpaToIpaTable:
        with self._lock:
            if self._ipa_table is None:
                self._ipa_table = self._read_ipa_file()
            return self._ipa_table

    def build_dictionary(self) -> PronunciationDictionary:
        return PronunciationDictionary(self.load_rows())

    def build_engine(
        self,
        default_ratio: float = DEFAULT_WEAK_CONSONANCE_RATIO,
    ) -> PhoneticQueryEngine:
        return PhoneticQueryEngine(
            self.build_dictionary(),
            self.load_ipa_table(),
            default_ratio=default_ratio,
        )


def load_engine(settings: Optional[PhoneticsSettings] = None) -> PhoneticQueryEngine:
    """Build a ready-to-query engine from ``settings`` (environment by default).

    Logging is configured from the settings first, and the engine's default
    weak-consonance ratio is the configured one.
    """

    from cmu_phonetics.config import PhoneticsSettings

    resolved = settings if settings is not None else PhoneticsSettings.from_env()
    resolved.configure_logging()
    loader = CMUDictLoader(dict_path=resolved.dict_path, ipa_path=resolved.ipa_path)
    return loader.build_engine(default_ratio=resolved.weak_consonance_ratio)


__all__ = [
    "CMUDictLoader",
    "COMMENT_PREFIX",
    "load_engine",
    "parse_arpabet_table",
    "parse_cmudict_lines",
]
