"""Runtime settings resolved from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from cmu_phonetics.core.matching import DEFAULT_WEAK_CONSONANCE_RATIO, validate_ratio

DICT_PATH_ENV = "CMU_PHONETICS_DICT_PATH"
IPA_PATH_ENV = "CMU_PHONETICS_IPA_PATH"
LOG_LEVEL_ENV = "CMU_PHONETICS_LOG_LEVEL"
WEAK_RATIO_ENV = "CMU_PHONETICS_WEAK_RATIO"

DEFAULT_WEAK_RATIO: float = DEFAULT_WEAK_CONSONANCE_RATIO

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_PACKAGE_LOGGER = "cmu_phonetics"
_logging_configured = False


def _optional_path(value: Optional[str]) -> Optional[Path]:
    if value is None or not value.strip():
        return None
    return Path(value.strip()).expanduser()


def _coerce_ratio(value: Optional[str]) -> float:
    if value is None or not value.strip():
        return DEFAULT_WEAK_RATIO
    try:
        ratio = float(value)
    except (TypeError, ValueError):
        return DEFAULT_WEAK_RATIO
    return validate_ratio(ratio)


def resolve_level(level: Union[str, int, None]) -> int:
    """Translate a level name, number or numeric string; INFO when unknown."""

    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    try:
        return int(level)
    except (TypeError, ValueError):
        return getattr(logging, str(level).strip().upper(), logging.INFO)


@dataclass(frozen=True)
class PhoneticsSettings:
    """Where to load phonetic data from and how to run queries.

    ``dict_path``/``ipa_path`` left as ``None`` select the dictionary bundled
    with :mod:`pronouncing` and the IPA table shipped with this package.
    ``weak_consonance_ratio`` becomes the engine's default threshold for weak
    consonance queries.
    """

    dict_path: Optional[Path] = None
    ipa_path: Optional[Path] = None
    log_level: Optional[str] = None
    weak_consonance_ratio: float = DEFAULT_WEAK_RATIO

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PhoneticsSettings":
        """Build settings from ``environ`` (``os.environ`` by default).

        An unparsable ratio falls back to the default; a parsable ratio below
        the supported floor raises ``RatioContractError``.
        """

        env = os.environ if environ is None else environ
        return cls(
            dict_path=_optional_path(env.get(DICT_PATH_ENV)),
            ipa_path=_optional_path(env.get(IPA_PATH_ENV)),
            log_level=env.get(LOG_LEVEL_ENV) or None,
            weak_consonance_ratio=_coerce_ratio(env.get(WEAK_RATIO_ENV)),
        )

    @property
    def level(self) -> int:
        return resolve_level(self.log_level)

    def configure_logging(self, *, force: bool = False) -> None:
        """Install the root handler and apply ``log_level`` to package loggers.

        Only the first call in a process takes effect unless ``force`` is set.
        """

        global _logging_configured

        if _logging_configured and not force:
            return

        logging.basicConfig(level=self.level, format=_LOG_FORMAT)
        logging.getLogger(_PACKAGE_LOGGER).setLevel(self.level)
        _logging_configured = True


__all__ = [
    "DEFAULT_WEAK_RATIO",
    "DICT_PATH_ENV",
    "IPA_PATH_ENV",
    "LOG_LEVEL_ENV",
    "PhoneticsSettings",
    "WEAK_RATIO_ENV",
    "resolve_level",
]
