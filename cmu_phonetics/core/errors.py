"""Exception hierarchy raised by the phonetic query engine.

Absent words are never an error: lookups simply return empty results. The
classes below cover the hard failures a caller has to handle.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class PhoneticsError(Exception):
    """Base class for all ``cmu_phonetics`` errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})

    def __str__(self) -> str:
        if self.context:
            details = ", ".join(f"{key}={value}" for key, value in self.context.items())
            return f"{self.message} (context: {details})"
        return self.message


class IpaLookupError(PhoneticsError, KeyError):
    """A phoneme has no entry in the ARPAbet to IPA table."""

    def __init__(self, phoneme: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(f"No IPA mapping for phoneme {phoneme!r}", context)
        self.phoneme = phoneme


class RatioContractError(PhoneticsError, ValueError):
    """Weak consonance was requested with a ratio below the supported floor."""

    def __init__(self, ratio: Any, minimum: float) -> None:
        super().__init__(
            f"Weak consonance ratio must be a number >= {minimum}",
            {"ratio": ratio, "minimum": minimum},
        )
        self.ratio = ratio
        self.minimum = minimum


class DictionaryLoadError(PhoneticsError):
    """A pronunciation or IPA source could not be read."""

    def __init__(self, source: str, cause: Optional[BaseException] = None) -> None:
        context: Dict[str, Any] = {"source": source}
        if cause is not None:
            context["error"] = str(cause)
        super().__init__("Unable to load phonetic data", context)
        self.source = source
        self.cause = cause


__all__ = [
    "DictionaryLoadError",
    "IpaLookupError",
    "PhoneticsError",
    "RatioContractError",
]
