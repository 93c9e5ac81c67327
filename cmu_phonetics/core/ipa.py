"""Immutable ARPAbet to IPA lookup table."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Tuple, Union

from .errors import IpaLookupError
from .phonemes import Phones, as_tokens, base_symbol


class ArpaToIpaTable(Mapping[str, str]):
    """Read-only mapping from ARPAbet symbols to IPA strings.

    Keys may carry a stress digit (``"AH0"``) or be bare (``"AH"``). Lookups
    prefer the exact token and fall back to its stress-free base symbol, so a
    table written against bare symbols still resolves stressed vowels.
    """

    def __init__(
        self,
        pairs: Union[Mapping[str, str], Iterable[Tuple[str, str]], None] = None,
    ) -> None:
        items = pairs.items() if isinstance(pairs, Mapping) else (pairs or ())
        table = {}
        for symbol, ipa in items:
            table[symbol] = ipa
        self._table = MappingProxyType(table)

    def __getitem__(self, symbol: str) -> str:
        return self._table[symbol]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} symbols)"

    def ipa_for_phoneme(self, token: str) -> str:
        """Return the IPA for one token, raising :class:`IpaLookupError` if unknown."""

        ipa = self._table.get(token)
        if ipa is None:
            ipa = self._table.get(base_symbol(token))
        if ipa is None:
            raise IpaLookupError(token)
        return ipa

    def ipa_for_phones(self, phones: Phones) -> str:
        """Concatenate the IPA of every phoneme in ``phones`` with no separator."""

        return "".join(self.ipa_for_phoneme(token) for token in as_tokens(phones))


__all__ = ["ArpaToIpaTable"]
