#!/usr/bin/env python3
"""
Indonesian Rule Tables
======================
Static vocabulary tables used by the checkers:

- INFORMAL_TO_FORMAL: colloquial (tidak baku) words and their baku form
- COMMON_TYPOS: exact typo strings with a confident correction
- PHRASE_MISTAKES: multi-word or spelling-variant mistakes found by text scan
- PROPER_NOUNS: words that must always be capitalized
- VALID_SUFFIXES: particles and derivational suffixes stripped during lookup
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, FrozenSet, Tuple, Optional, Iterable

__version__ = "1.2.0"


INFORMAL_TO_FORMAL = {
    'gak': 'tidak',
    'ga': 'tidak',
    'nggak': 'tidak',
    'enggak': 'tidak',
    'udah': 'sudah',
    'aja': 'saja',
    'sampe': 'sampai',
    'gimana': 'bagaimana',
    'kenapa': 'mengapa',
    'kayak': 'seperti',
    'emang': 'memang',
    'biar': 'agar',
    'ama': 'dengan',
    'abis': 'setelah',
    'banget': 'sekali',
    'doang': 'saja',
    'ketemuan': 'bertemu',
    'ngomong': 'berbicara',
    'bilang': 'berkata',
    'tau': 'tahu',
    'dapet': 'dapat',
    'pake': 'pakai',
    'kalo': 'kalau',
    'gini': 'begini',
    'gitu': 'begitu',
    'cuma': 'hanya',
    'bikin': 'membuat',
    'lagian': 'lagi pula',
    'trus': 'terus',
    'makasih': 'terima kasih',
}

COMMON_TYPOS = {
    'sayah': 'saya',
    'tidka': 'tidak',
    'dengna': 'dengan',
    'yagn': 'yang',
    'adalha': 'adalah',
    'untk': 'untuk',
    'karna': 'karena',
    'krena': 'karena',
    'bisaa': 'bisa',
    'mengunakan': 'menggunakan',
    'merubah': 'mengubah',
    'nasehat': 'nasihat',
    'ijin': 'izin',
    'jaman': 'zaman',
    'kwalitas': 'kualitas',
    'obyek': 'objek',
    'sekedar': 'sekadar',
    'hutang': 'utang',
    'silahkan': 'silakan',
    'antri': 'antre',
    'jadual': 'jadwal',
    'nafas': 'napas',
}

PHRASE_MISTAKES = {
    'di makan': 'dimakan',
    'di baca': 'dibaca',
    'di tulis': 'ditulis',
    'di lihat': 'dilihat',
    'ke mana': 'kemana',
    'ke sana': 'kesana',
    'ke mari': 'kemari',
    'apotik': 'apotek',
    'sistim': 'sistem',
    'analisa': 'analisis',
    'praktek': 'praktik',
    'resiko': 'risiko',
    'aktifitas': 'aktivitas',
    'effektif': 'efektif',
    'standart': 'standar',
}

PROPER_NOUNS = frozenset({
    'indonesia', 'jakarta', 'surabaya', 'bandung', 'medan', 'semarang',
    'senin', 'selasa', 'rabu', 'kamis', 'jumat', 'sabtu', 'minggu',
    'januari', 'februari', 'maret', 'april', 'mei', 'juni',
    'juli', 'agustus', 'september', 'oktober', 'november', 'desember',
    'allah', 'tuhan', 'islam', 'kristen', 'hindu', 'buddha',
})

# Order matters only for reporting; any one matching suffix may be stripped.
VALID_SUFFIXES = ('ku', 'mu', 'nya', 'lah', 'kah', 'tah', 'an', 'kan', 'i', 'in')


def _frozen(mapping: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType({k.lower(): v for k, v in mapping.items()})


@dataclass(frozen=True)
class RuleTables:
    """Immutable bundle of the rule tables handed to every checker."""
    informal: Mapping[str, str] = field(default_factory=lambda: _frozen(INFORMAL_TO_FORMAL))
    typos: Mapping[str, str] = field(default_factory=lambda: _frozen(COMMON_TYPOS))
    phrase_mistakes: Mapping[str, str] = field(default_factory=lambda: _frozen(PHRASE_MISTAKES))
    proper_nouns: FrozenSet[str] = PROPER_NOUNS
    suffixes: Tuple[str, ...] = VALID_SUFFIXES

    def with_overrides(
        self,
        informal: Optional[Mapping[str, str]] = None,
        typos: Optional[Mapping[str, str]] = None,
        phrase_mistakes: Optional[Mapping[str, str]] = None,
        proper_nouns: Optional[Iterable[str]] = None,
        suffixes: Optional[Iterable[str]] = None,
    ) -> 'RuleTables':
        """Return a copy with the given tables replaced."""
        changes = {}
        if informal is not None:
            changes['informal'] = _frozen(informal)
        if typos is not None:
            changes['typos'] = _frozen(typos)
        if phrase_mistakes is not None:
            changes['phrase_mistakes'] = _frozen(phrase_mistakes)
        if proper_nouns is not None:
            changes['proper_nouns'] = frozenset(w.lower() for w in proper_nouns)
        if suffixes is not None:
            changes['suffixes'] = tuple(suffixes)
        return replace(self, **changes)

    def is_listed(self, word: str) -> bool:
        """True when the word already has a table-driven correction."""
        return word in self.typos or word in self.informal


DEFAULT_RULES = RuleTables()
