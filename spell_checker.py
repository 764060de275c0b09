#!/usr/bin/env python3
"""
Indonesian Spell Checkers
=========================
Word-level vocabulary checks, run in this precedence order:

- TypoChecker: exact typo table (misspelling)
- InformalWordChecker: tidak baku vocabulary (informal)
- UnknownWordChecker: KBBI lookup with suffix stripping and fuzzy
  suggestions (misspelling / spelling)
- PhraseMistakeChecker: phrase and spelling-variant table scanned over the
  whole text (misspelling)

Dictionary lookup is disabled while the lexicon is empty.
"""

import re
from bisect import bisect_right
from typing import List, Sequence, Optional, Dict, Tuple

from base_checker import BaseChecker, DetectedError, ErrorKind
from edit_distance import find_closest_matches
from lexicon import Lexicon
from rule_tables import RuleTables, DEFAULT_RULES
from tokenizer import Token, word_tokens, fold_case

__version__ = "1.2.0"

# Table lookups apply to words longer than this
MIN_TABLE_WORD_LENGTH = 1
# Dictionary lookups apply to words longer than this
MIN_LOOKUP_WORD_LENGTH = 2


def _table_candidates(tokens: Sequence[Token]) -> List[Token]:
    return [
        t for t in word_tokens(tokens)
        if not t.is_numeric_or_punct and len(t.normalized) > MIN_TABLE_WORD_LENGTH
    ]


class TypoChecker(BaseChecker):
    """Flags words found in the exact typo table."""

    CHECKER_NAME = "Typo"
    CHECKER_VERSION = "1.2.0"

    def check(self, text: str, tokens: Sequence[Token] = (), lexicon: Optional[Lexicon] = None,
              rules: RuleTables = DEFAULT_RULES, **kwargs) -> List[DetectedError]:
        issues = []
        for token in _table_candidates(tokens):
            correction = rules.typos.get(token.normalized)
            if correction:
                issues.append(self.token_error(
                    ErrorKind.MISSPELLING, token,
                    f'Kemungkinan salah ketik. Perbaiki menjadi "{correction}"'
                ))
        return issues


class InformalWordChecker(BaseChecker):
    """Flags colloquial words that have a baku equivalent."""

    CHECKER_NAME = "Informal"
    CHECKER_VERSION = "1.2.0"

    def check(self, text: str, tokens: Sequence[Token] = (), lexicon: Optional[Lexicon] = None,
              rules: RuleTables = DEFAULT_RULES, **kwargs) -> List[DetectedError]:
        issues = []
        for token in _table_candidates(tokens):
            if token.normalized in rules.typos:
                continue
            formal = rules.informal.get(token.normalized)
            if formal:
                issues.append(self.token_error(
                    ErrorKind.INFORMAL, token,
                    f'Gunakan kata baku "{formal}" sebagai ganti "{token.stripped}"'
                ))
        return issues


class UnknownWordChecker(BaseChecker):
    """
    Looks each word up in the KBBI lexicon.

    Unknown words get a "did you mean" suggestion when the fuzzy matcher finds
    one, otherwise a not-in-dictionary warning. Capitalized words still get
    suggestions but never the warning, since they may be names.
    """

    CHECKER_NAME = "Dictionary"
    CHECKER_VERSION = "1.2.0"

    def __init__(self, enabled: bool = True, use_suffixes: bool = True, max_suggestions: int = 2):
        super().__init__(enabled)
        self.use_suffixes = use_suffixes
        self.max_suggestions = max_suggestions

    def check(self, text: str, tokens: Sequence[Token] = (), lexicon: Optional[Lexicon] = None,
              rules: RuleTables = DEFAULT_RULES, **kwargs) -> List[DetectedError]:
        if lexicon is None or lexicon.is_empty:
            return []

        issues = []
        # Same word, same verdict: avoid repeating fuzzy scans in one document
        verdicts: Dict[str, Tuple[bool, List[str]]] = {}

        for token in _table_candidates(tokens):
            word = token.normalized
            if len(word) <= MIN_LOOKUP_WORD_LENGTH:
                continue
            if word in rules.proper_nouns or rules.is_listed(word):
                continue

            if word not in verdicts:
                known = self._is_known(word, lexicon, rules)
                suggestions = [] if known else find_closest_matches(word, lexicon, self.max_suggestions)
                verdicts[word] = (known, suggestions)
            known, suggestions = verdicts[word]
            if known:
                continue

            if suggestions:
                issues.append(self.token_error(
                    ErrorKind.MISSPELLING, token,
                    'Kemungkinan salah ketik. ' + self._format_suggestions(suggestions)
                ))
            elif not token.has_digit and not token.starts_upper:
                issues.append(self.token_error(
                    ErrorKind.SPELLING, token,
                    f'Kata "{token.stripped}" tidak ditemukan dalam KBBI. Periksa ejaan kata ini.'
                ))
        return issues

    def _is_known(self, word: str, lexicon: Lexicon, rules: RuleTables) -> bool:
        if self.use_suffixes:
            return lexicon.is_known_with_suffix(word, rules.suffixes)
        return lexicon.is_known(word)

    @staticmethod
    def _format_suggestions(suggestions: List[str]) -> str:
        if len(suggestions) == 1:
            return f'Maksud Anda "{suggestions[0]}"?'
        return f'Maksud Anda "{suggestions[0]}" atau "{suggestions[1]}"?'


class PhraseMistakeChecker(BaseChecker):
    """
    Finds every occurrence of each mistake phrase in the text.

    Occurrences are located once per phrase over the case-folded text and kept
    when they start inside a word token.
    """

    CHECKER_NAME = "Phrase"
    CHECKER_VERSION = "1.2.0"

    def check(self, text: str, tokens: Sequence[Token] = (), lexicon: Optional[Lexicon] = None,
              rules: RuleTables = DEFAULT_RULES, **kwargs) -> List[DetectedError]:
        if not rules.phrase_mistakes or not text:
            return []

        words = word_tokens(tokens)
        if not words:
            return []
        word_starts = [t.start for t in words]
        folded = fold_case(text)

        issues = []
        for phrase, correction in rules.phrase_mistakes.items():
            for match in re.finditer(re.escape(phrase), folded):
                if not self._inside_word(match.start(), words, word_starts):
                    continue
                issues.append(self.create_error(
                    ErrorKind.MISSPELLING, text, match.start(), match.end(),
                    f'Perbaiki menjadi "{correction}"'
                ))
        return issues

    @staticmethod
    def _inside_word(offset: int, words: List[Token], word_starts: List[int]) -> bool:
        idx = bisect_right(word_starts, offset) - 1
        return idx >= 0 and words[idx].start <= offset < words[idx].end
