#!/usr/bin/env python3
"""
Capitalization Checkers
=======================
- ProperNounCapitalizationChecker: listed proper nouns written in lowercase
- SentenceCapitalizationChecker: sentences whose first letter is lowercase
"""

import re
from typing import List, Sequence, Optional

from base_checker import BaseChecker, DetectedError, ErrorKind
from lexicon import Lexicon
from rule_tables import RuleTables, DEFAULT_RULES
from tokenizer import Token, word_tokens

__version__ = "1.2.0"

# A sentence is a run of text between terminator runs
SENTENCE_PATTERN = re.compile(r'[^.!?]+')


class ProperNounCapitalizationChecker(BaseChecker):
    """Flags proper nouns that were not capitalized."""

    CHECKER_NAME = "ProperNoun"
    CHECKER_VERSION = "1.2.0"

    def check(self, text: str, tokens: Sequence[Token] = (), lexicon: Optional[Lexicon] = None,
              rules: RuleTables = DEFAULT_RULES, **kwargs) -> List[DetectedError]:
        issues = []
        for token in word_tokens(tokens):
            word = token.stripped
            if token.normalized in rules.proper_nouns and word == word.lower():
                issues.append(self.token_error(
                    ErrorKind.CAPITALIZATION, token,
                    f'Huruf kapital diperlukan: "{word[:1].upper() + word[1:]}"'
                ))
        return issues


class SentenceCapitalizationChecker(BaseChecker):
    """Checks that every sentence starts with a capital letter."""

    CHECKER_NAME = "Capitalization"
    CHECKER_VERSION = "1.2.0"

    def check(self, text: str, tokens: Sequence[Token] = (), lexicon: Optional[Lexicon] = None,
              rules: RuleTables = DEFAULT_RULES, **kwargs) -> List[DetectedError]:
        issues = []
        for match in SENTENCE_PATTERN.finditer(text):
            sentence = match.group()
            if not sentence.strip():
                continue

            offset = self._first_letter(sentence)
            if offset is None:
                continue
            letter = sentence[offset]
            if letter.islower():
                start = match.start() + offset
                issues.append(self.create_error(
                    ErrorKind.CAPITALIZATION, text, start, start + 1,
                    f'Gunakan huruf kapital di awal kalimat: "{letter.upper()}"'
                ))
        return issues

    @staticmethod
    def _first_letter(sentence: str) -> Optional[int]:
        # A fragment opening with a digit is a number, or the tail of a decimal
        # like "3.5"; only quotes and brackets may precede the first letter.
        for i, char in enumerate(sentence):
            if char.isalpha():
                return i
            if char.isdigit():
                return None
        return None
