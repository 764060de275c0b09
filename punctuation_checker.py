#!/usr/bin/env python3
"""
Punctuation Checker
===================
Detects punctuation and spacing issues over the whole text:

- PUN001: repeated identical punctuation ("..", "!!", ",,")
- PUN002: two or more consecutive whitespace characters
- PUN003: whitespace immediately before a punctuation mark

Each occurrence is reported individually with its exact span.
"""

import re
from typing import List, Sequence, Optional

from base_checker import BaseChecker, DetectedError, ErrorKind
from lexicon import Lexicon
from rule_tables import RuleTables, DEFAULT_RULES
from tokenizer import Token

__version__ = "1.2.0"

REPEATED_PUNCTUATION = re.compile(r'([.!?,:;])\1+')
MULTIPLE_SPACES = re.compile(r'\s{2,}')
SPACE_BEFORE_PUNCTUATION = re.compile(r'\s+([.!?,:;])')


class PunctuationChecker(BaseChecker):
    """
    Detects punctuation and spacing issues.

    Thread-safe and stateless.
    """

    CHECKER_NAME = "Punctuation"
    CHECKER_VERSION = "1.2.0"

    def __init__(
        self,
        enabled: bool = True,
        check_repeated: bool = True,
        check_double_spaces: bool = True,
        check_space_before: bool = True
    ):
        super().__init__(enabled)
        self.check_repeated = check_repeated
        self.check_double_spaces = check_double_spaces
        self.check_space_before = check_space_before

    def check(self, text: str, tokens: Sequence[Token] = (), lexicon: Optional[Lexicon] = None,
              rules: RuleTables = DEFAULT_RULES, **kwargs) -> List[DetectedError]:
        issues = []
        if not text:
            return issues

        if self.check_repeated:
            issues.extend(self._find_repeated(text))
        if self.check_double_spaces:
            issues.extend(self._find_extra_spaces(text))
        if self.check_space_before:
            issues.extend(self._find_space_before(text))
        return issues

    def _find_repeated(self, text: str) -> List[DetectedError]:
        return [
            self.create_error(
                ErrorKind.PUNCTUATION, text, m.start(), m.end(),
                f'Gunakan satu tanda baca "{m.group(1)}" saja'
            )
            for m in REPEATED_PUNCTUATION.finditer(text)
        ]

    def _find_extra_spaces(self, text: str) -> List[DetectedError]:
        return [
            self.create_error(
                ErrorKind.PUNCTUATION, text, m.start(), m.end(),
                'Gunakan satu spasi saja'
            )
            for m in MULTIPLE_SPACES.finditer(text)
        ]

    def _find_space_before(self, text: str) -> List[DetectedError]:
        return [
            self.create_error(
                ErrorKind.PUNCTUATION, text, m.start(), m.end(),
                f'Hapus spasi sebelum "{m.group(1)}"'
            )
            for m in SPACE_BEFORE_PUNCTUATION.finditer(text)
        ]
