#!/usr/bin/env python3
"""
Tokenizer & Span Tracker
========================
Splits raw text into word, whitespace and punctuation tokens with absolute
[start, end) character offsets. These offsets are the coordinate system
shared by every checker, the highlighter and the exporters.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List

__version__ = "1.2.0"

SPLIT_PATTERN = re.compile(r'(\s+|[.,!?;:])')
SEPARATOR_ONLY = re.compile(r'^[.,!?;:\s]+$')
PUNCTUATION_CHARS = frozenset('.,!?;:')
NUMERIC_OR_PUNCT = re.compile(r'^[\d\-.,!?;:()]+$')


class TokenKind(Enum):
    WORD = "word"
    WHITESPACE = "whitespace"
    PUNCTUATION = "punctuation"


@dataclass(frozen=True)
class Token:
    """A contiguous slice of the input text."""
    text: str
    kind: TokenKind
    start: int
    end: int

    @property
    def normalized(self) -> str:
        return self.text.lower().strip()

    @property
    def stripped(self) -> str:
        return self.text.strip()

    @property
    def skippable(self) -> bool:
        """Separators only advance the position."""
        return not self.normalized or bool(SEPARATOR_ONLY.match(self.text))

    @property
    def is_numeric_or_punct(self) -> bool:
        return bool(NUMERIC_OR_PUNCT.match(self.stripped))

    @property
    def starts_upper(self) -> bool:
        stripped = self.stripped
        return bool(stripped) and stripped[0].isupper()

    @property
    def has_digit(self) -> bool:
        return any(c.isdigit() for c in self.text)


def _kind_of(piece: str) -> TokenKind:
    if piece.isspace():
        return TokenKind.WHITESPACE
    if piece in PUNCTUATION_CHARS:
        return TokenKind.PUNCTUATION
    return TokenKind.WORD


def tokenize(text: str) -> List[Token]:
    """Split text into tokens, tracking offsets by running accumulation."""
    tokens = []
    position = 0
    for piece in SPLIT_PATTERN.split(text):
        if not piece:
            continue
        tokens.append(Token(piece, _kind_of(piece), position, position + len(piece)))
        position += len(piece)
    return tokens


def word_tokens(tokens: List[Token]) -> List[Token]:
    """Tokens the per-word checkers should look at."""
    return [t for t in tokens if t.kind is TokenKind.WORD and not t.skippable]


def fold_case(text: str) -> str:
    """
    Lowercase text without changing its length.

    Characters whose lowercase form is longer (e.g. U+0130) are kept as-is so
    offsets found in the folded text stay valid in the original.
    """
    return ''.join(c.lower() if len(c.lower()) == 1 else c for c in text)
