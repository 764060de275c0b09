#!/usr/bin/env python3
"""
Base Checker Contract
=====================
Defines the error record and the interface all checkers implement.

Every checker receives the same inputs (original text, tokens, lexicon, rule
tables) and returns a list of DetectedError. Checkers never raise out of
safe_check(): a failing checker contributes zero errors.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Dict, Any, Optional, Sequence

from config_logging import get_logger
from lexicon import Lexicon
from rule_tables import RuleTables, DEFAULT_RULES
from tokenizer import Token

__version__ = "1.2.0"

_logger = get_logger('checkers')


class ErrorKind(str, Enum):
    """Error taxonomy shown to the user."""
    GRAMMAR = "grammar"                # reserved; no checker emits it
    SPELLING = "spelling"              # unknown word, no suggestion
    MISSPELLING = "misspelling"        # typo with a confident correction
    INFORMAL = "informal"
    PUNCTUATION = "punctuation"
    CAPITALIZATION = "capitalization"
    FORMAT = "format"                  # document-level, offsets (0, 0)


@dataclass(frozen=True)
class DetectedError:
    """A single flagged span of the original text."""
    kind: ErrorKind
    matched_text: str
    suggestion: str
    start: int
    end: int

    @property
    def span(self) -> tuple:
        return (self.start, self.end)

    @property
    def is_document_level(self) -> bool:
        return self.kind is ErrorKind.FORMAT

    def to_dict(self) -> Dict[str, Any]:
        """Wire format consumed by the highlighter and exporters."""
        return {
            'type': self.kind.value,
            'text': self.matched_text,
            'suggestion': self.suggestion,
            'start': self.start,
            'end': self.end,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DetectedError':
        return cls(
            kind=ErrorKind(data['type']),
            matched_text=data.get('text', ''),
            suggestion=data.get('suggestion', ''),
            start=int(data.get('start', 0)),
            end=int(data.get('end', 0)),
        )


class BaseChecker:
    """
    Base class for all text checkers.

    Subclasses set CHECKER_NAME / CHECKER_VERSION and implement check().
    """

    CHECKER_NAME = "Base"
    CHECKER_VERSION = "1.0.0"

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._errors: List[str] = []

    def check(
        self,
        text: str,
        tokens: Sequence[Token] = (),
        lexicon: Optional[Lexicon] = None,
        rules: RuleTables = DEFAULT_RULES,
        **kwargs
    ) -> List[DetectedError]:
        """
        Run the check.

        Args:
            text: Original document text
            tokens: Output of tokenizer.tokenize(text)
            lexicon: Current lexicon snapshot (may be empty)
            rules: Rule tables

        Returns:
            List of DetectedError
        """
        raise NotImplementedError("Subclasses must implement check()")

    def safe_check(self, *args, **kwargs) -> List[DetectedError]:
        """Run check(); any exception is logged and yields no errors."""
        if not self.enabled:
            return []
        try:
            return self.check(*args, **kwargs)
        except Exception as e:
            self._errors.append(f"{self.CHECKER_NAME} error: {e}")
            _logger.exception(f"{self.CHECKER_NAME} checker failed: {e}",
                              checker=self.CHECKER_NAME)
            return []

    def create_error(
        self,
        kind: ErrorKind,
        text: str,
        start: int,
        end: int,
        suggestion: str,
    ) -> DetectedError:
        """Create an error for text[start:end]."""
        return DetectedError(
            kind=kind,
            matched_text=text[start:end],
            suggestion=suggestion,
            start=start,
            end=end,
        )

    def token_error(self, kind: ErrorKind, token: Token, suggestion: str) -> DetectedError:
        """Create an error covering a whole token."""
        return DetectedError(
            kind=kind,
            matched_text=token.stripped,
            suggestion=suggestion,
            start=token.start,
            end=token.end,
        )

    def clear_errors(self):
        """Clear accumulated errors."""
        self._errors = []

    def get_errors(self) -> List[str]:
        """Get accumulated errors."""
        return self._errors.copy()

