#!/usr/bin/env python3
"""
Resik Bahasa Core Engine
========================
Orchestrates all checkers and merges their output into one position-sorted
error list.

Checkers run in a fixed precedence order. When two checkers flag exactly the
same span, the earlier (higher precedence) checker wins; ties on the start
offset keep precedence order.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Sequence, Tuple, Any, Union

from base_checker import BaseChecker, DetectedError, ErrorKind
from capitalization_checker import ProperNounCapitalizationChecker, SentenceCapitalizationChecker
from config_logging import get_logger, VERSION as __version__
from lexicon import Lexicon, LexiconStatus
from margin_checker import MarginChecker, MarginSpec
from punctuation_checker import PunctuationChecker
from rule_tables import RuleTables, DEFAULT_RULES
from spell_checker import TypoChecker, InformalWordChecker, UnknownWordChecker, PhraseMistakeChecker
from tokenizer import tokenize

_logger = get_logger('core')

MarginsInput = Union[MarginSpec, Dict[str, Any], None]


def default_checkers() -> List[Tuple[str, BaseChecker]]:
    """Checkers in precedence order (first wins on identical spans)."""
    return [
        ('typo', TypoChecker()),
        ('informal', InformalWordChecker()),
        ('unknown_word', UnknownWordChecker()),
        ('phrase_mistake', PhraseMistakeChecker()),
        ('punctuation', PunctuationChecker()),
        ('proper_noun', ProperNounCapitalizationChecker()),
        ('sentence_capitalization', SentenceCapitalizationChecker()),
        ('margins', MarginChecker()),
    ]


def merge_errors(batches: Sequence[Sequence[DetectedError]]) -> List[DetectedError]:
    """
    Merge checker outputs given in precedence order.

    Positional errors are deduplicated by exact (start, end); the first
    batch to claim a span keeps it. Document-level (format) errors are never
    deduplicated by span. The result is sorted by start, then precedence.
    """
    seen = set()
    ranked: List[Tuple[int, int, int, DetectedError]] = []
    sequence = 0
    for rank, batch in enumerate(batches):
        for error in batch:
            if not error.is_document_level:
                if error.span in seen:
                    continue
                seen.add(error.span)
            ranked.append((error.start, rank, sequence, error))
            sequence += 1

    ranked.sort(key=lambda item: item[:3])
    return [item[3] for item in ranked]


@dataclass
class CheckReport:
    """Result of one check, with the dictionary state it ran against."""
    errors: List[DetectedError] = field(default_factory=list)
    lexicon_status: LexiconStatus = LexiconStatus.NOT_LOADED
    lexicon_size: int = 0
    text_length: int = 0
    checker_errors: List[str] = field(default_factory=list)

    @property
    def dictionary_available(self) -> bool:
        return self.lexicon_size > 0

    def count_by_kind(self) -> Dict[str, int]:
        counts = Counter(e.kind.value for e in self.errors)
        return {kind.value: counts.get(kind.value, 0) for kind in ErrorKind}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'errors': [e.to_dict() for e in self.errors],
            'error_count': len(self.errors),
            'by_type': self.count_by_kind(),
            'lexicon': {
                'status': self.lexicon_status.value,
                'size': self.lexicon_size,
                'dictionary_available': self.dictionary_available,
            },
            'text_length': self.text_length,
            'checker_errors': list(self.checker_errors),
        }


class GrammarCheckEngine:
    """
    Runs every checker over a text and aggregates the results.

    The engine holds no per-check state; the lexicon is passed in on each
    call so a snapshot taken before the dictionary finished loading simply
    disables dictionary lookup.
    """

    def __init__(self, rules: RuleTables = DEFAULT_RULES,
                 checkers: Optional[List[Tuple[str, BaseChecker]]] = None):
        self.rules = rules
        self.checkers = checkers if checkers is not None else default_checkers()

    def review(self, text: str, margins: MarginsInput = None,
               lexicon: Optional[Lexicon] = None) -> CheckReport:
        """Check text (and optional margins) and return a CheckReport."""
        if text is None:
            text = ""
        if lexicon is None:
            lexicon = Lexicon.not_loaded()
        margin_spec = margins if isinstance(margins, MarginSpec) or margins is None \
            else MarginSpec.from_dict(margins)

        tokens = tokenize(text)
        batches = []
        failures = []
        with _logger.log_operation('check_text', text_length=len(text),
                                   lexicon_status=lexicon.status.value):
            for name, checker in self.checkers:
                checker.clear_errors()
                batches.append(checker.safe_check(
                    text, tokens, lexicon, self.rules, margins=margin_spec
                ))
                failures.extend(checker.get_errors())

        return CheckReport(
            errors=merge_errors(batches),
            lexicon_status=lexicon.status,
            lexicon_size=len(lexicon),
            text_length=len(text),
            checker_errors=failures,
        )

    def check(self, text: str, margins: MarginsInput = None,
              lexicon: Optional[Lexicon] = None) -> List[DetectedError]:
        return self.review(text, margins, lexicon).errors


def check_grammar(text: str, margins: MarginsInput = None, lexicon: Optional[Lexicon] = None,
                  rules: RuleTables = DEFAULT_RULES) -> List[DetectedError]:
    """
    Check Indonesian text and return errors sorted by position.

    Args:
        text: Document text
        margins: Optional page margins (MarginSpec or dict with top/bottom/left/right, cm)
        lexicon: KBBI lexicon snapshot; None or empty disables dictionary lookup
        rules: Rule tables

    Returns:
        List of DetectedError ordered by start offset
    """
    return GrammarCheckEngine(rules).check(text, margins, lexicon)
