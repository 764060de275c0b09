#!/usr/bin/env python3
"""
Margin Checker
==============
Document-level page margin conformance. Standard margins are 3.0 cm at the
top and 2.5 cm elsewhere; deviations over 0.1 cm are reported as `format`
errors at offsets (0, 0).
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Dict, Any, Sequence

from base_checker import BaseChecker, DetectedError, ErrorKind
from config_logging import get_logger
from lexicon import Lexicon
from rule_tables import RuleTables, DEFAULT_RULES
from tokenizer import Token

__version__ = "1.2.0"

_logger = get_logger('margin_checker')

MARGIN_TOLERANCE_CM = 0.1

# (field, label, lowercase name) in report order
MARGIN_FIELDS = (
    ('top', 'Margin Atas', 'margin atas'),
    ('bottom', 'Margin Bawah', 'margin bawah'),
    ('left', 'Margin Kiri', 'margin kiri'),
    ('right', 'Margin Kanan', 'margin kanan'),
)


@dataclass(frozen=True)
class MarginSpec:
    """Page margins in centimeters."""
    top: float
    bottom: float
    left: float
    right: float

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['MarginSpec']:
        """
        Build a MarginSpec from a mapping.

        Returns None when the data is missing or malformed; callers treat
        that as "no margin check".
        """
        if not data or not isinstance(data, dict):
            return None
        try:
            values = {name: float(data[name]) for name, _, _ in MARGIN_FIELDS}
        except (KeyError, TypeError, ValueError):
            _logger.warning("Ignoring malformed margin data", margins=str(data)[:200])
            return None
        if any(math.isnan(v) or math.isinf(v) or v < 0 for v in values.values()):
            _logger.warning("Ignoring out-of-range margin data", margins=str(data)[:200])
            return None
        return cls(**values)

    def to_dict(self) -> Dict[str, float]:
        return {'top': self.top, 'bottom': self.bottom, 'left': self.left, 'right': self.right}


STANDARD_MARGINS = MarginSpec(top=3.0, bottom=2.5, left=2.5, right=2.5)


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip('0').rstrip('.') if value != int(value) else f"{value:.1f}"


class MarginChecker(BaseChecker):
    """Compares document margins with the standard layout."""

    CHECKER_NAME = "Margin"
    CHECKER_VERSION = "1.2.0"

    def __init__(self, enabled: bool = True, standard: MarginSpec = STANDARD_MARGINS,
                 tolerance: float = MARGIN_TOLERANCE_CM):
        super().__init__(enabled)
        self.standard = standard
        self.tolerance = tolerance

    def check(self, text: str = "", tokens: Sequence[Token] = (), lexicon: Optional[Lexicon] = None,
              rules: RuleTables = DEFAULT_RULES, margins: Optional[MarginSpec] = None,
              **kwargs) -> List[DetectedError]:
        if margins is None:
            return []

        issues = []
        for name, label, lower in MARGIN_FIELDS:
            actual = getattr(margins, name)
            required = getattr(self.standard, name)
            if abs(actual - required) > self.tolerance:
                issues.append(DetectedError(
                    kind=ErrorKind.FORMAT,
                    matched_text=label,
                    suggestion=(
                        f"{lower.capitalize()} harus {_fmt(required)} cm (saat ini {_fmt(actual)} cm). "
                        f"Atur {lower} ke {_fmt(required)} cm."
                    ),
                    start=0,
                    end=0,
                ))
        return issues
