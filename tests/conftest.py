"""
Shared fixtures for the Resik Bahasa test suite.
"""

import pytest

from lexicon import Lexicon


@pytest.fixture
def small_lexicon() -> Lexicon:
    """A tiny KBBI stand-in."""
    return Lexicon(["saya", "pergi", "rumah", "pasar", "pekerjaan", "kami", "kemarin", "besar"])

