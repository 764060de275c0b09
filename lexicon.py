#!/usr/bin/env python3
"""
KBBI Lexicon Store
==================
Loads the baku word list once and serves fast membership tests.

The lexicon is an immutable value. A lexicon that has not finished loading,
or whose source could not be read, is simply empty and carries a status;
checkers treat any empty lexicon as "dictionary lookup disabled".
"""

import threading
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Optional, Tuple, Union

import requests

from config_logging import get_logger, DEFAULT_LEXICON_TIMEOUT
from rule_tables import VALID_SUFFIXES

__version__ = "1.2.0"

_logger = get_logger('lexicon')


class LexiconStatus(Enum):
    """Lifecycle state of a lexicon snapshot."""
    NOT_LOADED = "not_loaded"
    READY = "ready"
    FAILED = "failed"


def parse_word_list(content: str) -> FrozenSet[str]:
    """
    Parse a newline-delimited word list.

    Lines are trimmed and lowercased. Empty lines, annotation lines starting
    with "(", hyphenated entries and single characters are dropped.
    """
    words = set()
    for line in content.splitlines():
        word = line.strip().lower()
        if not word or word.startswith('(') or '-' in word or len(word) <= 1:
            continue
        words.add(word)
    return frozenset(words)


class Lexicon:
    """Immutable set of baku words with a load status."""

    __slots__ = ('_words', '_by_length', '_status')

    def __init__(self, words: Iterable[str] = (), status: LexiconStatus = LexiconStatus.READY):
        self._words: FrozenSet[str] = frozenset(w.lower() for w in words)
        self._status = status
        by_length: Dict[int, list] = {}
        for word in self._words:
            by_length.setdefault(len(word), []).append(word)
        self._by_length: Dict[int, Tuple[str, ...]] = {
            length: tuple(sorted(bucket)) for length, bucket in by_length.items()
        }

    @classmethod
    def not_loaded(cls) -> 'Lexicon':
        return cls((), LexiconStatus.NOT_LOADED)

    @classmethod
    def failed(cls) -> 'Lexicon':
        return cls((), LexiconStatus.FAILED)

    @classmethod
    def from_text(cls, content: str) -> 'Lexicon':
        return cls(parse_word_list(content), LexiconStatus.READY)

    @property
    def status(self) -> LexiconStatus:
        return self._status

    @property
    def is_empty(self) -> bool:
        return not self._words

    @property
    def words(self) -> FrozenSet[str]:
        return self._words

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.lower() in self._words

    def __repr__(self) -> str:
        return f"Lexicon(status={self._status.value}, size={len(self._words)})"

    def is_known(self, word: str) -> bool:
        """Exact case-insensitive membership."""
        return word.lower() in self._words

    def is_known_with_suffix(self, word: str, suffixes: Iterable[str] = VALID_SUFFIXES) -> bool:
        """
        Check membership, allowing one trailing suffix to be stripped.

        The root left after stripping must be longer than the suffix plus
        two characters. Only a single suffix is removed.
        """
        word = word.lower()
        if word in self._words:
            return True

        for suffix in suffixes:
            if not word.endswith(suffix):
                continue
            root = word[:-len(suffix)]
            if len(root) > len(suffix) + 2 and root in self._words:
                return True
        return False

    def words_near_length(self, length: int, spread: int = 2) -> Iterable[str]:
        """Yield words whose length is within `spread` of `length`, sorted per length."""
        for size in range(max(1, length - spread), length + spread + 1):
            yield from self._by_length.get(size, ())


def load_lexicon(
    path: Optional[Union[str, Path]] = None,
    url: Optional[str] = None,
    timeout: int = DEFAULT_LEXICON_TIMEOUT,
) -> Lexicon:
    """
    Load the word list from a URL or a local file.

    Never raises: any failure is logged and yields an empty lexicon with
    status FAILED.
    """
    source = url or (str(path) if path else None)
    if not source:
        _logger.warning("No lexicon source configured; dictionary lookup disabled")
        return Lexicon.failed()

    try:
        with _logger.log_operation('lexicon_load', source=source):
            if url:
                response = requests.get(url, timeout=timeout)
                response.raise_for_status()
                content = response.content.decode('utf-8-sig')
            else:
                content = Path(path).read_text(encoding='utf-8-sig')
            lexicon = Lexicon.from_text(content)
    except (OSError, UnicodeDecodeError, requests.RequestException) as e:
        _logger.error(f"Error loading KBBI word list: {e}", source=source)
        return Lexicon.failed()

    _logger.info("Lexicon loaded", source=source, size=len(lexicon))
    return lexicon


class LexiconProvider:
    """
    Owns the one-time background load of the process-wide lexicon.

    snapshot() never blocks: until the load finishes it returns an empty
    NOT_LOADED lexicon, so checks issued at start-up run fail-open.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, url: Optional[str] = None,
                 timeout: int = DEFAULT_LEXICON_TIMEOUT, loader=None):
        self.path = path
        self.url = url
        self.timeout = timeout
        self._loader = loader or load_lexicon
        self._current = Lexicon.not_loaded()
        self._done = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def from_config(cls, config) -> 'LexiconProvider':
        return cls(path=config.lexicon_path, url=config.lexicon_url or None,
                   timeout=config.lexicon_timeout)

    @classmethod
    def preloaded(cls, lexicon: Lexicon) -> 'LexiconProvider':
        """Provider that already holds a lexicon (no background load)."""
        provider = cls()
        provider._current = lexicon
        provider._done.set()
        return provider

    def start(self) -> 'LexiconProvider':
        """Start the background load. Calling it again is a no-op."""
        if self._thread is not None or self._done.is_set():
            return self
        self._thread = threading.Thread(target=self._run, name='lexicon-loader', daemon=True)
        self._thread.start()
        return self

    def _run(self):
        try:
            lexicon = self._loader(path=self.path, url=self.url, timeout=self.timeout)
        except Exception as e:
            _logger.exception(f"Lexicon loader crashed: {e}")
            lexicon = Lexicon.failed()
        self._current = lexicon
        self._done.set()

    def snapshot(self) -> Lexicon:
        return self._current

    @property
    def is_ready(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the load finishes; returns False on timeout."""
        return self._done.wait(timeout)
