"""
Tests for the KBBI lexicon store and its background loader.
"""

import threading
from unittest.mock import patch, MagicMock

import requests

from lexicon import Lexicon, LexiconStatus, LexiconProvider, parse_word_list, load_lexicon


class TestParseWordList:

    def test_filters_and_normalizes(self):
        content = "Saya\n\n(ark)\nkupu-kupu\na\n  Rumah \n"
        assert parse_word_list(content) == frozenset({"saya", "rumah"})

    def test_empty(self):
        assert parse_word_list("") == frozenset()


class TestLexicon:

    def test_membership_case_insensitive(self):
        lexicon = Lexicon(["Rumah"])
        assert lexicon.is_known("RUMAH")
        assert "rumah" in lexicon
        assert 42 not in lexicon

    def test_empty_states(self):
        assert Lexicon.not_loaded().is_empty
        assert Lexicon.not_loaded().status is LexiconStatus.NOT_LOADED
        assert Lexicon.failed().status is LexiconStatus.FAILED
        assert len(Lexicon.failed()) == 0

    def test_from_text(self):
        lexicon = Lexicon.from_text("saya\npergi\n")
        assert lexicon.status is LexiconStatus.READY
        assert len(lexicon) == 2

    def test_suffix_stripped_when_root_long_enough(self):
        lexicon = Lexicon(["rumah", "pekerjaan"])
        assert lexicon.is_known_with_suffix("rumahku")
        assert lexicon.is_known_with_suffix("pekerjaannya")

    def test_short_roots_not_stripped(self):
        lexicon = Lexicon(["buku"])
        assert not lexicon.is_known_with_suffix("bukunya")
        assert not lexicon.is_known_with_suffix("bukuku")

    def test_only_one_suffix_removed(self):
        lexicon = Lexicon(["main"])
        assert not lexicon.is_known_with_suffix("mainkannya")

    def test_words_near_length(self):
        lexicon = Lexicon(["ab", "abcd", "abcdefgh"])
        assert list(lexicon.words_near_length(3, spread=1)) == ["ab", "abcd"]


class TestLoadLexicon:

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "kbbi.txt"
        path.write_text("\ufeffsaya\npergi\n", encoding="utf-8")

        lexicon = load_lexicon(path=path)

        assert lexicon.status is LexiconStatus.READY
        assert lexicon.words == frozenset({"saya", "pergi"})

    def test_missing_file_fails_open(self, tmp_path):
        lexicon = load_lexicon(path=tmp_path / "missing.txt")
        assert lexicon.status is LexiconStatus.FAILED
        assert lexicon.is_empty

    def test_no_source(self):
        assert load_lexicon().status is LexiconStatus.FAILED

    def test_load_from_url(self):
        response = MagicMock()
        response.content = "saya\nrumah\n".encode("utf-8")
        with patch("lexicon.requests.get", return_value=response) as get:
            lexicon = load_lexicon(url="https://example.invalid/kbbi.txt", timeout=3)

        get.assert_called_once_with("https://example.invalid/kbbi.txt", timeout=3)
        assert lexicon.words == frozenset({"saya", "rumah"})

    def test_url_error_fails_open(self):
        with patch("lexicon.requests.get", side_effect=requests.ConnectionError("down")):
            lexicon = load_lexicon(url="https://example.invalid/kbbi.txt")
        assert lexicon.status is LexiconStatus.FAILED


class TestLexiconProvider:

    def test_snapshot_before_load_is_not_loaded(self):
        release = threading.Event()

        def slow_loader(path=None, url=None, timeout=None):
            release.wait(5)
            return Lexicon(["saya"])

        provider = LexiconProvider(loader=slow_loader).start()
        try:
            assert provider.snapshot().status is LexiconStatus.NOT_LOADED
            assert not provider.is_ready
        finally:
            release.set()
        assert provider.wait(5)
        assert provider.snapshot().status is LexiconStatus.READY

    def test_loader_crash_yields_failed(self):
        def broken_loader(path=None, url=None, timeout=None):
            raise RuntimeError("boom")

        provider = LexiconProvider(loader=broken_loader).start()
        assert provider.wait(5)
        assert provider.snapshot().status is LexiconStatus.FAILED

    def test_start_is_idempotent(self):
        calls = []

        def loader(path=None, url=None, timeout=None):
            calls.append(path)
            return Lexicon(["saya"])

        provider = LexiconProvider(path="kbbi.txt", loader=loader)
        provider.start()
        provider.wait(5)
        provider.start()
        assert calls == ["kbbi.txt"]

    def test_preloaded(self):
        provider = LexiconProvider.preloaded(Lexicon(["saya"]))
        assert provider.is_ready
        assert provider.start().snapshot().is_known("saya")
