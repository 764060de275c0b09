"""
Tests for the tokenizer and span tracker.
"""

from tokenizer import Token, TokenKind, tokenize, word_tokens, fold_case


class TestTokenize:
    """Offsets and token kinds."""

    def test_offsets_cover_text(self):
        text = "Saya pergi, ke pasar."
        tokens = tokenize(text)

        assert ''.join(t.text for t in tokens) == text
        position = 0
        for token in tokens:
            assert token.start == position
            assert text[token.start:token.end] == token.text
            position = token.end
        assert position == len(text)

    def test_token_kinds(self):
        tokens = tokenize("Saya pergi, ke pasar.")
        kinds = [(t.text, t.kind) for t in tokens]

        assert kinds[0] == ("Saya", TokenKind.WORD)
        assert kinds[1] == (" ", TokenKind.WHITESPACE)
        assert (",", TokenKind.PUNCTUATION) in kinds
        assert kinds[-1] == (".", TokenKind.PUNCTUATION)

    def test_known_offsets(self):
        tokens = tokenize("Saya pergi, ke pasar.")
        pasar = [t for t in tokens if t.text == "pasar"][0]
        assert (pasar.start, pasar.end) == (15, 20)

    def test_empty_text(self):
        assert tokenize("") == []

    def test_whitespace_runs_are_one_token(self):
        tokens = tokenize("a \n\t b")
        assert [t.text for t in tokens] == ["a", " \n\t ", "b"]

    def test_word_tokens_skip_separators(self):
        words = word_tokens(tokenize("Halo,  dunia!"))
        assert [w.text for w in words] == ["Halo", "dunia"]


class TestTokenProperties:
    """Derived token attributes used by the checkers."""

    def test_normalized(self):
        assert Token("SaYa", TokenKind.WORD, 0, 4).normalized == "saya"

    def test_numeric(self):
        assert Token("2024", TokenKind.WORD, 0, 4).is_numeric_or_punct
        assert Token("(1-2)", TokenKind.WORD, 0, 5).is_numeric_or_punct
        assert not Token("abc1", TokenKind.WORD, 0, 4).is_numeric_or_punct

    def test_has_digit(self):
        assert Token("abc1", TokenKind.WORD, 0, 4).has_digit
        assert not Token("abc", TokenKind.WORD, 0, 3).has_digit

    def test_starts_upper(self):
        assert Token("Budi", TokenKind.WORD, 0, 4).starts_upper
        assert not Token("budi", TokenKind.WORD, 0, 4).starts_upper


class TestFoldCase:
    """Case folding keeps offsets valid."""

    def test_lowercases(self):
        assert fold_case("Ke SANA") == "ke sana"

    def test_length_preserved(self):
        text = "İstanbul dan Jakarta"
        assert len(fold_case(text)) == len(text)
