"""Tests for segment()."""

import pytest

from relay.delivery import segment


class TestSegmentSentences:
    """Tests for sentence splitting."""

    def test_empty_text(self):
        """Test that empty input yields no parts."""
        assert segment("") == []

    def test_single_sentence_without_terminator(self):
        """Test that an unterminated text is one part."""
        assert segment("hello there") == ["hello there"]

    def test_splits_on_terminators(self):
        """Test splitting on '.', '?' and '!'."""
        parts = segment("Hi! How are you? I am fine.")

        assert parts == ["Hi!", " How are you?", " I am fine."]

    def test_terminator_runs_stay_together(self):
        """Test that '?!' and '...' stay attached to their sentence."""
        parts = segment("Really?! Wait... ok")

        assert parts == ["Really?!", " Wait...", " ok"]

    def test_trailing_fragment_is_own_part(self):
        """Test that text after the last terminator is kept."""
        parts = segment("Done. and then")

        assert parts == ["Done.", " and then"]

    def test_closing_quote_attaches_to_sentence(self):
        """Test that a quote right after the terminator stays with it."""
        parts = segment("It's over.' Next")

        assert parts[0] == "It's over.'"

    def test_leading_terminators_are_kept(self):
        """Test that text starting with terminators loses nothing."""
        text = "...so. yes"

        assert "".join(segment(text)) == text

    def test_newlines_are_preserved(self):
        """Test that multi-line answers round-trip."""
        text = "Line one.\nLine two!\n\nBye"

        assert "".join(segment(text)) == text


class TestSegmentAtomicSpans:
    """Tests for URL, email and quote protection."""

    def test_url_and_email_example(self):
        """Test the URL + email example splits into two intact parts."""
        text = "Visit https://a.b/x?y=1 now. Email me at a@b.com please."

        parts = segment(text)

        assert parts == ["Visit https://a.b/x?y=1 now.", " Email me at a@b.com please."]

    def test_www_url_not_split(self):
        """Test that a www. URL containing dots stays whole."""
        parts = segment("Go to www.example.com/a.b today. Thanks")

        assert parts[0] == "Go to www.example.com/a.b today."
        assert parts[1] == " Thanks"

    def test_double_quoted_span_not_split(self):
        """Test that sentence terminators inside quotes do not split."""
        parts = segment('He said "Stop. Now!" and left. Bye.')

        assert parts == ['He said "Stop. Now!" and left.', " Bye."]

    def test_single_quoted_span_not_split(self):
        """Test single-quoted spans stay whole."""
        parts = segment("Type 'git status. please' then wait. Ok.")

        assert parts[0] == "Type 'git status. please' then wait."

    def test_apostrophes_do_not_open_quotes(self):
        """Test that contractions are not treated as quotes."""
        parts = segment("Don't worry. It's fine.")

        assert parts == ["Don't worry.", " It's fine."]

    def test_round_trip_with_all_span_kinds(self):
        """Test that joining parts reproduces the text and spans stay intact."""
        url = "https://example.com/path?q=1.5&x=!"
        email = "first.last@mail.example.org"
        quote = '"wait. what?"'
        text = (
            f"See {url} for details. Write to {email} any time! "
            f"She asked {quote} twice. End"
        )

        parts = segment(text)

        assert "".join(parts) == text
        for span in (url, email, quote):
            assert sum(span in part for part in parts) == 1

    def test_many_spans_stay_in_their_parts(self):
        """Test that span 1 is not confused with span 10 and up."""
        urls = [f"https://x.io/{i}" for i in range(12)]
        text = " ".join(f"Link {u} here." for u in urls)

        parts = segment(text)

        assert [p.strip() for p in parts] == [f"Link {u} here." for u in urls]

    @pytest.mark.parametrize(
        "text",
        [
            "plain",
            "a.b.c",
            "?",
            "Hi.   ",
            "Ask 'why?' and \"how!\" ok.",
            "mail x@y.z. now",
        ],
    )
    def test_round_trip(self, text):
        """Test that parts always concatenate back to the input."""
        assert "".join(segment(text)) == text

    def test_is_pure(self):
        """Test that repeated calls give the same result."""
        text = "One. Two https://t.co/x. Three"

        assert segment(text) == segment(text)

    @pytest.mark.parametrize(
        "text",
        [
            "Code \ue0000\ue001 here. See https://a.b/x now.",
            "Code \ue0009\ue001 here. See https://a.b/x now.",
            "Code \ue000\ue001 and {0} marks. Mail a@b.com ok.",
        ],
    )
    def test_private_use_characters_round_trip(self, text):
        """Test that private-use characters in the answer are kept as plain text."""
        parts = segment(text)

        assert "".join(parts) == text
        assert parts[0].startswith("Code \ue000")
        assert sum("https://a.b/x" in part for part in parts) == text.count("https://a.b/x")
