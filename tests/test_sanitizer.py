import pytest

from chatspeak.sanitizer import PLACEHOLDER, sanitize

SAMPLES = [
    "",
    "   ",
    "http://a.com",
    "@user only mentions",
    "hello world",
    "check http://evil.com @spammer !!!",
    "ftp://files.example.org/x.zip then words",
    "emoji 🎉🎉 and <b>tags</b> & stuff",
    "a" * 500,
    "word " * 60,
    "tab\tand\nnewline   spaced",
    "@@double @ lonely",
    "don't-stop, okay? yes!",
    "日本語のテキスト",
]

def test_scenario_strips_url_and_mention():
    assert sanitize("check http://evil.com @spammer !!!") == "check !!!"

def test_keeps_allowed_punctuation():
    assert sanitize("don't-stop, okay? yes!") == "don't-stop, okay? yes!"

def test_removes_special_characters():
    assert sanitize("emoji 🎉🎉 and <b>tags</b> & stuff") == "emoji and btagsb stuff"

@pytest.mark.parametrize("raw", ["", "   ", "http://a.com", "@user", "🎉🎉🎉", "<>{}[]"])
def test_empty_result_becomes_placeholder(raw):
    assert sanitize(raw) == PLACEHOLDER

def test_only_mentions_leaves_remaining_words():
    assert sanitize("@user only mentions") == "only mentions"

@pytest.mark.parametrize("raw", SAMPLES)
def test_idempotent(raw):
    once = sanitize(raw)
    assert sanitize(once) == once

@pytest.mark.parametrize("raw", SAMPLES)
@pytest.mark.parametrize("max_length", [1, 3, 10, 200])
def test_length_bound_and_never_empty(raw, max_length):
    out = sanitize(raw, max_length)
    assert out
    assert len(out) <= max_length
    assert sanitize(out, max_length) == out

def test_hard_cutoff_default_200():
    assert sanitize("a" * 500) == "a" * 200

def test_cutoff_does_not_leave_trailing_space():
    out = sanitize("abcd efgh", max_length=5)
    assert out == "abcd"

def test_rejects_non_positive_max_length():
    with pytest.raises(ValueError):
        sanitize("hi", max_length=0)
