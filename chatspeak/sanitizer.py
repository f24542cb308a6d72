"""
Turns raw chat text into something safe to hand to the speech engine.
"""
import re

PLACEHOLDER = "No message provided"
DEFAULT_MAX_LENGTH = 200

URL_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*://\S*")
MENTION_RE = re.compile(r"@\w+")
UNSAFE_RE = re.compile(r"[^\w\s.,!?'\-]")
WHITESPACE_RE = re.compile(r"\s+")

def sanitize(raw: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """
    Strip URLs, @mentions and anything outside the speakable character set,
    then cut to max_length. Never returns an empty string.
    """
    if max_length < 1:
        raise ValueError("max_length must be at least 1")

    cleaned = URL_RE.sub("", raw or "")
    cleaned = MENTION_RE.sub("", cleaned)
    cleaned = UNSAFE_RE.sub("", cleaned)
    cleaned = WHITESPACE_RE.sub(" ", cleaned).strip()

    # hard cutoff, the cut may land on a space
    cleaned = cleaned[:max_length].rstrip()

    return cleaned or PLACEHOLDER[:max_length].rstrip()
