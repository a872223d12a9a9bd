"""Tweet text checks performed before anything is sent."""

from .errors import ValidationError

MAX_TWEET_LENGTH = 280


def tweet_length(text: str) -> int:
    """Length in UTF-16 code units (astral characters count twice)."""
    return len(text.encode("utf-16-le")) // 2


def validate_tweet_text(text: str, usage: str | None = None) -> str:
    if not text or not text.strip():
        raise ValidationError("Tweet text is empty.", usage=usage)

    length = tweet_length(text)
    if length > MAX_TWEET_LENGTH:
        raise ValidationError(
            f"Tweet is {length} characters "
            f"(max {MAX_TWEET_LENGTH}, {length - MAX_TWEET_LENGTH} over)."
        )
    return text
