"""Turn user-supplied tweet references into bare tweet IDs."""

import re

STATUS_RE = re.compile(r"/status(?:es)?/(\d+)")


def resolve_tweet_id(value: str) -> str:
    """Extract the ID from a permalink, or return the input as-is.

    Accepts e.g. ``https://x.com/user/status/1234567890`` or
    ``1234567890``. Nothing is validated, trimmed or fetched.
    """
    match = STATUS_RE.search(value)
    if match:
        return match.group(1)
    return value


def tweet_url(tweet_id: str) -> str:
    return f"https://x.com/i/status/{tweet_id}"
