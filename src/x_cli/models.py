"""Data models for credentials, tweet requests and API results."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Credentials:
    api_key: str  # consumer key
    api_key_secret: str = field(repr=False)  # consumer secret
    access_token: str
    access_token_secret: str = field(repr=False)


@dataclass(frozen=True)
class Post:
    text: str
    media_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Quote:
    text: str
    quote_tweet_id: str
    media_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Reply:
    text: str
    in_reply_to_tweet_id: str
    media_ids: list[str] = field(default_factory=list)


TweetRequest = Post | Quote | Reply


@dataclass
class TweetResult:
    tweet_id: str
    payload: dict  # full response body, {"data": {"id": ..., "text": ...}}


@dataclass
class DeleteResult:
    tweet_id: str
    deleted: bool  # False when the API accepted the call but did not confirm
    payload: dict


def build_tweet_body(request: TweetRequest) -> dict:
    """Serialize a tweet request into the JSON body for POST /2/tweets.

    Each variant contributes only its own target field, so a body can never
    carry both a quote target and a reply target.
    """
    if not isinstance(request, (Post, Quote, Reply)):
        raise TypeError(f"Unsupported tweet request: {type(request).__name__}")

    body: dict = {"text": request.text}
    if isinstance(request, Quote):
        body["quote_tweet_id"] = request.quote_tweet_id
    elif isinstance(request, Reply):
        body["reply"] = {"in_reply_to_tweet_id": request.in_reply_to_tweet_id}

    if request.media_ids:
        body["media"] = {"media_ids": list(request.media_ids)}

    return body
