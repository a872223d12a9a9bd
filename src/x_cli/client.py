"""X API v2 client for creating and deleting posts and uploading media.

Every request carries an OAuth 1.0a ``Authorization`` header computed by
:class:`~x_cli.oauth.OAuth1Signer` from the user's pre-provisioned access
token. Base URLs can be overridden with environment variables, mainly for
pointing at a local mock server:
    X_API_BASE_URL
    X_UPLOAD_URL
"""

import logging
import os
from pathlib import Path

import httpx

from .config import DEFAULT_TIMEOUT
from .errors import ApiError, NetworkError
from .media import encode_media_file, resolve_media_path
from .models import Credentials, DeleteResult, TweetRequest, TweetResult, build_tweet_body
from .oauth import OAuth1Signer

logger = logging.getLogger(__name__)

API_BASE_URL = os.environ.get("X_API_BASE_URL", "https://api.twitter.com/2")
UPLOAD_URL = os.environ.get(
    "X_UPLOAD_URL", "https://upload.twitter.com/1.1/media/upload.json"
)


class XClient:
    """Signed client for the four supported operations."""

    def __init__(
        self,
        credentials: Credentials,
        timeout: float = DEFAULT_TIMEOUT,
        api_base_url: str = API_BASE_URL,
        upload_url: str = UPLOAD_URL,
        http_client: httpx.Client | None = None,
    ):
        self._signer = OAuth1Signer(credentials)
        self._tweets_url = f"{api_base_url.rstrip('/')}/tweets"
        self._upload_url = upload_url
        self._client = http_client or httpx.Client(
            headers={"User-Agent": "x-cli/0.1"},
            timeout=timeout,
        )

    # ── Posts ──────────────────────────────────────────────────────

    def create_tweet(self, request: TweetRequest) -> TweetResult:
        """Create a post, quote or reply.

        Media must already be uploaded; ``request.media_ids`` are sent as-is.
        """
        body = build_tweet_body(request)
        logger.info(
            "Creating %s (%d media)",
            type(request).__name__.lower(),
            len(request.media_ids),
        )

        # The JSON body is not part of the signature, only method + URL
        response = self._send(
            "POST",
            self._tweets_url,
            json=body,
            headers={
                "Authorization": self._signer.sign("POST", self._tweets_url),
                "Content-Type": "application/json",
            },
        )
        payload = self._check(response)
        try:
            tweet_id = str(payload["data"]["id"])
        except (KeyError, TypeError) as e:
            raise ApiError(response.status_code, payload) from e
        return TweetResult(tweet_id=tweet_id, payload=payload)

    def delete_tweet(self, tweet_id: str) -> DeleteResult:
        """Delete a post.

        A 2xx answer without ``data.deleted == true`` is returned with
        ``deleted=False`` rather than raised.
        """
        url = f"{self._tweets_url}/{tweet_id}"
        logger.info("Deleting tweet %s", tweet_id)

        response = self._send(
            "DELETE", url, headers={"Authorization": self._signer.sign("DELETE", url)}
        )
        payload = self._check(response)

        data = payload.get("data") if isinstance(payload, dict) else None
        deleted = bool(data.get("deleted")) if isinstance(data, dict) else False
        if not deleted:
            logger.info("Delete of %s was accepted but not confirmed", tweet_id)
        return DeleteResult(tweet_id=tweet_id, deleted=deleted, payload=payload)

    # ── Media ──────────────────────────────────────────────────────

    def upload_media(self, path: str | Path) -> str:
        """Upload one file and return its ``media_id_string``.

        OSError from reading the file propagates unchanged.
        """
        media_path = resolve_media_path(path)
        form = {"media_data": encode_media_file(media_path)}
        logger.info("Uploading %s", media_path)

        # Form-encoded body: media_data is covered by the signature
        response = self._send(
            "POST",
            self._upload_url,
            data=form,
            headers={"Authorization": self._signer.sign("POST", self._upload_url, form)},
        )
        payload = self._check(response)
        try:
            media_id = str(payload["media_id_string"])
        except (KeyError, TypeError) as e:
            raise ApiError(response.status_code, payload) from e
        logger.debug("Uploaded %s as media %s", media_path.name, media_id)
        return media_id

    def upload_all_media(self, paths: list[str | Path]) -> list[str]:
        """Upload files one after another, in order.

        The first failure stops the remaining uploads.
        """
        media_ids: list[str] = []
        for index, path in enumerate(paths, start=1):
            logger.info("Uploading media %d/%d", index, len(paths))
            media_ids.append(self.upload_media(path))
        return media_ids

    # ── Helpers ────────────────────────────────────────────────────

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return self._client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

    @staticmethod
    def _check(response: httpx.Response) -> dict:
        """Return the parsed JSON body.

        Raises ApiError on non-2xx, and on a 2xx body that is not JSON.
        """
        if not response.is_success:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            logger.debug("API error %d: %s", response.status_code, body)
            raise ApiError(response.status_code, body)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            logger.debug("Unparseable %d response: %s", response.status_code, response.text)
            raise ApiError(response.status_code, response.text) from e

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
