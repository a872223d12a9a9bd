"""OAuth 1.0a request signing (HMAC-SHA1).

The access token and secret are pre-provisioned, so only the per-request
signature is computed here; there is no token dance.

Steps, following RFC 5849 section 3.4:
    1. collect oauth_* parameters plus any form/query parameters
    2. percent-encode keys and values (RFC 3986 unreserved set only)
    3. sort by encoded key, then encoded value, and join as k=v&k=v
    4. base string = METHOD&enc(base URL)&enc(parameter string)
    5. key = enc(consumer secret)&enc(token secret)
    6. signature = base64(HMAC-SHA1(key, base string))

JSON request bodies are never part of the signature.
"""

import base64
import hashlib
import hmac
import logging
import secrets
import time
from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

from .models import Credentials

logger = logging.getLogger(__name__)

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"

_DEFAULT_PORTS = {"http": 80, "https": 443}


def percent_encode(value: str) -> str:
    """Encode everything except ALPHA / DIGIT / "-" / "." / "_" / "~"."""
    return quote(str(value), safe="~")


def generate_nonce() -> str:
    return secrets.token_hex(16)


def base_string_uri(url: str) -> str:
    """Lowercase scheme and host, drop default port, query and fragment."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if parts.port and parts.port != _DEFAULT_PORTS.get(scheme):
        host = f"{host}:{parts.port}"
    return urlunsplit((scheme, host, parts.path or "/", "", ""))


def normalize_parameters(params: list[tuple[str, str]]) -> str:
    """Encode, sort and join parameters into the signature parameter string."""
    encoded = sorted(
        (percent_encode(key), percent_encode(value)) for key, value in params
    )
    return "&".join(f"{key}={value}" for key, value in encoded)


def signature_base_string(
    method: str, url: str, params: list[tuple[str, str]]
) -> str:
    # Query parameters in the URL are signed alongside the explicit ones
    query = parse_qsl(urlsplit(url).query, keep_blank_values=True)
    return "&".join(
        [
            method.upper(),
            percent_encode(base_string_uri(url)),
            percent_encode(normalize_parameters(list(params) + query)),
        ]
    )


def hmac_sha1_signature(
    base_string: str, consumer_secret: str, token_secret: str
) -> str:
    key = f"{percent_encode(consumer_secret)}&{percent_encode(token_secret)}"
    digest = hmac.new(
        key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha1
    ).digest()
    return base64.b64encode(digest).decode("ascii")


class OAuth1Signer:
    """Produce ``Authorization`` header values for a fixed credential set."""

    def __init__(self, credentials: Credentials):
        self._credentials = credentials

    def oauth_params(self, nonce: str, timestamp: int) -> dict[str, str]:
        return {
            "oauth_consumer_key": self._credentials.api_key,
            "oauth_nonce": nonce,
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": str(timestamp),
            "oauth_token": self._credentials.access_token,
            "oauth_version": OAUTH_VERSION,
        }

    def sign(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
        *,
        nonce: str | None = None,
        timestamp: int | None = None,
    ) -> str:
        """Return the ``Authorization`` header for one request.

        Args:
            method: HTTP method.
            url: Full request URL; any query string is signed too.
            params: Form parameters carried in the request body.
            nonce: Fixed nonce (a fresh random one by default).
            timestamp: Fixed Unix timestamp (the current time by default).
        """
        oauth = self.oauth_params(
            nonce if nonce is not None else generate_nonce(),
            timestamp if timestamp is not None else int(time.time()),
        )
        all_params = list(oauth.items()) + list((params or {}).items())

        base_string = signature_base_string(method, url, all_params)
        logger.debug(
            "Signing %s %s (%d form params)", method.upper(), url, len(params or {})
        )

        oauth["oauth_signature"] = hmac_sha1_signature(
            base_string,
            self._credentials.api_key_secret,
            self._credentials.access_token_secret,
        )

        fields = ", ".join(
            f'{percent_encode(key)}="{percent_encode(value)}"'
            for key, value in sorted(oauth.items())
        )
        return f"OAuth {fields}"
