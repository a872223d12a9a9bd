"""Exception hierarchy for x-cli.

Library modules raise these; only the CLI layer turns them into messages
and exit codes.
"""

import json


class XCliError(Exception):
    """Base class for all x-cli errors."""


class ConfigurationError(XCliError):
    """Raised when credentials are missing or the config file is unusable."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = list(missing or [])


class ValidationError(XCliError):
    """Raised when user input is rejected before any request is made."""

    def __init__(self, message: str, usage: str | None = None):
        super().__init__(message)
        self.usage = usage


class ApiError(XCliError):
    """Raised when the X API answers with a non-2xx status.

    ``body`` is the upstream error payload exactly as received: the parsed
    JSON document, or the raw text when the response is not JSON.
    """

    def __init__(self, status_code: int, body: object):
        self.status_code = status_code
        self.body = body
        if isinstance(body, str):
            rendered = body
        else:
            rendered = json.dumps(body, indent=2, ensure_ascii=False)
        super().__init__(f"X API Error ({status_code}): {rendered}")


class NetworkError(XCliError):
    """Raised when no HTTP response was received at all."""
