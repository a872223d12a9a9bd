"""Shared test fixtures."""

from urllib.parse import unquote

import pytest

from x_cli.config import CREDENTIAL_SPECS
from x_cli.models import Credentials

ALL_ENV_VARS = [name for spec in CREDENTIAL_SPECS for name in spec.env_vars]


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        api_key="consumer-key",
        api_key_secret="consumer-secret",
        access_token="access-token",
        access_token_secret="access-token-secret",
    )


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No X_* variables and no stray .env file in the working directory."""
    for name in ALL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def credential_env(clean_env):
    """Environment with all four credentials under their primary names."""
    clean_env.setenv("X_API_KEY", "consumer-key")
    clean_env.setenv("X_API_KEY_SECRET", "consumer-secret")
    clean_env.setenv("X_ACCESS_TOKEN", "access-token")
    clean_env.setenv("X_ACCESS_TOKEN_SECRET", "access-token-secret")
    return clean_env


def parse_auth_header(header: str) -> dict[str, str]:
    """Split an ``OAuth k="v", ...`` header into decoded fields."""
    assert header.startswith("OAuth ")
    fields = {}
    for part in header[len("OAuth "):].split(", "):
        key, _, value = part.partition("=")
        fields[unquote(key)] = unquote(value.strip('"'))
    return fields
