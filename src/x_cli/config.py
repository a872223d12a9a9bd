"""Credential resolution and config file handling.

Credentials come from the environment first, then from a ``.env`` file in
the working directory (never copied into ``os.environ``), then from the
config file written by ``x-cli setup``.

Config file location: ~/.config/x-cli/config.toml

Schema:
    [auth]
    api_key = "..."
    api_key_secret = "..."
    access_token = "..."
    access_token_secret = "..."

    [http]
    timeout = 30.0
"""

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import tomli_w
from dotenv import dotenv_values, find_dotenv

from .errors import ConfigurationError
from .models import Credentials

CONFIG_DIR = Path.home() / ".config" / "x-cli"
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class CredentialSpec:
    key: str  # Credentials attribute and [auth] key
    env_vars: tuple[str, ...]  # primary name first, then aliases

    @property
    def label(self) -> str:
        primary, *aliases = self.env_vars
        if aliases:
            return f"{primary} (or {', '.join(aliases)})"
        return primary


CREDENTIAL_SPECS = (
    CredentialSpec("api_key", ("X_API_KEY",)),
    CredentialSpec("api_key_secret", ("X_API_KEY_SECRET", "X_API_SECRET")),
    CredentialSpec("access_token", ("X_ACCESS_TOKEN",)),
    CredentialSpec("access_token_secret", ("X_ACCESS_TOKEN_SECRET", "X_ACCESS_SECRET")),
)


@dataclass
class AppConfig:
    auth: dict[str, str] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT


def load_config(config_path: Path = CONFIG_FILE) -> AppConfig:
    """Load config from TOML file. A missing file yields an empty config."""
    if not config_path.exists():
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid config file {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read config file {config_path}: {e.strerror}"
        ) from e

    auth_data = data.get("auth", {})
    http_data = data.get("http", {})

    timeout = http_data.get("timeout", DEFAULT_TIMEOUT)
    # bool is an int subclass; reject it along with strings
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigurationError(
            f"Invalid config file {config_path}: [http] timeout must be a "
            f"positive number of seconds, got {timeout!r}"
        )

    return AppConfig(
        auth={
            spec.key: str(auth_data[spec.key])
            for spec in CREDENTIAL_SPECS
            if auth_data.get(spec.key)
        },
        timeout=float(timeout),
    )


def save_config(config: AppConfig, config_path: Path = CONFIG_FILE) -> None:
    """Write config to TOML file with restricted permissions."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "auth": dict(config.auth),
        "http": {"timeout": config.timeout},
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)

    # File contains secrets
    os.chmod(config_path, 0o600)


def config_exists(config_path: Path = CONFIG_FILE) -> bool:
    return config_path.exists()


def load_environment(dotenv_path: str | Path | None = None) -> dict[str, str]:
    """Merge ``.env`` values under the real environment.

    Exported variables win over ``.env`` entries.
    """
    if dotenv_path is None:
        dotenv_path = find_dotenv(usecwd=True)
    values: dict[str, str] = {}
    if dotenv_path:
        try:
            entries = dotenv_values(dotenv_path)
        except OSError as e:
            raise ConfigurationError(f"Cannot read {dotenv_path}: {e.strerror}") from e
        for key, value in entries.items():
            if value is not None:
                values[key] = value
    values.update(os.environ)
    return values


def lookup_credential(
    spec: CredentialSpec, env: Mapping[str, str], config: AppConfig
) -> tuple[str | None, str | None]:
    """Return ``(value, source)`` for one credential, or ``(None, None)``."""
    for name in spec.env_vars:
        value = env.get(name)
        if value:
            return value, name
    value = config.auth.get(spec.key)
    if value:
        return value, "config file"
    return None, None


def resolve_credentials(
    env: Mapping[str, str] | None = None,
    config: AppConfig | None = None,
) -> Credentials:
    """Build Credentials once, listing every missing item if any are absent."""
    env = os.environ if env is None else env
    config = config or AppConfig()

    values: dict[str, str] = {}
    missing: list[str] = []
    for spec in CREDENTIAL_SPECS:
        value, _ = lookup_credential(spec, env, config)
        if value:
            values[spec.key] = value
        else:
            missing.append(spec.label)

    if missing:
        lines = ["Missing required environment variables:"]
        lines.extend(f"  - {label}" for label in missing)
        lines.append("")
        lines.append("Set them in .env, export them to your shell, or run `x-cli setup`.")
        raise ConfigurationError("\n".join(lines), missing=missing)

    return Credentials(**values)
