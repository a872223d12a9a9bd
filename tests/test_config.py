"""Tests for credential resolution and the config file."""

import os
import stat

import pytest

from x_cli.config import (
    AppConfig,
    load_config,
    load_environment,
    resolve_credentials,
    save_config,
)
from x_cli.errors import ConfigurationError

FULL_ENV = {
    "X_API_KEY": "k",
    "X_API_KEY_SECRET": "ks",
    "X_ACCESS_TOKEN": "t",
    "X_ACCESS_TOKEN_SECRET": "ts",
}

FULL_AUTH = {
    "api_key": "file-k",
    "api_key_secret": "file-ks",
    "access_token": "file-t",
    "access_token_secret": "file-ts",
}


class TestResolveCredentials:
    def test_primary_names(self):
        creds = resolve_credentials(env=FULL_ENV)
        assert creds.api_key == "k"
        assert creds.api_key_secret == "ks"
        assert creds.access_token == "t"
        assert creds.access_token_secret == "ts"

    def test_aliases(self):
        env = {
            "X_API_KEY": "k",
            "X_API_SECRET": "alias-ks",
            "X_ACCESS_TOKEN": "t",
            "X_ACCESS_SECRET": "alias-ts",
        }
        creds = resolve_credentials(env=env)
        assert creds.api_key_secret == "alias-ks"
        assert creds.access_token_secret == "alias-ts"

    def test_primary_wins_over_alias(self):
        env = {**FULL_ENV, "X_API_SECRET": "alias"}
        assert resolve_credentials(env=env).api_key_secret == "ks"

    def test_all_missing_listed_at_once(self):
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_credentials(env={})

        err = exc_info.value
        assert err.missing == [
            "X_API_KEY",
            "X_API_KEY_SECRET (or X_API_SECRET)",
            "X_ACCESS_TOKEN",
            "X_ACCESS_TOKEN_SECRET (or X_ACCESS_SECRET)",
        ]
        for label in err.missing:
            assert f"  - {label}" in str(err)

    def test_partial_missing(self):
        env = {"X_API_KEY": "k", "X_ACCESS_TOKEN": "t"}
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_credentials(env=env)
        assert len(exc_info.value.missing) == 2

    def test_empty_value_counts_as_missing(self):
        env = {**FULL_ENV, "X_ACCESS_TOKEN": ""}
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_credentials(env=env)
        assert exc_info.value.missing == ["X_ACCESS_TOKEN"]

    def test_config_file_fallback(self):
        creds = resolve_credentials(env={}, config=AppConfig(auth=FULL_AUTH))
        assert creds.api_key == "file-k"

    def test_env_wins_over_config_file(self):
        env = {"X_API_KEY": "env-k"}
        creds = resolve_credentials(env=env, config=AppConfig(auth=FULL_AUTH))
        assert creds.api_key == "env-k"
        assert creds.access_token == "file-t"


class TestLoadEnvironment:
    def test_dotenv_file(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("X_API_KEY=from-dotenv\nX_API_SECRET=s\n")

        env = load_environment()

        assert env["X_API_KEY"] == "from-dotenv"
        assert env["X_API_SECRET"] == "s"

    def test_exported_variable_wins(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("X_API_KEY=from-dotenv\n")
        clean_env.setenv("X_API_KEY", "exported")

        assert load_environment()["X_API_KEY"] == "exported"

    def test_dotenv_does_not_touch_os_environ(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("X_ACCESS_TOKEN=t\n")
        load_environment()

        assert "X_ACCESS_TOKEN" not in os.environ

    def test_no_dotenv(self, clean_env):
        assert "X_API_KEY" not in load_environment()


class TestConfigFile:
    def test_missing_file_is_empty_config(self, tmp_path):
        config = load_config(tmp_path / "none.toml")
        assert config.auth == {}
        assert config.timeout == 30.0

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "sub" / "config.toml"
        save_config(AppConfig(auth=FULL_AUTH, timeout=12.5), path)

        loaded = load_config(path)
        assert loaded.auth == FULL_AUTH
        assert loaded.timeout == 12.5

    def test_permissions_restricted(self, tmp_path):
        path = tmp_path / "config.toml"
        save_config(AppConfig(auth=FULL_AUTH), path)
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_unknown_auth_keys_ignored(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[auth]\napi_key = "k"\nbearer = "nope"\n')
        assert load_config(path).auth == {"api_key": "k"}

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[auth\napi_key = ")
        with pytest.raises(ConfigurationError, match="Invalid config file"):
            load_config(path)

    def test_directory_is_configuration_error(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read config file"):
            load_config(tmp_path)

    @pytest.mark.parametrize("value", ['"slow"', "0", "-5", "true"])
    def test_invalid_timeout(self, tmp_path, value):
        path = tmp_path / "config.toml"
        path.write_text(f"[http]\ntimeout = {value}\n")
        with pytest.raises(ConfigurationError, match="timeout must be a positive number"):
            load_config(path)

    def test_integer_timeout(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[http]\ntimeout = 10\n")
        assert load_config(path).timeout == 10.0


def test_unreadable_dotenv(clean_env, tmp_path):
    def refuse(path):
        raise PermissionError(13, "Permission denied", str(path))

    (tmp_path / ".env").write_text("X_API_KEY=k\n")
    clean_env.setattr("x_cli.config.dotenv_values", refuse)

    with pytest.raises(ConfigurationError, match="Permission denied"):
        load_environment()
