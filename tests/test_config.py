"""Tests for configuration loading, models and paths."""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from svcdeploy.config.loader import find_config_path, load_config
from svcdeploy.config.models import (
    DEFAULT_WAIT_MS,
    ConfigError,
    DeployerConfig,
    LifecycleConfig,
    ServiceConfig,
)
from svcdeploy.config.paths import (
    ENV_VAR,
    get_all_paths,
    get_config_path,
    get_logs_path,
    get_service_log_path,
    get_svcdeploy_home,
)

SAMPLE_CONFIG = """
[service]
name = "api-worker"
display_name = "API worker"
command = ["/opt/api/bin/worker", "--queue", "default"]
backend = "systemd"

[lifecycle]
wait_ms = 2500
state_timeout = 4
"""


class TestServiceConfig:
    def test_defaults(self):
        config = ServiceConfig()
        assert config.name == "svcdeploy-worker"
        assert config.command is None
        assert config.backend == "auto"

    @pytest.mark.parametrize("name", ["", "-leading-dash", "has space", "a/b", "x" * 81])
    def test_invalid_names(self, name: str):
        with pytest.raises(ValidationError, match="Service name"):
            ServiceConfig(name=name)

    @pytest.mark.parametrize("name", ["worker", "my.worker_2", "A-1", "x" * 80])
    def test_valid_names(self, name: str):
        assert ServiceConfig(name=name).name == name

    def test_empty_command(self):
        with pytest.raises(ValidationError, match="must not be empty"):
            ServiceConfig(command=[])

    def test_unknown_backend(self):
        with pytest.raises(ValidationError):
            ServiceConfig(backend="upstart")


class TestLifecycleConfig:
    def test_defaults(self):
        config = LifecycleConfig()
        assert config.wait_ms == DEFAULT_WAIT_MS == 10_000
        assert config.assume_yes is False

    def test_negative_wait(self):
        with pytest.raises(ValidationError):
            LifecycleConfig(wait_ms=-1)

    def test_zero_poll_interval(self):
        with pytest.raises(ValidationError):
            LifecycleConfig(poll_interval=0)

    def test_poll_interval_longer_than_removal_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="svcdeploy.config.models"):
            DeployerConfig(lifecycle=LifecycleConfig(poll_interval=5, removal_timeout=1))

        assert "exceeds removal_timeout" in caplog.text


class TestLoadConfig:
    def test_defaults_without_file(self):
        config = load_config()

        assert config == DeployerConfig()

    def test_explicit_path(self, tmp_path: Path):
        config_file = tmp_path / "deploy.toml"
        config_file.write_text(SAMPLE_CONFIG)

        config = load_config(config_file)

        assert config.service.name == "api-worker"
        assert config.service.command == ["/opt/api/bin/worker", "--queue", "default"]
        assert config.service.backend == "systemd"
        assert config.lifecycle.wait_ms == 2500
        assert config.lifecycle.state_timeout == 4.0
        assert config.lifecycle.removal_timeout == 30.0

    def test_explicit_path_missing(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "missing.toml")

    def test_current_directory_file_wins(self, svcdeploy_home: Path):
        svcdeploy_home.mkdir(parents=True)
        (svcdeploy_home / "config.toml").write_text('[service]\nname = "from-home"\n')
        Path("svcdeploy.toml").write_text('[service]\nname = "from-cwd"\n')

        assert load_config().service.name == "from-cwd"

    def test_home_config(self, svcdeploy_home: Path):
        svcdeploy_home.mkdir(parents=True)
        (svcdeploy_home / "config.toml").write_text('[service]\nname = "from-home"\n')

        assert find_config_path() == get_config_path()
        assert load_config().service.name == "from-home"

    def test_invalid_values(self, tmp_path: Path):
        config_file = tmp_path / "bad.toml"
        config_file.write_text("[lifecycle]\nwait_ms = -5\n")

        with pytest.raises(ValidationError):
            load_config(config_file)

    def test_invalid_toml(self, tmp_path: Path):
        config_file = tmp_path / "broken.toml"
        config_file.write_text("not valid toml [[[")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(config_file)

    def test_env_wait_override(self, tmp_path: Path, monkeypatch):
        config_file = tmp_path / "deploy.toml"
        config_file.write_text(SAMPLE_CONFIG)
        monkeypatch.setenv("SVCDEPLOY_WAIT_MS", "0")

        assert load_config(config_file).lifecycle.wait_ms == 0

    def test_env_wait_not_integer(self, monkeypatch):
        monkeypatch.setenv("SVCDEPLOY_WAIT_MS", "ten")

        with pytest.raises(ConfigError, match="must be an integer"):
            load_config()

    def test_env_backend_override(self, monkeypatch):
        monkeypatch.setenv("SVCDEPLOY_BACKEND", "launchd")

        assert load_config().service.backend == "launchd"


class TestPaths:
    def test_default_home(self, monkeypatch):
        monkeypatch.delenv(ENV_VAR, raising=False)
        get_svcdeploy_home.cache_clear()

        assert get_svcdeploy_home() == Path.home() / ".svcdeploy"

    def test_respects_env_var(self, svcdeploy_home: Path):
        assert get_svcdeploy_home() == svcdeploy_home.resolve()

    def test_expands_tilde(self, monkeypatch):
        monkeypatch.setenv(ENV_VAR, "~/deploy-home")
        get_svcdeploy_home.cache_clear()

        assert get_svcdeploy_home() == (Path.home() / "deploy-home").resolve()

    def test_derived_paths(self, svcdeploy_home: Path):
        home = svcdeploy_home.resolve()
        assert get_config_path() == home / "config.toml"
        assert get_logs_path() == home / "logs"
        assert get_service_log_path("demo") == home / "logs" / "demo.log"

    def test_all_paths(self):
        assert set(get_all_paths()) == {"home", "config", "logs"}
