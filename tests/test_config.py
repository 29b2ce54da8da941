"""Tests for configuration loading."""

import json
from pathlib import Path

from sysvctl.config.loader import DEFAULT_CONFIG_PATH, get_config_path, load_config, save_config
from sysvctl.config.schema import Config, PathsConfig


class TestConfigPath:
    """Tests for get_config_path."""

    def test_default(self, monkeypatch):
        monkeypatch.delenv("SYSVCTL_CONFIG", raising=False)
        assert get_config_path() == DEFAULT_CONFIG_PATH

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SYSVCTL_CONFIG", str(tmp_path / "c.json"))
        assert get_config_path() == tmp_path / "c.json"


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "nope.json")

        assert config.paths.init_dir == Path("/etc/init.d")
        assert config.paths.run_dir == Path("/var/run")
        assert config.paths.log_dir == Path("/var/log/opsramp")
        assert config.tools.chkconfig == Path("/sbin/chkconfig")
        assert config.tools.update_rc_d == Path("/usr/sbin/update-rc.d")

    def test_partial_override(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"paths": {"run_dir": "/run"}, "tools": {"shell": "/bin/sh"}}))

        config = load_config(path)

        assert config.paths.run_dir == Path("/run")
        assert config.paths.init_dir == Path("/etc/init.d")
        assert config.tools.shell == "/bin/sh"

    def test_invalid_json_falls_back(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        assert load_config(path) == Config()

    def test_invalid_values_fall_back(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"paths": {"run_dir": ["not", "a", "path"]}}))

        assert load_config(path) == Config()

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "config.json"
        config = Config(paths=PathsConfig(init_dir=tmp_path / "init.d"))

        save_config(config, path)

        assert load_config(path).paths.init_dir == tmp_path / "init.d"


class TestPathsConfig:
    """Tests for derived per-service paths."""

    def test_service_paths(self):
        paths = PathsConfig()

        assert paths.init_script("svc") == Path("/etc/init.d/svc")
        assert paths.pid_file("svc") == Path("/var/run/svc.pid")
        assert paths.log_files("svc") == (Path("/var/log/opsramp/svc.log"), Path("/var/log/opsramp/svc.err"))
        assert paths.legacy_log_files("svc") == (Path("/var/log/svc.log"), Path("/var/log/svc.err"))
