"""
Client Configuration Unit Tests
Tests for curlwrap/config/runtime.py
"""
import pytest

from curlwrap.config import ClientConfig
from curlwrap.http.state import DEFAULT_USER_AGENT
from curlwrap.schemas.errors import ConfigurationException


class TestDefaults:

    def test_defaults(self):
        """A bare config matches the client's own defaults."""
        config = ClientConfig()

        assert config.user_agent == DEFAULT_USER_AGENT
        assert config.cookie_file is None
        assert config.follow_redirects is False
        assert config.referrer is None
        assert config.headers == {}
        assert config.options == {}

    def test_unknown_option_rejected(self):
        """Unknown option names fail when the config is built."""
        with pytest.raises(ConfigurationException):
            ClientConfig(options={"CURLOPT_BOGUS": 1})


class TestFromEnv:

    def test_reads_variables(self, monkeypatch):
        """Every CURLWRAP_* variable is picked up."""
        monkeypatch.setenv("CURLWRAP_USER_AGENT", "env-agent/1")
        monkeypatch.setenv("CURLWRAP_COOKIE_FILE", "/tmp/env-cookies.txt")
        monkeypatch.setenv("CURLWRAP_FOLLOW_REDIRECTS", "true")
        monkeypatch.setenv("CURLWRAP_REFERRER", "http://ref.example/")
        monkeypatch.setenv("CURLWRAP_TIMEOUT", "2.5")
        monkeypatch.setenv("CURLWRAP_PROXY", "http://proxy:3128")

        config = ClientConfig.from_env()

        assert config.user_agent == "env-agent/1"
        assert config.cookie_file == "/tmp/env-cookies.txt"
        assert config.follow_redirects is True
        assert config.referrer == "http://ref.example/"
        assert config.options == {"TIMEOUT": 2.5, "PROXY": "http://proxy:3128"}

    @pytest.mark.parametrize("value, expected", [("1", True), ("yes", True), ("false", False), ("0", False)])
    def test_follow_redirects_flag(self, monkeypatch, value, expected):
        monkeypatch.setenv("CURLWRAP_FOLLOW_REDIRECTS", value)
        assert ClientConfig.from_env().follow_redirects is expected

    def test_empty_environment_gives_defaults(self):
        """No variables set means default values."""
        assert ClientConfig.from_env() == ClientConfig()

    def test_environment_read_on_every_load(self, monkeypatch):
        """Nothing is cached between loads; each call sees the current environment."""
        first = ClientConfig.from_env()
        monkeypatch.setenv("CURLWRAP_REFERRER", "http://later.example/")

        assert ClientConfig.from_env().referrer == "http://later.example/"
        assert first.referrer is None


class TestFromYaml:

    def test_load(self, tmp_path):
        """Values and options are read from a YAML file."""
        path = tmp_path / "curlwrap.yaml"
        path.write_text(
            "user_agent: yaml-agent/1\n"
            "follow_redirects: true\n"
            "headers:\n"
            "  Accept: application/json\n"
            "options:\n"
            "  CURLOPT_TIMEOUT: 30\n"
        )
        config = ClientConfig.from_yaml(path)

        assert config.user_agent == "yaml-agent/1"
        assert config.follow_redirects is True
        assert config.headers == {"Accept": "application/json"}
        assert config.options == {"CURLOPT_TIMEOUT": 30}

    def test_empty_file(self, tmp_path):
        """An empty YAML file gives the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert ClientConfig.from_yaml(path) == ClientConfig()

    def test_missing_file(self, tmp_path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ClientConfig.from_yaml(tmp_path / "nope.yaml")

    def test_bad_option_in_file(self, tmp_path):
        """Unknown option names in the file are rejected."""
        path = tmp_path / "bad.yaml"
        path.write_text("options:\n  NOT_REAL: 1\n")
        with pytest.raises(ConfigurationException):
            ClientConfig.from_yaml(path)


class TestOverrides:

    def test_env_overlays_file_values(self, monkeypatch):
        """Environment values win and the original config is untouched."""
        base = ClientConfig(user_agent="file/1", options={"MAXREDIRS": 5})
        monkeypatch.setenv("CURLWRAP_USER_AGENT", "env/2")
        monkeypatch.setenv("CURLWRAP_TIMEOUT", "7")

        merged = base.with_env_overrides()

        assert merged.user_agent == "env/2"
        assert merged.options == {"MAXREDIRS": 5, "TIMEOUT": 7.0}
        assert base.user_agent == "file/1"
        assert base.options == {"MAXREDIRS": 5}

    def test_no_overrides_returns_same_object(self):
        """Nothing to overlay returns the config itself."""
        config = ClientConfig()
        assert config.with_env_overrides() is config

    def test_to_dict_round_trip(self):
        config = ClientConfig(referrer="http://ref/", headers={"A": "1"}, options={"TIMEOUT": 1})
        assert ClientConfig.from_dict(config.to_dict()) == config
