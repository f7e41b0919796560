"""Tests for Shlink settings parsing and loading."""

import pytest

from shlinkrun.exceptions import ConfigurationError, MismatchedHostsAndKeys, NoInstancesConfigured
from shlinkrun.settings import (
    DEFAULT_TIMEOUT,
    HOSTS_OPTION,
    KEYS_OPTION,
    TAGS_OPTION,
    TIMEOUT_OPTION,
    BackendInstance,
    ShlinkSettings,
    split_lines,
)


# ── split_lines ───────────────────────────────────────────────────────────


class TestSplitLines:
    def test_empty(self):
        assert split_lines("") == []
        assert split_lines(None) == []

    def test_single(self):
        assert split_lines("https://s.io") == ["https://s.io"]

    def test_carriage_return(self):
        assert split_lines("a\rb\rc") == ["a", "b", "c"]

    def test_other_line_endings(self):
        assert split_lines("a\r\nb\nc") == ["a", "b", "c"]

    def test_blank_lines_keep_position(self):
        assert split_lines("a\r\rc") == ["a", "", "c"]

    def test_entries_are_trimmed(self):
        assert split_lines("  a \r b") == ["a", "b"]


# ── BackendInstance ───────────────────────────────────────────────────────


class TestBackendInstance:
    def test_domain(self):
        assert BackendInstance("https://shlink.io/", "K").domain == "shlink.io"

    def test_domain_with_port(self):
        assert BackendInstance("http://localhost:8080", "K").domain == "localhost"

    def test_domain_falls_back_to_host(self):
        assert BackendInstance("not a url", "K").domain == "not a url"

    def test_endpoint(self):
        assert BackendInstance("https://s.io", "K").endpoint == "https://s.io/rest/v3/short-urls"
        assert BackendInstance("https://s.io/", "K").endpoint == "https://s.io/rest/v3/short-urls"

    def test_api_key_not_in_repr(self):
        assert "secret" not in repr(BackendInstance("https://s.io", "secret"))


# ── instances() ───────────────────────────────────────────────────────────


class TestInstances:
    def test_pairs_by_position(self, two_instances):
        assert two_instances.instances() == [
            BackendInstance("https://s.io", "K1"),
            BackendInstance("https://short.example.org/", "K2"),
        ]

    def test_no_hosts(self):
        with pytest.raises(NoInstancesConfigured):
            ShlinkSettings(keys="K").instances()

    def test_mismatch(self):
        with pytest.raises(MismatchedHostsAndKeys) as exc_info:
            ShlinkSettings(hosts="a\rb", keys="K").instances()
        assert exc_info.value.hosts == 2
        assert exc_info.value.keys == 1

    def test_tags(self, two_instances):
        assert two_instances.tag_list == ["launcher", "work"]
        assert ShlinkSettings().tag_list == []


# ── from_options ──────────────────────────────────────────────────────────


class TestFromOptions:
    def test_all_options(self):
        settings = ShlinkSettings.from_options({
            HOSTS_OPTION: "https://s.io",
            KEYS_OPTION: "K",
            TAGS_OPTION: "t",
            TIMEOUT_OPTION: "30",
        })
        assert settings == ShlinkSettings(hosts="https://s.io", keys="K", tags="t", timeout=30.0)

    def test_missing_options(self):
        settings = ShlinkSettings.from_options({})
        assert settings.hosts == ""
        assert settings.keys == ""
        assert settings.tags == ""
        assert settings.timeout == DEFAULT_TIMEOUT

    def test_none_values(self):
        settings = ShlinkSettings.from_options({HOSTS_OPTION: None, TIMEOUT_OPTION: None})
        assert settings.hosts == ""
        assert settings.timeout is None

    def test_zero_timeout_disables_deadline(self):
        assert ShlinkSettings.from_options({TIMEOUT_OPTION: 0}).timeout is None

    def test_bad_timeout_falls_back_to_default(self, caplog):
        settings = ShlinkSettings.from_options({HOSTS_OPTION: "https://s.io", TIMEOUT_OPTION: "soon"})
        assert settings.timeout == DEFAULT_TIMEOUT
        assert settings.hosts == "https://s.io"
        assert "Invalid timeout" in caplog.text


# ── load (TOML) ───────────────────────────────────────────────────────────


class TestLoad:
    def test_arrays(self, tmp_path):
        path = tmp_path / "shlink.toml"
        path.write_text(
            '[shlink]\n'
            'hosts = ["https://s.io", "https://t.io"]\n'
            'keys = ["K1", "K2"]\n'
            'tags = ["launcher"]\n'
            'timeout = 5\n'
        )
        settings = ShlinkSettings.load(path)
        assert settings.host_list == ["https://s.io", "https://t.io"]
        assert settings.key_list == ["K1", "K2"]
        assert settings.tag_list == ["launcher"]
        assert settings.timeout == 5.0

    def test_strings(self, tmp_path):
        path = tmp_path / "shlink.toml"
        path.write_text('[shlink]\nhosts = "https://s.io"\nkeys = "K"\n')
        settings = ShlinkSettings.load(str(path))
        assert settings.instances() == [BackendInstance("https://s.io", "K")]
        assert settings.timeout == DEFAULT_TIMEOUT

    def test_missing_table(self, tmp_path):
        path = tmp_path / "shlink.toml"
        path.write_text('title = "nothing here"\n')
        assert ShlinkSettings.load(path) == ShlinkSettings()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ShlinkSettings.load(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "shlink.toml"
        path.write_text("[shlink\nhosts = ")
        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            ShlinkSettings.load(path)

    def test_wrong_type(self, tmp_path):
        path = tmp_path / "shlink.toml"
        path.write_text("[shlink]\nhosts = 42\n")
        with pytest.raises(ConfigurationError):
            ShlinkSettings.load(path)
