"""Tests for .scribeconf loading."""

import logging
import textwrap

import pytest

from shellscribe.config import Config, build_config, load_config, parse_scribeconf
from shellscribe.errors import ConfigError


def test_defaults():
    config = Config()
    assert config.max_docblocks == 1000
    assert config.doc_path == "./docs"
    assert config.show_toc
    assert config.example_display == "sequential"
    assert not config.debug


class TestParseScribeconf:
    def test_values_and_comments(self, caplog):
        text = textwrap.dedent("""
            # output settings
            doc_path = ./out   # inline comment
            show_toc = false
            footer_text = "Made with care"
            highlight_language = sh
            bogus_key = 1
        """)
        settings = parse_scribeconf(text)
        assert settings == {
            "doc_path": "./out",
            "show_toc": "false",
            "footer_text": "Made with care",
            "highlight_language": "sh",
        }
        assert "unknown configuration key bogus_key" in caplog.text

    def test_hash_inside_value_kept(self):
        assert parse_scribeconf("footer_text = Issue#12") == {"footer_text": "Issue#12"}

    def test_malformed_line(self, caplog):
        assert parse_scribeconf("no equals here") == {}
        assert "expected key = value" in caplog.text

    def test_obsolete_keys_ignored_quietly(self, caplog):
        assert parse_scribeconf("memory_tracking = true") == {}
        assert "unknown" not in caplog.text


class TestLoadConfig:
    def test_explicit_file(self, tmp_path):
        path = tmp_path / "custom.conf"
        path.write_text("show_toc = false\nmax_docblocks = 50\nexample_display = tabs\n")
        config = load_config(path)
        assert config.show_toc is False
        assert config.max_docblocks == 50
        assert config.example_display == "tabs"

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.conf")

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "bad.conf"
        path.write_text("example_display = carousel\n")
        with pytest.raises(ConfigError, match="example_display"):
            load_config(path)

    def test_limit_must_be_positive(self):
        with pytest.raises(ConfigError):
            build_config({"max_docblocks": "0"})

    def test_finds_scribeconf_in_cwd(self, tmp_path):
        (tmp_path / ".scribeconf").write_text("doc_path = ./site\n")
        assert load_config().doc_path == "./site"

    def test_finds_user_config(self, tmp_path):
        user_dir = tmp_path / "xdg" / "shellscribe"
        user_dir.mkdir(parents=True)
        (user_dir / "scribeconf").write_text("show_alerts = false\n")
        assert load_config().show_alerts is False

    def test_defaults_without_files(self):
        assert load_config() == Config()

    def test_debug_environment(self, monkeypatch):
        monkeypatch.setenv("SHELLSCRIBE_DEBUG", "1")
        assert load_config().debug


@pytest.mark.parametrize(
    "settings, level",
    [
        ({}, logging.WARNING),
        ({"debug": True}, logging.DEBUG),
        ({"verbose": True}, logging.INFO),
        ({"log_level": "detailed"}, logging.INFO),
        ({"log_level": "minimal"}, logging.ERROR),
    ],
)
def test_logging_level(settings, level):
    assert Config(**settings).logging_level == level
