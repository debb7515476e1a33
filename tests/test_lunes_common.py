"""Tests for lunes_common.py - helpers and settings."""

from pathlib import Path

import pytest

from lunes_common import Settings, load_settings, mask_string, sanitize_error

ENV_VARS = [
    "LUNES_USERNAME",
    "LUNES_PASSWORD",
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHAT_ID",
    "TG_BOT_TOKEN",
    "TG_CHAT_ID",
    "LUNES_SCREENSHOT_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:

    def test_requires_username(self, monkeypatch):
        monkeypatch.setenv("LUNES_PASSWORD", "p")
        with pytest.raises(ValueError, match="LUNES_USERNAME"):
            load_settings()

    def test_requires_password(self, monkeypatch):
        monkeypatch.setenv("LUNES_USERNAME", "u")
        with pytest.raises(ValueError, match="LUNES_PASSWORD"):
            load_settings()

    def test_empty_value_counts_as_missing(self, monkeypatch):
        monkeypatch.setenv("LUNES_USERNAME", "")
        monkeypatch.setenv("LUNES_PASSWORD", "p")
        with pytest.raises(ValueError):
            load_settings()

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("LUNES_USERNAME", "u")
        monkeypatch.setenv("LUNES_PASSWORD", "p")
        settings = load_settings()
        assert settings.username == "u"
        assert settings.password == "p"
        assert settings.tg_bot_token is None
        assert settings.tg_chat_id is None
        assert not settings.telegram_enabled
        assert settings.output_dir == Path(".")

    def test_telegram_and_output_dir(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LUNES_USERNAME", "u")
        monkeypatch.setenv("LUNES_PASSWORD", "p")
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
        monkeypatch.setenv("TELEGRAM_CHAT_ID", "42")
        monkeypatch.setenv("LUNES_SCREENSHOT_DIR", str(tmp_path))
        settings = load_settings()
        assert settings.telegram_enabled
        assert settings.screenshot_path("02-before-submit") == str(tmp_path / "02-before-submit.png")

    def test_short_telegram_names_are_accepted(self, monkeypatch):
        monkeypatch.setenv("LUNES_USERNAME", "u")
        monkeypatch.setenv("LUNES_PASSWORD", "p")
        monkeypatch.setenv("TG_BOT_TOKEN", "123:abc")
        monkeypatch.setenv("TG_CHAT_ID", "42")
        settings = load_settings()
        assert settings.tg_bot_token == "123:abc"
        assert settings.tg_chat_id == "42"

    def test_token_without_chat_id_disables_telegram(self):
        settings = Settings(username="u", password="p", tg_bot_token="123:abc")
        assert not settings.telegram_enabled


class TestMasking:

    def test_mask_string(self):
        assert mask_string("alice") == "al***"
        assert mask_string("ab") == "**"

    def test_sanitize_error_replaces_secrets(self):
        msg = sanitize_error('fill "s3cret" failed for alice', ("alice", "s3cret"))
        assert "s3cret" not in msg
        assert "alice" not in msg

    def test_sanitize_error_key_value(self):
        assert sanitize_error("password=hunter2 rejected") == "password=*** rejected"
