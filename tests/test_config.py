import pytest
from pydantic import ValidationError

from lexdocket.bootstrap import default_reminder_rules
from lexdocket.config import Settings


def test_defaults(tmp_path):
    settings = Settings(data_dir=tmp_path / "data", config_dir=tmp_path / "config")

    assert settings.timezone == "Europe/Athens"
    assert settings.discussion_followup_working_days == 5
    assert settings.revival_days == 90
    assert settings.urgent_threshold_days == 3
    assert settings.default_reminder_offsets == [7, 3, 1]
    assert settings.audit_enabled


def test_paths_live_under_data_dir(tmp_path):
    settings = Settings(data_dir=tmp_path / "data", config_dir=tmp_path / "config")

    assert settings.get_store_path() == tmp_path / "data" / "records.jsonl"
    assert settings.get_audit_path() == tmp_path / "data" / "audit.jsonl"
    assert settings.get_config_dir().is_dir()
    assert (settings.get_rules_dir() / "gr.yaml").exists()


def test_data_dir_override_after_first_use(tmp_path):
    settings = Settings(data_dir=tmp_path / "first")
    settings.get_data_dir()

    settings.data_dir = tmp_path / "second"

    assert settings.get_data_dir() == tmp_path / "second"
    assert (tmp_path / "second").is_dir()


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("LEXDOCKET_REVIVAL_DAYS", "60")
    monkeypatch.setenv("LEXDOCKET_AUDIT_ENABLED", "false")
    monkeypatch.setenv("LEXDOCKET_DEFAULT_REMINDER_CHANNEL", "sms")

    settings = Settings(data_dir=tmp_path / "data")

    assert settings.revival_days == 60
    assert not settings.audit_enabled
    assert [rule.channel for rule in default_reminder_rules(settings)] == ["sms", "sms", "sms"]


def test_invalid_timezone_rejected():
    with pytest.raises(ValidationError):
        Settings(timezone="Mars/Olympus_Mons")


def test_negative_reminder_offsets_rejected():
    with pytest.raises(ValidationError):
        Settings(default_reminder_offsets=[7, -1])


def test_negative_day_counts_rejected():
    with pytest.raises(ValidationError):
        Settings(revival_days=-5)
