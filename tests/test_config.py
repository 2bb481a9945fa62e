"""
Unit tests for configuration module.
"""
import pytest
from pydantic import ValidationError

from core.config import Settings, get_settings, reset_settings, resolve_option


def test_settings_defaults():
    """Test default configuration values."""
    settings = get_settings()
    assert settings.app_name == "Accounting Journal Renderer"
    assert settings.host == "0.0.0.0"
    assert settings.port == 8000
    assert settings.log_level == "INFO"
    assert settings.comma_as_decimal is False
    assert settings.journal_separator == "-"
    assert settings.account_equivalence_path is None


def test_settings_from_environment(monkeypatch):
    """Test rendering defaults are read from the environment."""
    monkeypatch.setenv("COMMA_AS_DECIMAL", "true")
    monkeypatch.setenv("JOURNAL_SEPARATOR", "a")
    monkeypatch.setenv("ACCOUNT_EQUIVALENCE_PATH", "data/pgc.csv")

    settings = get_settings()
    assert settings.comma_as_decimal is True
    assert settings.journal_separator == "a"
    assert settings.account_equivalence_path == "data/pgc.csv"


def test_blank_account_path_is_none(monkeypatch):
    """Test a blank account path means no account table."""
    monkeypatch.setenv("ACCOUNT_EQUIVALENCE_PATH", "  ")
    assert get_settings().account_equivalence_path is None


def test_settings_validation_port(monkeypatch):
    """Test port validation."""
    monkeypatch.setenv("PORT", "99999")

    with pytest.raises(ValidationError):
        get_settings()


def test_settings_validation_log_level(monkeypatch):
    """Test log level validation."""
    monkeypatch.setenv("LOG_LEVEL", "INVALID")

    with pytest.raises(ValidationError):
        get_settings()


def test_settings_singleton():
    """Test settings singleton behavior."""
    settings1 = get_settings()
    settings2 = get_settings()
    assert settings1 is settings2

    reset_settings()
    assert get_settings() is not settings1


def test_settings_explicit_values():
    """Test settings can be built directly."""
    settings = Settings(COMMA_AS_DECIMAL=True, EXPORT_PATH="out")
    assert settings.comma_as_decimal is True
    assert settings.export_path == "out"


def test_resolve_option_priority():
    """Test the first present candidate wins."""
    assert resolve_option("doc", "global", default="builtin") == "doc"
    assert resolve_option(None, "global", default="builtin") == "global"
    assert resolve_option(None, None, default="builtin") == "builtin"


def test_resolve_option_keeps_falsy_values():
    """Test False and empty string count as present."""
    assert resolve_option(False, True, default=True) is False
    assert resolve_option("", "-", default="-") == ""
