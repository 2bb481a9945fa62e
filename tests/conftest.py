"""
Shared fixtures.
"""
import pytest

from core.config import reset_settings

SETTINGS_ENV_VARS = (
    "APP_NAME",
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "COMMA_AS_DECIMAL",
    "JOURNAL_SEPARATOR",
    "ACCOUNT_EQUIVALENCE_PATH",
    "DOCUMENTS_ROOT",
    "EXPORT_PATH",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Run every test against default settings."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def accounts():
    """A small account equivalence table."""
    return {
        "570": "Caja",
        "572": "Bancos",
        "600": "Compras de mercaderías",
        "700": "Ventas de mercaderías",
    }


@pytest.fixture
def accounts_csv(tmp_path):
    """Account equivalence CSV inside a temporary documents root."""
    path = tmp_path / "accounts.csv"
    path.write_text("570,Caja\n\n572, Bancos \n", encoding="utf-8")
    return path
