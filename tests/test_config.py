import pytest

from config import ConfigurationError, _int_env


def test_int_env_default_when_unset(monkeypatch):
    monkeypatch.delenv("MAX_UPLOAD_MB", raising=False)
    assert _int_env("MAX_UPLOAD_MB", 100) == 100

    monkeypatch.setenv("MAX_UPLOAD_MB", "  ")
    assert _int_env("MAX_UPLOAD_MB", 100) == 100


def test_int_env_reads_number(monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD_MB", "25")
    assert _int_env("MAX_UPLOAD_MB", 100) == 25


@pytest.mark.parametrize("value", ["ten", "1.5", "0", "-3"])
def test_int_env_rejects_bad_values(monkeypatch, value):
    monkeypatch.setenv("MAX_UPLOAD_MB", value)
    with pytest.raises(ConfigurationError) as excinfo:
        _int_env("MAX_UPLOAD_MB", 100)
    assert "MAX_UPLOAD_MB" in str(excinfo.value)
