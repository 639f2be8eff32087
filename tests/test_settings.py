from pathlib import Path

from reverseball.config import Settings


def test_settings_defaults(monkeypatch):
    for name in (
        "REVERSEBALL_DB_PATH",
        "REVERSEBALL_ML_URL",
        "REVERSEBALL_ML_ENABLED",
        "REVERSEBALL_ML_HEALTH_TIMEOUT",
        "REVERSEBALL_ML_TIMEOUT",
        "REVERSEBALL_ML_BATCH_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.ml_url == "http://127.0.0.1:5000"
    assert settings.ml_enabled is True
    assert settings.ml_health_timeout == 5.0
    assert settings.ml_timeout == 10.0
    assert settings.ml_batch_timeout == 60.0


def test_settings_read_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("REVERSEBALL_DB_PATH", str(tmp_path / "custom.sqlite"))
    monkeypatch.setenv("REVERSEBALL_ML_URL", "http://ml.internal:8080/")
    monkeypatch.setenv("REVERSEBALL_ML_ENABLED", "off")
    monkeypatch.setenv("REVERSEBALL_ML_BATCH_TIMEOUT", "120")

    settings = Settings.from_env()

    assert settings.db_path == Path(tmp_path / "custom.sqlite")
    assert settings.ml_url == "http://ml.internal:8080"
    assert settings.ml_enabled is False
    assert settings.ml_batch_timeout == 120.0


def test_invalid_values_fall_back_to_defaults(monkeypatch, caplog):
    monkeypatch.setenv("REVERSEBALL_ML_TIMEOUT", "soon")
    monkeypatch.setenv("REVERSEBALL_ML_ENABLED", "maybe")
    monkeypatch.setenv("REVERSEBALL_ML_HEALTH_TIMEOUT", "-3")

    settings = Settings.from_env()

    assert settings.ml_timeout == 10.0
    assert settings.ml_enabled is True
    assert settings.ml_health_timeout == 0.1
    assert "REVERSEBALL_ML_TIMEOUT" in caplog.text
