from src.core.config import Settings


def test_settings_read_their_environment_names(monkeypatch):
    monkeypatch.setenv("APP_NAME", "Front Desk Scheduling")
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("CLINIC_TIMEZONE", "America/Lima")
    monkeypatch.setenv("JWT_EXPIRES_IN", "30")

    settings = Settings()

    assert settings.app_name == "Front Desk Scheduling"
    assert settings.debug is True
    assert settings.clinic_timezone == "America/Lima"
    assert settings.jwt_expires_in_minutes == 30


def test_settings_defaults(monkeypatch):
    for name in ("APP_NAME", "DEBUG", "CLINIC_TIMEZONE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.app_name == "Clinic Scheduling API"
    assert settings.debug is False
    assert settings.clinic_timezone == "America/Bogota"
    assert settings.log_level == "INFO"
