from backend.invoicer.core.settings import Settings, get_settings


def test_settings_defaults():
    settings = get_settings()
    assert settings.app_name == "Freelance Invoicer"
    assert isinstance(settings.secret_key, str) and settings.secret_key
    assert isinstance(settings.database_url, str) and settings.database_url
    assert settings.reminder_window_days == 3


def test_settings_read_email_from_environment(monkeypatch):
    monkeypatch.setenv("EMAIL_HOST", "smtp.example.com")
    monkeypatch.setenv("EMAIL_PORT", "2525")
    monkeypatch.setenv("EMAIL_USER", "mailer@example.com")
    monkeypatch.setenv("EMAIL_PASS", "pw")
    monkeypatch.delenv("EMAIL_FROM", raising=False)
    settings = Settings()
    assert settings.email_host == "smtp.example.com"
    assert settings.email_port == 2525
    assert settings.email_from == "mailer@example.com"


def test_settings_reminders_flag(monkeypatch):
    monkeypatch.setenv("REMINDERS_ENABLED", "false")
    assert Settings().reminders_enabled is False
    monkeypatch.setenv("REMINDERS_ENABLED", "1")
    assert Settings().reminders_enabled is True
