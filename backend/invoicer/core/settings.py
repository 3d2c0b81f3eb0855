import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    def __init__(self):
        self.app_name = "Freelance Invoicer"
        self.api_version = "1.0.0"
        self.environment = os.getenv("APP_ENV", "development")
        self.secret_key = os.getenv("SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./invoicer.db")
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.business_name = os.getenv("BUSINESS_NAME", "Your Business")
        self.timezone = os.getenv("APP_TIMEZONE", "America/New_York")

        # Outgoing mail; left unset the notifier runs unconfigured
        self.email_host = os.getenv("EMAIL_HOST")
        self.email_port = int(os.getenv("EMAIL_PORT", "587"))
        self.email_user = os.getenv("EMAIL_USER")
        self.email_pass = os.getenv("EMAIL_PASS")
        self.email_from = os.getenv("EMAIL_FROM") or self.email_user

        self.reminders_enabled = _env_bool("REMINDERS_ENABLED", True)
        self.reminder_due_soon_at = os.getenv("REMINDER_DUE_SOON_AT", "09:00")
        self.reminder_overdue_at = os.getenv("REMINDER_OVERDUE_AT", "10:00")
        self.reminder_window_days = int(os.getenv("REMINDER_WINDOW_DAYS", "3"))


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
