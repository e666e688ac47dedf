from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    ENV: Literal["dev", "prod", "test"] = "prod"
    DEBUG: bool = False

    # App
    APP_NAME: str = "otp-password-reset"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 3000
    CORS_ORIGINS: list[str] = ["*"]

    # OTP delivery: "smtp" mails the code, "log" writes it to the log (dev only)
    OTP_DELIVERY: Literal["smtp", "log"] = "smtp"

    # SMTP
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_SECURE: bool = False         # True = implicit TLS (465), False = STARTTLS
    SMTP_USER: str | None = None
    SMTP_PASS: str | None = None
    MAIL_FROM: str | None = None      # falls back to SMTP_USER
    SMTP_TIMEOUT_SEC: int = 15

    # Expired challenge sweeper; 0 disables it (expiry stays lazy, on verify)
    CHALLENGE_SWEEP_INTERVAL_SEC: int = 0

    # Logging / Observability
    LOG_LEVEL: str = "INFO"
    METRICS_ENABLED: bool = True
    REQUEST_ID_HEADER: str = "X-Request-ID"

    @property
    def mail_from(self) -> str | None:
        return self.MAIL_FROM or self.SMTP_USER


def get_settings() -> Settings:
    # slightly faster singleton
    global _SETTINGS_SINGLETON
    try:
        return _SETTINGS_SINGLETON  # type: ignore[name-defined]
    except NameError:
        _SETTINGS_SINGLETON = Settings()  # type: ignore[assignment]
        return _SETTINGS_SINGLETON
