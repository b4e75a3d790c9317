"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./daily_checkin.db"
    CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    # Session
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    SESSION_DAYS: int = 7
    COOKIE_NAME: str = "checkin_session"
    COOKIE_SECURE: bool = False

    # SMTP (port 465 = implicit TLS, anything else = STARTTLS)
    SMTP_HOST: str = "smtp.163.com"
    SMTP_PORT: int = 465
    SMTP_USER: str = ""
    SMTP_PASS: str = ""
    FROM_EMAIL: str = ""
    FROM_NAME: str = "Daily Check-In"

    # Scheduled scans
    SCHEDULER_ENABLED: bool = True
    SCHEDULER_POLL_SECONDS: int = 30
    MISSED_CHECK_IN_SCAN_HOUR: int = 1
    EMAIL_SEND_DELAY_SECONDS: float = 0.1

    class Config:
        env_file = ".env"


settings = Settings()
