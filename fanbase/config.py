# fanbase/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    # AWS SES
    aws_region: str = "us-east-1"
    from_email: str = "no-reply@example.com"
    from_name: str = "Fanbase"
    support_email: str = "contact@example.com"
    ses_configuration_set: Optional[str] = None

    # Database Settings
    database_url: Optional[str] = None

    # App Settings
    site_url: str = "http://localhost:3000"
    artist_name: str = "The Artist"
    environment: str = "development"
    uploads_dir: str = "uploads"

    # Admin session
    admin_username: str = "admin"
    admin_password: Optional[str] = None
    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 12
    cookie_domain: Optional[str] = None
    cookie_secure: bool = False  # Set to True in production with HTTPS
    cookie_samesite: str = "lax"
    cookie_httponly: bool = True

    # Cron
    cron_secret: Optional[str] = None

    # Rate limiting
    rate_limit_window_seconds: int = 60
    rate_limit_max_requests: int = 3
    visit_throttle_seconds: int = 300
    rate_limit_max_entries: int = 10000

    # Geolocation
    geolocation_url: str = "http://ip-api.com/json"
    geolocation_timeout_seconds: float = 3.0

    # Notifications
    reminder_days_ahead: int = 7
    notification_timeout_seconds: float = 10.0
    batch_pause_every: int = 10
    batch_pause_seconds: float = 0.1

    # Extra env vars are ignored
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
