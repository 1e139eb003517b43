"""
Environment-driven settings for the Django project.

Every value can be overridden with a ``SCAMWATCH_``-prefixed environment
variable or a ``.env`` file next to ``manage.py``.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvSettings(BaseSettings):
    """Deployment settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SCAMWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Security
    secret_key: str = "django-insecure-dev-key-change-me"
    debug: bool = True
    allowed_hosts: list[str] = ["localhost", "127.0.0.1"]

    # Database
    database_engine: str = "django.db.backends.sqlite3"
    database_name: str = "db.sqlite3"
    database_user: str = ""
    database_password: str = ""
    database_host: str = ""
    database_port: str = ""

    # JWT
    access_token_minutes: int = 60
    refresh_token_days: int = 7

    # Logging
    log_level: str = "INFO"

    @property
    def is_sqlite(self) -> bool:
        return self.database_engine.endswith("sqlite3")


env = EnvSettings()
