from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REFERRAL_", env_file=".env", extra="ignore"
    )

    # Full SQLAlchemy URL; when unset one is assembled from the db_* parts.
    db_url: str | None = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "root"
    db_password: str = "root"
    db_name: str = "accredian_referrals"

    host: str = "0.0.0.0"
    port: int = 5000

    trust_proxy_headers: bool = False
    allowed_hosts: str = "*"
    cors_allowed_origins: str = "*"
    log_json: bool = False

    @field_validator("db_url")
    @classmethod
    def _blank_db_url_is_unset(cls, v: str | None) -> str | None:
        raw = str(v or "").strip()
        return raw or None

    def database_url(self) -> str:
        if self.db_url:
            return self.db_url
        url = URL.create(
            "postgresql+psycopg",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )
        return url.render_as_string(hide_password=False)
