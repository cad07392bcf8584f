# canteen/core/config.py
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment (.env locally, real env vars in production)
load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    database_url: Optional[str] = None
    sql_echo: bool = False

    jwt_secret: str = "canteen-super-secret-key"  # 🔐 Override in production
    jwt_lifetime_seconds: int = 3600
    jwt_audience: str = "fastapi-users:auth"
    session_secret: str = "fallback-secret"

    bill_ttl_minutes: int = 30
    bill_number_attempts: int = 10

    cors_origins: str = "*"
    log_level: str = "INFO"

    default_admin_email: str = "admin@canteen.local"
    default_admin_password: str = "admin1234"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
