from typing import Optional

from pydantic import field_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .secrets_manager import SecretsManager

class Settings(BaseSettings):
    aws_region: str = "us-east-1"
    environment: str = "development"
    host: str = "localhost"
    db_username: str
    db_password: SecretStr
    database: str = "event_management"
    port: int = 5432
    # Overrides the assembled PostgreSQL URL, e.g. sqlite+aiosqlite for local runs
    database_url: Optional[str] = None
    db_pool_size: int = 10
    db_max_overflow: int = 5

    jwt_secret: SecretStr
    jwt_algorithm: str = "HS256"
    jwt_expiry_hours: int = 24
    jwt_issuer: str = "gfg-event-management"
    jwt_audience: str = "admin-api"

    bcrypt_rounds: int = 12

    graduation_year_min: int = 2020
    graduation_year_max: int = 2035
    program_length_years: int = 4

    super_admin_role_id: int = 1
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("db_username", "db_password", "jwt_secret", mode="before")
    @classmethod
    def load_secrets(cls, v, info):
        if info.data.get("environment") == "production":
            try:
                secrets = SecretsManager(region_name=info.data.get("aws_region"))
                if info.field_name == "db_username":
                    v = secrets.get_db_credentials()['username']
                elif info.field_name == "db_password":
                    v = secrets.get_db_credentials()['password']
                elif info.field_name == "jwt_secret":
                    v = secrets.get_jwt_secret()
                return v
            except Exception:
                # If there's an error getting secrets, fall back to the env value
                return v
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

settings = Settings()
