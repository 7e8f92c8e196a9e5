from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./retro_writing.db"
    database_echo: bool = False
    auto_create_tables: bool = True

    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_days: int = 7

    cors_origins: str = "http://localhost:3000"

    debug: bool = False
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 5000

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
