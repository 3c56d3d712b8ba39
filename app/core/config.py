from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    app_name: str = "Product & Category API"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    debug: bool = False

    # DB settings
    database_url: str = "sqlite+aiosqlite:///./catalog.db"
    create_tables_on_startup: bool = True

    # Logging
    log_level: str = "INFO"
    log_json: bool = True
    log_file: Optional[str] = None

    # Paging
    default_page_size: int = 10
    max_page_size: int = 100

    # Product/category rule
    min_categories_per_product: int = 1
    max_categories_per_product: Optional[int] = None

    @field_validator("database_url", mode="after")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        if v.startswith("sqlite://") and "+aiosqlite" not in v:
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v

    @field_validator("min_categories_per_product", mode="after")
    @classmethod
    def at_least_one_category(cls, v: int) -> int:
        if v < 1:
            raise ValueError("a product must keep at least one category")
        return v


settings = Settings()
