from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # PostgreSQL
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "tasks"
    database_url: str | None = None  # overrides the db_* fields when set
    db_pool_size: int = 5
    create_tables: bool = True

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_dsn: str | None = None  # overrides redis_host/redis_port when set
    redis_pool_size: int = 5
    task_count_key: str = "taskCount"

    log_level: str = "INFO"
    port: int = 3000

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def redis_url(self) -> str:
        return self.redis_dsn or f"redis://{self.redis_host}:{self.redis_port}/0"


@lru_cache
def get_settings() -> Settings:
    return Settings()
