from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    redis_url: str = "redis://localhost:6379/0"
    redis_token: Optional[str] = None

    daily_ttl_seconds: int = 604800
    session_ttl_seconds: int = 3600

    recent_events_limit: int = 50
    daily_stats_days: int = 7

    import_chunk_size: int = 50

    class Config:
        env_file = ".env"


settings = Settings()
