"""Pydantic Settings — loads configuration from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "ignore"}

    openai_api_key: str = ""

    llm_provider: str = "openai"
    agent_model: str = "gpt-4o-mini"
    summary_model: str = "gpt-4o-mini"
    summary_max_tokens: int = 1000

    fetch_timeout_seconds: float = 30.0

    host: str = "0.0.0.0"
    port: int = 8788
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
