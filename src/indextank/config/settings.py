from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
  model_config = SettingsConfigDict(
      env_file=".env",
      env_file_encoding="utf-8",
      extra="ignore",
  )

  api_url: str = Field(default="", alias="INDEXTANK_API_URL")

  max_attempts: int = Field(default=5, ge=1, alias="INDEXTANK_MAX_ATTEMPTS")
  backoff_seconds: float = Field(default=2.0, ge=0, alias="INDEXTANK_BACKOFF_SECONDS")
  timeout_seconds: float = Field(default=15.0, gt=0, alias="INDEXTANK_TIMEOUT_SECONDS")
  user_agent: str = Field(default="indextank-python/0.1.0", alias="INDEXTANK_USER_AGENT")

  log_level: str = Field(default="WARNING", alias="INDEXTANK_LOG_LEVEL")


@lru_cache
def get_settings() -> Settings:
  return Settings()
