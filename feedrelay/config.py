from functools import lru_cache
from typing import Annotated, List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    env: Literal["production", "development"] = "development"

    user_agent: str = "feedrelay/1.0 (+https://github.com/feedrelay/feedrelay)"
    http_proxy: Optional[str] = None
    # Unset keeps a hung strategy waiting forever; callers that need bounded
    # latency set this.
    request_timeout_seconds: Optional[float] = Field(default=None, gt=0)

    allowed_origins: Annotated[List[str], NoDecode] = Field(default_factory=list)
    max_sources_per_request: int = Field(default=25, ge=1)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_allowed_origins(cls, value):
        if not value:
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    def is_production(self) -> bool:
        return self.env == "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
