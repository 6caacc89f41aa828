from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List
from functools import lru_cache
from pydantic import Field
from .constants import DEFAULT_ELIGIBLE_JOB_STATUSES

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # Environment
    environment: str = Field(default="development")

    # Scoring service (any OpenAI-compatible chat completions endpoint)
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://ai.gateway.lovable.dev/v1"
    openai_model: str = "google/gemini-2.5-flash"
    evaluation_temperature: float = 0.3
    generation_temperature: float = 0.7
    request_timeout_seconds: float = 60.0

    # Supabase
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    supabase_service_role_key: Optional[str] = None
    table_suffix: str = ""

    # Batch processing
    batch_concurrency: int = Field(default=5, ge=1)
    batch_pacing_seconds: float = Field(default=1.0, ge=0)
    rate_limit_attempts: int = Field(default=1, ge=1) # 1 = report RateLimited without retrying
    eligible_job_statuses: List[str] = list(DEFAULT_ELIGIBLE_JOB_STATUSES)
    eligible_candidate_statuses: Optional[List[str]] = None # None = every candidate

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

@lru_cache()
def get_settings() -> Settings:
    return Settings()
