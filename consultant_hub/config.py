"""Central configuration management."""

from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = Field(default="sqlite:///./consultant_hub.db", env="DATABASE_URL")

    # Completion gateway (OpenAI-compatible chat completions)
    llm_api_key: str = Field(default="", env="LLM_API_KEY")
    llm_base_url: str = Field(default="https://ai.gateway.lovable.dev/v1", env="LLM_BASE_URL")
    llm_model: str = Field(default="google/gemini-2.5-flash", env="LLM_MODEL")
    llm_timeout_seconds: float = Field(default=60.0, env="LLM_TIMEOUT_SECONDS")

    # Knowledge aggregation budgets (characters)
    transcript_char_budget: int = Field(default=2000, env="TRANSCRIPT_CHAR_BUDGET")
    prior_result_char_budget: int = Field(default=1000, env="PRIOR_RESULT_CHAR_BUDGET")

    # Application
    app_name: str = Field(default="Consultant Hub", env="APP_NAME")
    app_env: str = Field(default="development", env="APP_ENV")
    app_debug: bool = Field(default=True, env="APP_DEBUG")
    port: int = Field(default=8000, env="PORT")
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    cors_origins: str = Field(default="*", env="CORS_ORIGINS")

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()
