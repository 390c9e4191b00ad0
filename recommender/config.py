"""
Workspace Recommender - Configuration Management
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings"""

    # FastAPI
    fastapi_env: str = "development"
    fastapi_host: str = "0.0.0.0"
    fastapi_port: int = 8000

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: str = ""

    # Ticket store layout
    tickets_table: str = "entities"
    users_table: str = "users"

    # History windows (rows pulled per call)
    assignee_history_limit: int = 500
    priority_history_limit: int = 100
    response_time_history_limit: int = 100
    response_time_window_days: int = 30
    similarity_history_limit: int = 200

    # Result limits
    default_result_limit: int = 5
    max_result_limit: int = 50

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False
    )

    @property
    def is_development(self) -> bool:
        """True when running with development defaults"""
        return self.fastapi_env.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
