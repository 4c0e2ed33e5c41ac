from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    ENVIRONMENT: str = "production"  # set "development" locally to see error details
    PORT: int = 8000
    HOST: str = "0.0.0.0"
    LOG_LEVEL: str = "INFO"

    # Public base URL (used in share text)
    APP_URL: str

    # Gemini Conf
    GEMINI_API_KEY: str
    GEMINI_MODEL: str = "gemini-2.0-flash-001"

    # Supabase Conf
    SUPABASE_URL: str
    SUPABASE_SERVICE_ROLE_KEY: str
    SUPABASE_ANON_KEY: Optional[str] = None  # Falls back to the service role key
    ANALYSIS_HISTORY_TABLE: str = "analysis_history"

    # Identity provider session tokens
    AUTH_JWT_KEY: str
    AUTH_JWT_ALGORITHMS: List[str] = ["RS256"]
    AUTH_JWT_ISSUER: Optional[str] = None
    AUTH_JWT_AUDIENCE: Optional[str] = None

    # Usage Limits (keep Gemini costs bounded)
    RATE_LIMIT_MAX_REQUESTS: int = 5
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    RATE_LIMIT_RETRY_AFTER: int = 60
    RATE_LIMIT_MAX_ENTRIES: int = 10000

    LLM_MAX_RETRIES: int = 3
    LLM_RETRY_BASE_DELAY: float = 1.0  # seconds
    MAX_STATEMENT_LENGTH: int = 2000

    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

settings = Settings()
