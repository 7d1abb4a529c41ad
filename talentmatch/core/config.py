from pydantic_settings import BaseSettings
from typing import List, Optional, Union
from pydantic import field_validator
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "TalentMatch API"

    # Database Settings
    POSTGRES_USER: str = "user"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: str = "talent_db"

    # Full DSN override (e.g. sqlite:///./talentmatch.db for local runs)
    DATABASE_URL_OVERRIDE: Optional[str] = None

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # OpenAI Settings
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o"
    OPENAI_TEMPERATURE: float = 0.2

    # Matching thresholds (scores are 0-100)
    PERSISTENCE_THRESHOLD: int = 50  # Minimum score for a match to be written at all
    DISPLAY_THRESHOLD: int = 60  # "High match" tab vs "borderline" tab
    ADMIN_AUDIT_THRESHOLD: int = 60  # Admin cross-recruiter table shows score > this
    HIGH_VALUE_THRESHOLD: int = 80  # Per-recruiter "active matches" stat counts score > this

    # Store maintenance
    DELETE_BATCH_SIZE: int = 450  # Rows per commit group for bulk deletes
    STATS_TIMEOUT_SECONDS: float = 8.0  # Deadline for the admin four-table stats read

    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    # CORS Settings - can be set as JSON string in .env
    BACKEND_CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000", "http://localhost:8000"]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Union[List[str], str]) -> List[str]:
        """Parse CORS origins from JSON string or list"""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # If not valid JSON, split by comma
                return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("PERSISTENCE_THRESHOLD", "DISPLAY_THRESHOLD", "ADMIN_AUDIT_THRESHOLD", "HIGH_VALUE_THRESHOLD")
    @classmethod
    def check_score_range(cls, v: int) -> int:
        """Thresholds are compared against 0-100 scores"""
        if not 0 <= v <= 100:
            raise ValueError("Score thresholds must be between 0 and 100")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
