from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    env: str = "dev"
    database_url: str = "postgresql+psycopg2://clinic:clinic@db:5432/clinic"
    backend_cors_origins: str = "http://localhost:5173"
    log_level: str = "INFO"

    # Front desk defaults
    default_shift_type: str = "Regular"
    shift_page_size: int = 50
    handover_history_limit: int = 50
    active_shift_recent_transactions: int = 10
    # "Today" for the daily summary is computed in clinic local time
    clinic_utc_offset_minutes: int = 0

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        origins = self.backend_cors_origins
        return [origin.strip() for origin in origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
