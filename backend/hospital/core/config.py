from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./hospital.db"
    SQL_ECHO: bool = False
    # Create missing tables on API startup (development only, use migrations in production)
    AUTO_CREATE_TABLES: bool = True

    # Patient reads load the appointments collection in the same call
    PATIENT_EAGER_APPOINTMENTS: bool = True

    # Pagination policy for the HTTP layer
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra='ignore', case_sensitive=False)

settings = Settings()
