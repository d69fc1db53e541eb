from pydantic_settings import BaseSettings
from typing import List, Literal

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./dev.db"
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"
    # lenient: field errors go back to the form; strict: any violation is a generic failure
    VALIDATION_MODE: Literal["lenient", "strict"] = "lenient"
    INVOICES_PATH: str = "/dashboard/invoices"
    LOGIN_REDIRECT_PATH: str = "/dashboard"
    ITEMS_PER_PAGE: int = 6
    # renderings kept per cached path (e.g. one per search query + page)
    PATH_CACHE_MAX_VARIANTS: int = 128

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
