# app/config.py
from pydantic_settings import BaseSettings
from pathlib import Path
from typing import List

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./university_journal.db"
    DB_ECHO: bool = False
    
    # Frontend origins allowed to call the API
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]  # Next.js default port
    
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    
    # PDF export
    # DejaVu Sans ships with the package and covers Latin, Cyrillic and Greek
    PDF_FONT_PATH: Path = Path(__file__).parent / "fonts" / "DejaVuSans.ttf"
    PDF_FONT_SIZE: int = 8
    
    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
