# webapp/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
import os


class Settings(BaseSettings):
    """Web service configuration"""

    # App settings
    app_name: str = "AI Resume Tailor"
    version: str = "1.0.0"
    debug: bool = False

    # Security
    secret_key: str = os.getenv("SECRET_KEY", "change-this-secret-key-in-production-12345")
    session_expire_hours: int = 24
    cookie_name: str = "access_token"
    cookie_secure: bool = False
    admin_email: str = os.getenv("ADMIN_EMAIL", "admin@example.com")

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Paths
    database_path: str = "data/resume_tailor.db"
    log_dir: str = "data/logs"
    log_level: str = "INFO"

    # LLM provider: "openai" or "ollama"
    llm_provider: str = "openai"
    llm_timeout: float = 60.0
    openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    ollama_host: str = os.getenv("OLLAMA_HOST", "http://localhost:11434")
    ollama_model: str = os.getenv("OLLAMA_MODEL", "llama3.1")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


settings = Settings()
