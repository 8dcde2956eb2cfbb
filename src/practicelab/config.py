from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the absolute path to the project root
PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_DB_PATH = str(PROJECT_ROOT / "databases" / "practicelab.db")


class Settings(BaseSettings):
    """
    Centralized runtime configuration for the practice-lab service.
    All defaults are sensible for dev-mode; ops override via ENV.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Database ---
    practicelab_db_path: str = Field(default=DEFAULT_DB_PATH)
    seed_on_startup: bool = Field(default=True)

    # --- Logging ---
    log_level: str = Field(default="INFO")
    log_dir: str = Field(default=str(PROJECT_ROOT / "logs"))

    # --- API ---
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    cors_origins: List[str] = Field(default=["*"])

    # --- Skill scoring ---
    default_skills_per_round: int = Field(default=3)

    # --- Exercise catalogue ---
    exercise_fetch_limit: int = Field(default=10)

    # --- Job search ---
    remoteok_api_url: str = Field(default="https://remoteok.com/api")
    job_search_timeout: int = Field(default=15)
    job_search_default_limit: int = Field(default=20)


# Create a singleton instance
settings = Settings()
