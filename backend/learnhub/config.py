"""
Application configuration from environment variables.
Loads .env from the backend directory so settings are found regardless of cwd.
"""
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Subjects shown on the Challenge Subject page, in display order.
DEFAULT_CHALLENGE_SUBJECTS = [
    "Art",
    "Media",
    "Literature",
    "Music",
    "Science and Technology",
    "Special Areas",
    "History",
    "Social Studies",
]

# .env next to backend/ (parent of learnhub/)
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_ENV_FILE = _BACKEND_DIR / ".env"

if _ENV_FILE.exists():
    from dotenv import load_dotenv
    load_dotenv(_ENV_FILE, override=False)


class Settings(BaseSettings):
    """Load and validate config from env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database: sqlite for local runs, postgresql for production
    database_url: str = "sqlite:///./learnhub_dev.db"

    # Set ENV=production in production; sample data is never seeded there.
    env: str = ""

    # CORS: comma-separated origins
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Sentinel the admin panel sends for "every collection" / "no parent filter"
    all_sentinel: str = "all"

    # Order of the virtual subject topics (comma-separated). Env: CHALLENGE_SUBJECTS.
    challenge_subjects: str = ",".join(DEFAULT_CHALLENGE_SUBJECTS)

    # Seed sample collections into an empty SQLite database at startup
    seed_sample_data: bool = True

    debug: bool = False

    @property
    def challenge_subject_list(self) -> list[str]:
        """Configured subject order; falls back to the defaults when empty."""
        parts = [p.strip() for p in (self.challenge_subjects or "").split(",") if p.strip()]
        return parts or list(DEFAULT_CHALLENGE_SUBJECTS)

    @property
    def is_production(self) -> bool:
        return (self.env or "").strip().lower() == "production"


settings = Settings()
