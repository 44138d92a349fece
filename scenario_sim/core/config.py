"""Application configuration from environment."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "Scenario Session Engine"
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Database
    database_url: str = "sqlite+aiosqlite:///./scenario_sim.db"
    seed_on_startup: bool = True

    # Principal token signing
    secret_key: str = "change-me-in-production-use-env"
    auth_cookie_name: str = "ssim_auth"
    auth_cookie_max_age: int = 60 * 60 * 24 * 14  # 14 days

    # Evaluator (OpenAI)
    openai_api_key: str = ""
    openai_api_base: str | None = None
    evaluator_model: str = "gpt-4o"
    evaluator_timeout_seconds: float = 15.0
    evaluator_max_retries: int = 1  # retries on transient failures only

    # Scenarios (step count for seeded and newly inserted scenarios)
    default_total_steps: int = 5

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
