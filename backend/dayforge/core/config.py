"""Application configuration managed via environment variables."""
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "DayForge Backend"
    debug: bool = False
    log_level: str = "INFO"
    planner_log_level: str | None = None
    database_url: str = "postgresql+psycopg2://dayforge@localhost:5432/dayforge"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "dayforge"
    planner_offset_rule: Literal["central_european", "zoneinfo"] = "central_european"
    planner_timezone: str = "Europe/Bratislava"
    history_window_days: int = 7
    scheduler_enabled: bool = False
    scheduler_timezone: str = "Europe/Bratislava"
    day_plan_job_hour: int = 21
    day_plan_job_minute: int = 0
    day_completion_job_hour: int = 5
    day_completion_job_minute: int = 30
    jobs_run_on_startup: bool = False


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
