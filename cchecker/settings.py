from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    """

    github_api_base_url: str = "https://api.github.com"
    github_host: str = "github.com"
    user_agent: str = "cchecker"
    request_timeout: float = 15.0
    first_year: int = 2000
    commits_per_page: int = 100
    report_label: str | None = None
    log_level: str = "WARNING"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
