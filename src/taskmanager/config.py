from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_KNOWN_NAMES = ["Aman", "Rajeev", "Shreya", "John", "Jane", "Alex", "Sarah", "Mike"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_timeout_seconds: float = 15.0

    user_timezone: str = "UTC"

    # Roster used to pick assignees out of meeting transcripts
    known_names: list[str] = DEFAULT_KNOWN_NAMES

    # Sentry error tracking
    sentry_dsn: str = ""
    sentry_environment: str = "production"

    log_level: str = "INFO"

    @property
    def has_gemini(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def has_sentry(self) -> bool:
        return bool(self.sentry_dsn)


settings = Settings()
