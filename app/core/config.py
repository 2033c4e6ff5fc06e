"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase (empty values leave the backend unconfigured)
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""

    # Storage
    STORAGE_BUCKET: str = "resumes"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def supabase_configured(self) -> bool:
        """True when both Supabase credentials are present."""
        return bool(self.SUPABASE_URL and self.SUPABASE_KEY)


settings = Settings()
