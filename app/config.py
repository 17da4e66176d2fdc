"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    app_debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"

    # Deepgram (speech-to-text)
    deepgram_api_key: str = ""
    deepgram_base_url: str = "https://api.deepgram.com"
    deepgram_model: str = "nova-2"
    deepgram_audio_mimetype: str = "audio/webm"  # Sent for every upload

    # Airtable (product catalog)
    airtable_api_key: str = ""
    airtable_base_id: str = ""
    airtable_base_url: str = "https://api.airtable.com/v0"
    airtable_table_name: str = "Products"

    # OpenAI (chat completions)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.7
    openai_max_tokens: int = 300

    # ElevenLabs (text-to-speech)
    elevenlabs_api_key: str = ""
    elevenlabs_voice_id: str = ""
    elevenlabs_base_url: str = "https://api.elevenlabs.io/v1"
    elevenlabs_model_id: str = "eleven_monolingual_v1"
    elevenlabs_stability: float = 0.5
    elevenlabs_similarity_boost: float = 0.75

    # Outbound provider calls
    provider_timeout_seconds: float = 60.0
    provider_max_attempts: int = 1  # 1 = no retry

    # Rate limiting (opt-in; per client IP, POST endpoints only)
    rate_limit_enabled: bool = False
    rate_limit: str = "60/minute"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
