"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """TruInsights application settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        stt_provider: Speech-to-text backend ("groq", "local" or "mock").
        llm_provider: Insight extraction LLM backend ("claude", "ollama" or "mock").
        backend_provider: Auth/storage/database backend ("local" or "supabase").
        database_url: Async SQLAlchemy connection string used by the local backend.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Speech-to-text ---
    # "groq" = hosted Whisper, "local" = faster-whisper, "mock" = fixed transcript
    stt_provider: str = "groq"
    groq_api_key: str = ""  # Required when stt_provider="groq"
    stt_base_url: str = "https://api.groq.com/openai/v1"
    stt_model: str = "whisper-large-v3-turbo"
    stt_language: str = "en"  # ISO 639-1 hint sent with every request
    stt_timeout: float = 60.0
    whisper_model: str = "base"  # faster-whisper size for stt_provider="local"

    # --- LLM Provider ---
    # "claude" for Anthropic API, "ollama" for local models, "mock" for the fixed payload
    llm_provider: str = "claude"

    # Claude (Anthropic API) settings
    claude_api_key: str = ""  # Required when llm_provider="claude"
    claude_model: str = "claude-sonnet-4-20250514"
    claude_max_tokens: int = 1024

    # Ollama (local LLM) settings
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"

    # --- Backend (auth / object storage / journals table) ---
    backend_provider: str = "local"
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_key: str = ""  # Server-side key for storage and journals; falls back to the anon key
    supabase_bucket: str = "audio-journals"
    supabase_timeout: float = 30.0

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    cors_origins: list[str] = [
        "http://localhost:8501",  # Streamlit
        "http://localhost:3000",  # Dev frontend
    ]
    recent_journals_limit: int = 5  # Dashboard "Recent Journals" size

    # --- Storage ---
    # Paths are relative to the project root; absolute paths also supported
    database_url: str = "sqlite+aiosqlite:///data/truinsights.db"
    recordings_dir: str = "data/recordings"  # Local audio object storage root


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
