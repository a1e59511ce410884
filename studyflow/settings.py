## Application settings configuration

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "dev"
    log_level: str = "INFO"

    # Gemini settings
    LLM_PROVIDER: str = "gemini"
    GEMINI_API_KEY: str | None = Field(
        default=None, validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY")
    )
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # OpenAI-compatible fallbacks (no search tool)
    GROQ_API_KEY: str | None = None
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"
    GROQ_MODEL: str = "llama-3.1-8b-instant"

    ollama_base_url: str = "http://localhost:11434/v1"
    ollama_model: str = "llama3.1"

    # Persistence
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    local_database_url: str = "sqlite:///studyflow_guest.db"

    # Generation pipeline
    retry_max_attempts: int = 3
    retry_initial_delay_ms: int = 1000
    curation_concurrency: int = 0  # 0 = unbounded fan-out


settings = Settings()
