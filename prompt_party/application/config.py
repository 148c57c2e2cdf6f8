"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = "prompt-party"
    app_version: str = "0.1.0"
    debug: bool = False

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"

    # Storage backends
    content_backend: str = "local"  # "local" or "dynamodb"
    session_backend: str = "local"  # "local" or "dynamodb"

    # AWS settings for the DynamoDB backends
    aws_region: str = "us-east-1"
    prompts_table_name: str = "Prompts"
    challenges_table_name: str = "Challenges"
    activity_breaks_table_name: str = "ActivityBreaks"
    reflection_pauses_table_name: str = "ReflectionPauses"
    packs_table_name: str = "PromptPacks"
    sessions_table_name: str = "GameSessions"

    # Game progression
    break_every: int = 4  # prompts between interleaved breaks, 0 disables
    session_cache_size: int = 1000  # live sessions kept in memory

    # Access-code gate
    access_codes: str = ""  # comma-separated; empty disables the gate
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    session_cookie_name: str = "prompt_party_session"
    token_ttl_hours: int = 12

    @property
    def access_code_set(self) -> frozenset[str]:
        return frozenset(
            code.strip().upper() for code in self.access_codes.split(",") if code.strip()
        )


# Create a singleton instance
settings = Settings()
