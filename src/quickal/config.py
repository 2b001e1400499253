from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_ENV: str = "development"
    APP_PORT: int = 8005

    # Reference time zone attached to every start/end the service writes
    CALENDAR_TIMEZONE: str = "Europe/Madrid"

    # Assistant LLM Configuration (can be changed easily)
    ASSISTANT_LLM_API_KEY: str = ""
    ASSISTANT_LLM_PROVIDER: str = "openai"  # openai, anthropic, google_genai, etc.
    ASSISTANT_LLM_MODEL: str = "gpt-4o-mini"  # Model name
    ASSISTANT_TEMPERATURE: float = 0.1
    ASSISTANT_MAX_STEPS: int = 5
    ASSISTANT_MAX_DURATION_SECONDS: float = 30.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()


def validate_required_keys():
    """Validate that all required API keys are present"""
    required_keys = [
        ("ASSISTANT_LLM_API_KEY", settings.ASSISTANT_LLM_API_KEY),
    ]

    missing_keys = []
    for key_name, key_value in required_keys:
        if not key_value or key_value.strip() == "":
            missing_keys.append(key_name)

    if missing_keys:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing_keys)}. "
            f"Please check your .env file."
        )
