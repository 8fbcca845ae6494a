from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BUSINESS_TIMEZONE: str = "America/Sao_Paulo"

    APPOINTMENT_STORE: str = ""  # "memory" | "json"; empty derives from ENV
    DATA_DIR: str = "./data"
    NOTES_MAX_LENGTH: int = 500
    SEED_DEMO_DATA: bool = True


settings = Settings()
