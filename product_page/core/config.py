from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    SESSION_SLOT_KEY: str = "productPageData"
    SESSION_TTL_MINUTES: int = 15
    SESSION_STORE_PROVIDER: str = "memory"  # "memory" | "json"
    SESSION_DATA_DIR: str = "./data/sessions"

    ADDRESS_LOOKUP_PROVIDER: str = "viacep"  # "viacep" | "mock"
    ADDRESS_LOOKUP_BASE_URL: str = "https://viacep.com.br/ws"
    ADDRESS_LOOKUP_TIMEOUT_SECONDS: float | None = None


settings = Settings()
