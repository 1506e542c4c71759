from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- Required Fields ---
    PROJECT_NAME: str = "HN_Mart_Storefront"
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_ANON_KEY: str = ""

    # --- Session Memory ---
    # Leave empty to keep carts in process memory only
    REDIS_URL: str | None = None
    SESSION_TTL_SECONDS: int = 3600
    # Most sessions held in process memory (RAM carts, chat widgets)
    SESSION_CACHE_SIZE: int = 10000

    # --- Support Chat Timers (seconds) ---
    CHAT_REPLY_DELAY: float = 1.0
    CHAT_SUGGESTION_DELAY: float = 2.0

    # --- Display ---
    STORE_TIMEZONE: str = "Asia/Kolkata"
    SITE_URL: str = "https://hnmart.in"

    # None = whatever the transport default is
    HTTP_TIMEOUT: float | None = None
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
