from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None

    BUSINESS_TIMEZONE: str = "America/Sao_Paulo"
    ADMIN_ID: str = "5582993230395@c.us"
    ALLOWED_SENDER_SUFFIX: str = "@c.us"

    DATABASE_URL: str = "sqlite+aiosqlite:///./barbearia.db"
    REPOSITORY_PROVIDER: str = "sql"
    STATE_STORE_PROVIDER: str = "memory"
    STATE_DATA_DIR: str = "./data/sessions"

    GATEWAY_SEND_ENDPOINT: str | None = None
    GATEWAY_API_TOKEN: str | None = None
    GATEWAY_WEBHOOK_SECRET: str | None = None
    OUTBOUND_ENABLED: bool = False

    JOBS_API_TOKEN: str | None = None

    SESSION_IDLE_MINUTES: int = 10
    SIDE_CHAT_IDLE_MINUTES: int = 7
    BOOKING_ECHO_GUARD_SECONDS: int = 60
    MAX_ACTIVE_APPOINTMENTS: int = 3
    RETENTION_DAYS: int = 30
    SWEEP_INTERVAL_SECONDS: int = 30
    RUN_SAME_DAY_REMINDERS_ON_STARTUP: bool = True


settings = Settings()
