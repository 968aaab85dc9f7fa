from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    PORT: int = 3002
    DB_PATH: str = "/data/mixtape.db"
    LOG_LEVEL: str = "info"

    # Where clients are sent after a refused request or a status change.
    ROOT_PATH: str = "/"
    LOGIN_PATH: str = "/login"
    DJ_QUEUE_PATH: str = "/dj/submissions"


settings = Settings()
