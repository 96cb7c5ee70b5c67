from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./study_planner.db"
    API_PREFIX: str = "/api/v1"
    TESTING: bool = True
    LOG_LEVEL: str = "INFO"
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str = ""
    CACHE_ENABLED: bool = True
    CACHE_EXPIRE_SECONDS: int = 1800
    SECRET_KEY: str = "change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440

    # Scheduling
    SESSION_BREAK_MINUTES: int = 10
    MIN_SESSION_HOURS: float = 0.5
    ALLOW_SAME_DAY_SCHEDULING: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
