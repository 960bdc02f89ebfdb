import os

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    GEMINI_API_KEY: str = os.environ.get("GEMINI_API_KEY", "")
    JWT_SECRET_KEY: str = os.environ.get("JWT_SECRET_KEY", "")
    MONGO_URI: str = os.environ.get("MONGO_URI", "")
    MONGO_DIRECT_URI: str = os.environ.get("MONGO_DIRECT_URI", "")
    MONGO_DB_NAME: str = "main"
    PLAN_GENERATION_MODEL: str = "gemini-2.5-flash"
    PLAN_GENERATION_TIMEOUT_SECONDS: float = 45.0
    PLAN_COUNTRY: str = "India"
    LOG_LEVEL: str = "INFO"


settings = Settings()
