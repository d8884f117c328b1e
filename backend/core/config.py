# backend/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional, List
import json


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # ignore unknown keys instead of crashing
        populate_by_name=True,
    )

    app_env: str = Field("development", alias="APP_ENV")
    public_base_url: str = Field("http://localhost:3000", alias="PUBLIC_BASE_URL")

    # ---- Admin / sessions
    admin_password: Optional[str] = Field(default=None, alias="ADMIN_PASSWORD")
    jwt_secret: str = Field("dev-secret-change-me", alias="JWT_SECRET")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    admin_cookie_max_age: int = Field(60 * 60 * 8, alias="ADMIN_COOKIE_MAX_AGE")
    session_duration_days: int = Field(7, alias="SESSION_DURATION_DAYS")

    # ---- DB (accept either)
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")
    db_url_compat: Optional[str] = Field(default=None, alias="DB_URL")

    # ---- S3 / MinIO
    s3_endpoint: Optional[str] = Field("http://127.0.0.1:9000", alias="S3_ENDPOINT")
    s3_region: str = Field("us-east-1", alias="S3_REGION")
    s3_access_key: str = Field("minioadmin", alias="S3_ACCESS_KEY")
    s3_secret_key: str = Field("minioadmin", alias="S3_SECRET_KEY")
    s3_bucket: str = Field("candidate-assessments", alias="S3_BUCKET")

    # signed URL lifetimes (seconds)
    signed_upload_url_expires: int = Field(600, alias="SIGNED_UPLOAD_URL_EXPIRES")
    admin_video_url_expires: int = Field(60 * 60, alias="ADMIN_VIDEO_URL_EXPIRES")
    video_access_url_expires: int = Field(24 * 60 * 60, alias="VIDEO_ACCESS_URL_EXPIRES")

    # ---- Proctoring
    proctoring_event_cap: int = Field(4000, alias="PROCTORING_EVENT_CAP")

    # ---- LLM scoring (Groq, OpenAI-compatible)
    groq_api_key: Optional[str] = Field(default=None, alias="GROQ_API_KEY")
    groq_model: str = Field("llama-3.3-70b-versatile", alias="GROQ_MODEL")
    groq_api_url: str = Field("https://api.groq.com/openai/v1/chat/completions", alias="GROQ_API_URL")
    groq_timeout: float = Field(60.0, alias="GROQ_TIMEOUT")

    # ---- CORS raw (we'll parse)
    cors_origins_raw: str = Field(
        "http://localhost:3000,http://127.0.0.1:3000",
        alias="CORS_ORIGINS",
    )

    # ---- Redis / Celery
    redis_url: Optional[str] = Field("redis://127.0.0.1:6379/0", alias="REDIS_URL")
    celery_broker_url: Optional[str] = Field(default=None, alias="CELERY_BROKER_URL")
    celery_result_backend: Optional[str] = Field(default=None, alias="CELERY_RESULT_BACKEND")
    cleanup_interval_seconds: int = Field(60 * 60, alias="CLEANUP_INTERVAL_SECONDS")

    # ---- Helpers / parsed properties
    @property
    def cors_origins(self) -> List[str]:
        s = (self.cors_origins_raw or "").strip()
        if not s:
            return ["http://localhost:3000", "http://127.0.0.1:3000"]
        if s.startswith("["):
            try:
                arr = json.loads(s)
                if isinstance(arr, list):
                    return [str(x).strip() for x in arr if str(x).strip()]
            except ValueError:
                pass
        return [x.strip() for x in s.split(",") if x.strip()]

    @property
    def database_url_effective(self) -> str:
        return self.database_url or self.db_url_compat or "sqlite:///./assessments.sqlite"

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    @property
    def DATABASE_URL(self) -> str:
        return self.database_url_effective

    @property
    def S3_BUCKET(self) -> str:
        return self.s3_bucket


settings = Settings()
