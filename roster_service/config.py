from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./roster.db"
    DATABASE_SSL: bool = False
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30

    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    STORAGE_BUCKET: str = "student-images"
    STORAGE_TIMEOUT_SECONDS: float = 10.0
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024  # 5 MB

    CORS_ORIGINS: str = "*"
    HOST: str = "0.0.0.0"
    PORT: int = 3014
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
