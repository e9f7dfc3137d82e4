from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/homehni"
    db_echo: bool = False
    db_pool_size: int = 20
    db_max_overflow: int = 30
    db_pool_timeout: int = 60

    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7  # 1 week

    smtp_host: str = "smtp.homehni.com"
    smtp_port: int = 587
    smtp_user: str = "notifications@homehni.com"
    smtp_pass: str = ""

    app_base_url: str = "https://homehni.com"
    log_level: str = "INFO"

    search_default_page_size: int = 10
    search_max_page_size: int = 100
    search_fallback_enabled: bool = True

    media_root: str = "media"
    media_base_url: str = "/media"
    max_images_per_listing: int = 10
    min_images_per_listing: int = 0

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
