from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docintake"
    db_username: str = "docintake"
    db_password: str = "secret"
    db_connect_timeout: int = 10
    db_pool_min_size: int = 1
    db_pool_max_size: int = 5
    db_pool_timeout: float = 30.0

    uploads_root: str = "uploads"

    rasterizer_engine: str = "pymupdf"
    rasterizer_dpi: int = 200

    ocr_language: str = "eng"
    tesseract_cmd: str = ""

    category_rules_path: str = ""
