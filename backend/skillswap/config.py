"""
Application configuration settings
"""

from pydantic_settings import BaseSettings
from pydantic import computed_field
from functools import lru_cache
from typing import List, Set, Optional
from urllib.parse import quote_plus


class Settings(BaseSettings):
    # Database Configuration (Individual Parameters)
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "skillswap"
    db_user: str = "skillswap"
    db_password: str = ""
    db_driver: str = "postgresql"

    @computed_field
    @property
    def database_url(self) -> str:
        """Compile database URL from individual parameters"""
        if self.db_driver.startswith("sqlite"):
            return f"{self.db_driver}:///{self.db_name}"

        encoded_user = quote_plus(self.db_user)
        encoded_password = quote_plus(self.db_password)

        # Cloud SQL unix sockets are passed via connect_args in database.py
        if self.db_host.startswith('/cloudsql/'):
            return f"{self.db_driver}://{encoded_user}:{encoded_password}@/{self.db_name}"
        return f"{self.db_driver}://{encoded_user}:{encoded_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    # Storage backend: "database" or "memory"
    storage_backend: str = "database"

    # Sessions
    session_cookie_name: str = "skillswap_session"
    session_max_age_seconds: int = 24 * 60 * 60
    session_cookie_secure: bool = False

    # Application
    app_name: str = "SkillSwap"
    debug: bool = False

    # CORS - comma-separated list
    allowed_origins: str = "http://localhost:5173,http://localhost:3000"

    # AWS S3 Configuration (media uploads)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-1"
    s3_bucket_name: Optional[str] = None
    s3_base_url: Optional[str] = None

    # File uploads
    max_upload_size: int = 5 * 1024 * 1024
    allowed_image_extensions: str = "jpg,jpeg,png,gif,webp"

    # Logging Configuration
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_to_file: bool = False
    log_file_path: str = "logs/skillswap.log"
    log_max_size_mb: int = 10
    log_backup_count: int = 5
    log_to_console: bool = True
    log_verbosity: str = "minimal"  # "minimal" or "full" - full also echoes SQL

    def get_allowed_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.allowed_origins.split(',') if origin.strip()]

    def get_allowed_image_extensions(self) -> Set[str]:
        """Parse image extensions from comma-separated string"""
        return {ext.strip().lower() for ext in self.allowed_image_extensions.split(',') if ext.strip()}

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings():
    return Settings()


settings = get_settings()
