"""
Arsip & Surat BIAK Configuration
"""
import os
from functools import lru_cache
from dotenv import load_dotenv

# Load .env file
load_dotenv()


class Settings:
    """Application settings loaded from environment variables"""

    def __init__(self):
        # Database
        self.db_host: str = os.getenv("DB_HOST", "localhost")
        self.db_port: int = int(os.getenv("DB_PORT", "3306"))
        self.db_user: str = os.getenv("DB_USER", "root")
        self.db_password: str = os.getenv("DB_PASSWORD", "")
        self.db_name: str = os.getenv("DB_NAME", "arsip_biak")
        self.database_url_override: str = os.getenv("DATABASE_URL", "")

        # App
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.cors_origins: list = [
            o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
        ]

        # Auth
        self.jwt_secret: str = os.getenv("JWT_SECRET", "arsip-biak-secret-key-change-in-production")
        self.jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
        self.jwt_expires_minutes: int = int(os.getenv("JWT_EXPIRES_MINUTES", str(60 * 24)))
        self.default_admin_username: str = os.getenv("DEFAULT_ADMIN_USERNAME", "admin")
        self.default_admin_password: str = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")

        # Uploads
        self.upload_dir: str = os.getenv("UPLOAD_DIR", "uploads")
        self.max_upload_mb: int = int(os.getenv("MAX_UPLOAD_MB", "10"))

    @property
    def database_url(self) -> str:
        """Generate database connection URL"""
        if self.database_url_override:
            return self.database_url_override
        return f"mysql+pymysql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
