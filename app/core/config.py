import logging
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # Either a full SQLAlchemy URL or the discrete DB_* parts below
    DATABASE_URL: Optional[str] = None
    DB_HOST: Optional[str] = None
    DB_PORT: int = 3306
    DB_USER: Optional[str] = None
    DB_PASSWORD: Optional[str] = None
    DB_NAME: Optional[str] = None
    DB_SSL: bool = False

    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_HOURS: int = 24

    GOOGLE_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"

    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None

    FRONTEND_URL: str = "http://localhost:3000"
    ENVIRONMENT: str = "development"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL, built from DB_* parts when DATABASE_URL is unset."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        url = URL.create(
            drivername="mysql+pymysql",
            username=self.DB_USER or "root",
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST or "localhost",
            port=self.DB_PORT,
            database=self.DB_NAME or None,
        )
        return url.render_as_string(hide_password=False)

    def missing_required(self) -> List[str]:
        required = {
            "DB_HOST": self.DB_HOST or self.DATABASE_URL,
            "DB_NAME": self.DB_NAME or self.DATABASE_URL,
            "JWT_SECRET": self.JWT_SECRET,
            "GOOGLE_API_KEY": self.GOOGLE_API_KEY,
        }
        return [key for key, value in required.items() if not value]


settings = Settings()
