"""
Core settings and environment variables for JANTA.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """
    
    # Application
    APP_NAME: str = "JANTA"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    
    # CORS - Frontend URLs allowed to access this API (comma separated)
    CORS_ORIGINS: str = "http://localhost:5173,http://127.0.0.1:5173"
    
    # Firebase (auth + Firestore + Storage)
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON
    FIREBASE_STORAGE_BUCKET: Optional[str] = None
    FIREBASE_WEB_API_KEY: Optional[str] = None  # Needed for password sign-in and token refresh
    AUTH_TIMEOUT_SECONDS: float = 10.0
    
    # Seed value for the first state admin. Only consulted when a profile is
    # created for the first time; afterwards the stored user_role is trusted.
    BOOTSTRAP_ADMIN_EMAIL: Optional[str] = None
    
    # Report images
    REPORT_IMAGES_FOLDER: str = "report-images"
    MAX_REPORT_IMAGES: int = 5
    
    # Feed sizes
    RECENT_REPORTS_LIMIT: int = 50
    
    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"
    
    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
