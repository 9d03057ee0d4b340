"""
Application Configuration
Manages environment variables and application settings
"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Database
    DATABASE_URL: str

    # Application
    APP_NAME: str = "Credential Vault API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    # Key material
    SALT_LENGTH: int = 16  # bytes, real and fabricated salts alike
    FAKE_SALT_KEY: str = ""  # keys the hash that seeds fabricated salts, any length

    # Invite issuance: when set, POST /auth/invite requires X-Invite-Token
    INVITE_ISSUER_TOKEN: Optional[str] = None

    @field_validator("ALLOWED_ORIGINS")
    @classmethod
    def parse_origins(cls, v: str) -> List[str]:
        """Parse comma-separated origins into list"""
        return [origin.strip() for origin in v.split(",")]

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


# Global settings instance
settings = Settings()
