"""
Trip Copilot Configuration
Loads settings from environment variables
"""

import os
from typing import List
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment"""

    # OpenAI Configuration
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL_DEFAULT: str = os.getenv("OPENAI_MODEL_DEFAULT", "gpt-5-mini")
    OPENAI_TIMEOUT: float = float(os.getenv("OPENAI_TIMEOUT", "45"))
    OPENAI_MAX_RETRIES: int = int(os.getenv("OPENAI_MAX_RETRIES", "2"))

    # Web app bridge (flight status, transit suggestions)
    NEXT_API_BASE_URL: str = os.getenv("NEXT_API_BASE_URL", "http://localhost:3000")
    NEXT_API_TIMEOUT: float = float(os.getenv("NEXT_API_TIMEOUT", "15"))

    # Redis Configuration (empty = in-memory repository)
    REDIS_URL: str = os.getenv("REDIS_URL", "")

    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", os.getenv("PORT", "8080")))
    API_ENV: str = os.getenv("API_ENV", "development")

    # CORS Configuration
    ALLOWED_ORIGINS: str = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000")

    # Caller id used when no X-User-Id header is sent
    DEFAULT_USER_ID: str = os.getenv("DEFAULT_USER_ID", "local-test-user")

    @property
    def allowed_origins_list(self) -> List[str]:
        """Get CORS origins as a list"""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    def validate(self) -> None:
        """
        Check required settings

        Raises:
            ValueError: if the OpenAI key is missing
        """
        if not self.OPENAI_API_KEY:
            raise ValueError("OPENAI_API_KEY is required")


# Global settings instance
settings = Settings()
