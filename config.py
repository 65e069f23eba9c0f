"""
Configuration management for the WhatsApp subscriber bot.

Loads environment variables from .env file and provides typed access to configuration.
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_KEY = "admin"


class Config:
    """Process-level configuration for the bot."""

    # WhatsApp Cloud API
    WHATSAPP_ACCESS_TOKEN = os.getenv("WHATSAPP_ACCESS_TOKEN", "")
    WHATSAPP_PHONE_NUMBER_ID = os.getenv("WHATSAPP_PHONE_NUMBER_ID", "")
    WHATSAPP_VERIFY_TOKEN = os.getenv("WHATSAPP_VERIFY_TOKEN", "")

    # Admin
    ADMIN_KEY = os.getenv("ADMIN_KEY", DEFAULT_ADMIN_KEY)

    # Server
    PORT = int(os.getenv("PORT", "3000"))
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> bool:
        """Validate that required configuration is set."""
        required = [
            "WHATSAPP_ACCESS_TOKEN",
            "WHATSAPP_PHONE_NUMBER_ID",
            "WHATSAPP_VERIFY_TOKEN",
        ]
        missing = [key for key in required if not getattr(cls, key)]

        if missing:
            logger.warning(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Please set them in .env file"
            )
            return False

        if cls.ADMIN_KEY == DEFAULT_ADMIN_KEY:
            logger.warning("ADMIN_KEY is the default value; set a real secret")

        return True
