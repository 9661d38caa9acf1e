import os
from dotenv import load_dotenv
from typing import Optional

# Configuration constants
SLACK_POST_MESSAGE_URL = "https://slack.com/api/chat.postMessage"

load_dotenv()

class Config:
    """Configuration class for the survey service."""

    # Slack configuration
    SLACK_AUTH_TOKEN: str = os.getenv("SLACK_AUTH_TOKEN", "")
    SLACK_SIGNING_SECRET: str = os.getenv("SLACK_SIGNING_SECRET", "")
    SLACK_POST_MESSAGE_URL: str = os.getenv("SLACK_POST_MESSAGE_URL", SLACK_POST_MESSAGE_URL)

    # Survey configuration (optional JSON file with a partial override)
    SURVEY_CONFIG_PATH: Optional[str] = os.getenv("SURVEY_CONFIG_PATH")

    # Web server configuration
    WEB_AUTH_TOKEN: str = os.getenv("WEB_AUTH_TOKEN", "")
    PORT: int = int(os.getenv("PORT", "3000"))
    HOST: str = "0.0.0.0"
    SSL_CERT_PATH: Optional[str] = os.getenv("SSL_CERT_PATH")
    SSL_KEY_PATH: Optional[str] = os.getenv("SSL_KEY_PATH")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration values."""
        if not cls.SLACK_AUTH_TOKEN:
            raise ValueError("SLACK_AUTH_TOKEN is required")
