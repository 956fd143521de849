import os
from typing import List


class Settings:
    """Project settings"""

    def __init__(self):
        # FastAPI settings
        self.debug = os.getenv("DEBUG", "False").lower() == "true"
        self.allowed_origins: List[str] = os.getenv("ALLOWED_ORIGINS", "*").split(",")

        # Database
        self.database_url = os.getenv(
            "DATABASE_URL",
            "postgresql://postgres:postgres@db:5432/postgres"
        )

        # Service identity reported by /health
        self.service_name = os.getenv("SERVICE_NAME", "Transaction Webhook Service")
        self.version = os.getenv("SERVICE_VERSION", "1.0.0")

        # Transactions
        self.default_currency = os.getenv("DEFAULT_CURRENCY", "INR")
        self.confirmation_delay_s = float(os.getenv("CONFIRMATION_DELAY_SECONDS", "30"))
        self.shutdown_grace_s = float(os.getenv("SHUTDOWN_GRACE_SECONDS", "5"))

        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()


def get_settings() -> Settings:
    """Returns the project settings"""
    return Settings()
