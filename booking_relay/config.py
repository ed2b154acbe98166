"""
Booking relay configuration.
"""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings from environment variables and ./.env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Razorpay
    RAZORPAY_KEY_ID: str = ""
    RAZORPAY_SECRET: str = ""
    GATEWAY_TIMEOUT_SECONDS: float = 30.0

    # Email
    SMTP_SERVER: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_TIMEOUT_SECONDS: float = 30.0
    SMTP_VERIFY_ON_STARTUP: bool = True
    EMAIL_USER: str = ""
    EMAIL_PASSWORD: str = ""
    ADMIN_EMAIL: str = ""  # falls back to EMAIL_USER

    # Business copy used in emails
    BUSINESS_NAME: str = "Mrs. Shereen Life Coaching"
    COACH_NAME: str = "Mrs. Shereen"
    CURRENCY_SYMBOL: str = "₹"

    # HTTP
    API_PREFIX: str = ""
    BUILD_DIR: str = "build"
    CORS_ORIGINS: str = "*"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_PATH: str = ""  # e.g. /app/logs/booking-relay.log

    VERSION: str = "1.0.0"

    @property
    def is_gateway_configured(self) -> bool:
        """Check if Razorpay credentials are present"""
        return bool(self.RAZORPAY_KEY_ID and self.RAZORPAY_SECRET)

    @property
    def is_email_configured(self) -> bool:
        """Check if SMTP credentials are present"""
        return bool(self.EMAIL_USER and self.EMAIL_PASSWORD)

    @property
    def admin_email(self) -> str:
        return self.ADMIN_EMAIL or self.EMAIL_USER

    @property
    def api_prefix(self) -> str:
        """Normalized route prefix: '' or '/something' without trailing slash."""
        prefix = self.API_PREFIX.strip().rstrip("/")
        if prefix and not prefix.startswith("/"):
            prefix = "/" + prefix
        return prefix

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    def validate_required_config(self) -> list:
        """Validate that required configuration is present"""
        errors = []

        if not self.RAZORPAY_KEY_ID:
            errors.append("RAZORPAY_KEY_ID is required")

        if not self.RAZORPAY_SECRET:
            errors.append("RAZORPAY_SECRET is required")

        return errors

    def get_config_summary(self) -> dict:
        """Get a summary of configuration (without sensitive data)"""
        return {
            "razorpay_key_id": self.RAZORPAY_KEY_ID[:10] + "..." if self.RAZORPAY_KEY_ID else "",
            "gateway_configured": self.is_gateway_configured,
            "email_configured": self.is_email_configured,
            "email_user": self.EMAIL_USER,
            "smtp_server": self.SMTP_SERVER,
            "smtp_port": self.SMTP_PORT,
            "api_prefix": self.api_prefix,
            "build_dir": self.BUILD_DIR,
            "debug": self.DEBUG,
            "host": self.HOST,
            "port": self.PORT,
            "log_level": self.LOG_LEVEL,
        }


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
