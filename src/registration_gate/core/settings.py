"""Application settings and configuration.

This module defines all configuration options for the Registration Gate
service. Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Registration Gate", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        alias="ENVIRONMENT",
    )
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and session tokens
    secret_key: str = Field(alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    registration_token_expire_minutes: int = Field(
        default=15,
        alias="REGISTRATION_TOKEN_EXPIRE_MINUTES",
    )

    # Database configuration
    database_url: str = Field(default="sqlite:///./registration.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # One-time code issuance
    otp_length: int = Field(default=6, ge=4, le=10, alias="OTP_LENGTH")
    otp_ttl_seconds: int = Field(default=600, alias="OTP_TTL_SECONDS")
    otp_resend_cooldown_seconds: int = Field(default=15, alias="OTP_RESEND_COOLDOWN_SECONDS")
    otp_delivery_mode: Literal["echo", "transport"] | None = Field(
        default=None,
        alias="OTP_DELIVERY_MODE",
    )

    # Registration records
    registration_id_prefix: str = Field(default="AHV", alias="REGISTRATION_ID_PREFIX")
    form_schema_identifier: str = Field(default="main", alias="FORM_SCHEMA_IDENTIFIER")

    # Email transport (SMTP)
    smtp_host: str | None = Field(default=None, alias="SMTP_HOST")
    smtp_port: int = Field(default=465, alias="SMTP_PORT")
    smtp_user: str | None = Field(default=None, alias="SMTP_USER")
    smtp_password: str | None = Field(default=None, alias="SMTP_PASSWORD")
    email_from: str | None = Field(default=None, alias="EMAIL_FROM")
    email_from_name: str = Field(default="Registration Desk", alias="EMAIL_FROM_NAME")
    smtp_timeout_seconds: float = Field(default=10.0, alias="SMTP_TIMEOUT_SECONDS")

    # SMS gateway
    sms_gateway_url: str = Field(
        default="https://www.fast2sms.com/dev/bulkV2",
        alias="SMS_GATEWAY_URL",
    )
    sms_api_key: str | None = Field(default=None, alias="SMS_API_KEY")
    sms_sender_name: str = Field(default="Registration Desk", alias="SMS_SENDER_NAME")
    sms_http_timeout_seconds: float = Field(default=10.0, alias="SMS_HTTP_TIMEOUT_SECONDS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def effective_delivery_mode(self) -> str:
        """Return how one-time codes leave the process.

        ``echo`` writes codes to the operator log and is the default outside
        production; ``transport`` hands them to the SMTP and SMS transports.
        """
        if self.otp_delivery_mode is not None:
            return self.otp_delivery_mode
        return "transport" if self.is_production else "echo"


settings = Settings()  # type: ignore[call-arg]
