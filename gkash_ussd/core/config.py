from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Read env from container + optionally from a local .env file
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    # App
    ENVIRONMENT: str = Field(default="development", validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV", "environment"))
    APP_NAME: str = Field(default="gkash_ussd", validation_alias=AliasChoices("APP_NAME", "app_name"))
    SERVICE_VERSION: str = Field(default="1.0.0", validation_alias=AliasChoices("SERVICE_VERSION", "service_version"))
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))
    DEBUG: bool = Field(default=False, validation_alias=AliasChoices("DEBUG", "debug"))

    # GKash account backend
    GKASH_API_URL: str = Field(
        default="http://localhost:4000/api",
        validation_alias=AliasChoices("GKASH_API_URL", "gkash_api_url"),
    )
    GKASH_API_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        validation_alias=AliasChoices("GKASH_API_TIMEOUT_SECONDS", "gkash_api_timeout_seconds"),
    )

    # TiaraConnect SMS / USSD gateway
    TIARA_CONNECT_BASE_URL: str = Field(
        default="https://api.tiaraconnect.io/v1",
        validation_alias=AliasChoices("TIARA_CONNECT_BASE_URL", "tiara_connect_base_url"),
    )
    TIARA_CONNECT_API_KEY: str = Field(default="", validation_alias=AliasChoices("TIARA_CONNECT_API_KEY", "tiara_connect_api_key"))
    TIARA_CONNECT_SHORTCODE: str = Field(default="*123#", validation_alias=AliasChoices("TIARA_CONNECT_SHORTCODE", "tiara_connect_shortcode"))
    SMS_TIMEOUT_SECONDS: float = Field(default=30.0, validation_alias=AliasChoices("SMS_TIMEOUT_SECONDS", "sms_timeout_seconds"))

    # USSD sessions
    SESSION_TIMEOUT_SECONDS: float = Field(
        default=5 * 60,
        validation_alias=AliasChoices("SESSION_TIMEOUT_SECONDS", "session_timeout_seconds"),
    )
    SESSION_SWEEP_INTERVAL_SECONDS: float = Field(
        default=60,
        validation_alias=AliasChoices("SESSION_SWEEP_INTERVAL_SECONDS", "session_sweep_interval_seconds"),
    )
    # Some gateways post the whole "1*Jane Doe*0712..." history instead of the last keystroke
    USSD_CUMULATIVE_TEXT: bool = Field(
        default=False,
        validation_alias=AliasChoices("USSD_CUMULATIVE_TEXT", "ussd_cumulative_text"),
    )


settings = Settings()
