"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Settings are frozen after load and handed to components
explicitly (token issuer, cache, WeChat and SMS clients).
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    SECRET_KEY is always required. DATABASE_URL may be empty at load time;
    endpoints that need the database then answer 503 (see get_db).
    WeChat OAuth and Tencent Cloud SMS are optional: without them the
    service runs in development mode (local login stand-in, fake SMS sender).
    """

    # App
    app_name: str = "wechat-identity"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (SQLAlchemy async + Alembic)
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Security / JWT
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    jwt_issuer: str = "wechat-identity"
    jwt_audience: str = "wechat-identity-clients"
    access_token_expire_minutes: int = 120  # 2 hours

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # WeChat OAuth (official account web authorization). Unset app id = development mode.
    wx_app_id: str | None = None
    wx_app_secret: SecretStr | None = None
    wx_authorize_url: str = "https://open.weixin.qq.com/connect/oauth2/authorize"
    wx_access_token_url: str = "https://api.weixin.qq.com/sns/oauth2/access_token"
    wx_scope: str = "snsapi_base"
    wx_fake_code: str = "1111"

    # Tencent Cloud SMS. Unset secret key = fake sender (development mode).
    tencentcloud_secret_id: str | None = None
    tencentcloud_secret_key: SecretStr | None = None
    tencentcloud_region: str = "ap-guangzhou"
    tencentcloud_sms_endpoint: str = "sms.tencentcloudapi.com"
    sms_sdk_app_id: str = ""
    sms_sign_name: str = ""
    sms_template_id: str = ""

    # Outbound HTTP (WeChat, SMS)
    http_timeout_seconds: float = 10.0

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    # Redis (SMS challenges, WeChat token cache, query result cache)
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    cache_ttl_volatile: int = 600  # 10 minutes: frequently queried, changing data
    cache_ttl_stable: int = 86_400  # 24 hours: near-static data

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required secrets and paired provider credentials."""
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.wx_app_id and not (
            self.wx_app_secret and self.wx_app_secret.get_secret_value()
        ):
            raise ValueError("WX_APP_SECRET is required when WX_APP_ID is set.")
        if self.tencentcloud_secret_key and not self.tencentcloud_secret_id:
            raise ValueError(
                "TENCENTCLOUD_SECRET_ID is required when TENCENTCLOUD_SECRET_KEY is set."
            )
        return self

    @property
    def wechat_enabled(self) -> bool:
        """True when a WeChat application credential is configured."""
        return bool(self.wx_app_id)

    @property
    def tencent_sms_enabled(self) -> bool:
        """True when Tencent Cloud SMS credentials are configured."""
        return bool(
            self.tencentcloud_secret_key
            and self.tencentcloud_secret_key.get_secret_value()
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
