"""Central environment-driven settings for the gateway process.

The process loads this once at startup. Behavior is controlled by environment
variables (see `.env.example`); the values are treated as immutable for the
lifetime of the process.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class GatewaySettings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "paybridge-gateway"
    environment: str = "development"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3001
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    webhook_tolerance_seconds: int = 300
    default_currency: str = "brl"
    main_network_prefix: str = "192.168.0."
    cors_allowed_origins: list[str] = []
    otel_exporter_otlp_endpoint: str | None = None
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


settings = GatewaySettings()
