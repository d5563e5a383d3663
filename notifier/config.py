from pydantic_settings import BaseSettings

from .domain.errors import ConfigurationError


class Settings(BaseSettings):
    """Notifier settings loaded from environment."""

    # Service
    service_name: str = "notifier"
    log_level: str = "INFO"

    # Messaging gateway
    gateway_base_url: str = "https://smsquicker.com/api"
    gateway_api_secret: str = ""
    default_sender: str = "WhatsApp"  # Used when no admin number is configured
    attempt_timeout_seconds: float = 30.0
    probe_timeout_seconds: float = 10.0

    # Recipients
    admin_whatsapp_number: str = ""
    default_country_code: str = "91"

    # Manual fallback
    whatsapp_fallback_enabled: bool = True
    fallback_base_url: str = "https://wa.me"

    def require_credential(self) -> str:
        """Return the gateway credential, failing fast when it is not configured."""
        secret = self.gateway_api_secret.strip()
        if not secret:
            raise ConfigurationError("GATEWAY_API_SECRET is not configured")
        return secret

    @property
    def sender_id(self) -> str:
        return self.admin_whatsapp_number or self.default_sender

    class Config:
        env_file = ".env"
        case_sensitive = False
