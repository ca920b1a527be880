from pydantic import field_validator
from pydantic_settings import BaseSettings
import ipaddress


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "DNS Switcher"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ALLOWED_ORIGINS: str = "*"

    # HTTPS
    HTTPS_ONLY: bool = False

    # MikroTik RouterOS REST API
    MIKROTIK_HOST: str = "192.168.88.1"
    MIKROTIK_PORT: int = 443
    MIKROTIK_USE_SSL: bool = True
    MIKROTIK_SSL_VERIFY: bool = False  # RouterOS ships a self-signed cert by default
    MIKROTIK_TIMEOUT: float = 10.0
    MIKROTIK_USERNAME: str
    MIKROTIK_PASSWORD: str
    DHCP_SERVER: str = ""  # empty = let the router pick

    # DNS management
    CUSTOM_DNS: str = "8.8.8.8"
    APP_COMMENT: str = "DNS-Switcher-Managed"

    # Reverse proxy
    TRUSTED_IP_HEADER: str = "X-Real-IP"  # empty disables header lookup

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MUTATIONS: str = "10/minute"

    # Frontend
    STATIC_DIR: str = "static"

    @field_validator("CUSTOM_DNS")
    @classmethod
    def validate_custom_dns(cls, v: str) -> str:
        try:
            ipaddress.IPv4Address(v)
        except ValueError:
            raise ValueError(f"CUSTOM_DNS must be an IPv4 address: {v}")
        return v

    @field_validator("APP_COMMENT")
    @classmethod
    def validate_comment(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("APP_COMMENT must not be empty")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
