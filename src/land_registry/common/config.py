"""Land registry configuration via pydantic-settings."""

import warnings
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_DEFAULTS = {
    "secret_key": "insecure-dev-key-change-me",
    "admin_password": "admin123",
    "verifier_password": "verifier123",
}


class RegistrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LAND_REGISTRY_")

    environment: str = "development"
    secret_key: str = "insecure-dev-key-change-me"

    # Database
    db_url: str = "sqlite+aiosqlite:///./data/land_registry.db"

    # API
    api_title: str = "Land Registry"
    api_version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 5000
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Sessions
    session_cookie: str = "land_registry_session"
    session_max_age: int = 7 * 24 * 3600  # seconds

    log_level: str = "INFO"

    # Seeded accounts (cli seed-users)
    admin_password: str = "admin123"
    verifier_password: str = "verifier123"

    @property
    def is_sqlite(self) -> bool:
        return self.db_url.startswith("sqlite")

    def validate_for_production(self) -> None:
        """Raise if insecure defaults are used in non-development environments."""
        insecure_fields = [
            field
            for field, default in _INSECURE_DEFAULTS.items()
            if getattr(self, field) == default
        ]

        if self.environment != "development" and insecure_fields:
            env_vars = ", ".join(f"LAND_REGISTRY_{f.upper()}" for f in insecure_fields)
            raise RuntimeError(
                f"Insecure default values detected in '{self.environment}' environment. "
                f"Set these environment variables to secure values: {env_vars}."
            )

        if insecure_fields:
            warnings.warn(
                "Using insecure defaults — set LAND_REGISTRY_SECRET_KEY, "
                "LAND_REGISTRY_ADMIN_PASSWORD, LAND_REGISTRY_VERIFIER_PASSWORD for production",
                UserWarning,
                stacklevel=2,
            )


@lru_cache
def get_settings() -> RegistrySettings:
    settings = RegistrySettings()
    settings.validate_for_production()
    return settings
