"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class RegistryConfig(BaseSettings):
    """Parcel registry configuration."""

    model_config = {"env_prefix": "LANDREGISTRY_REGISTRY_"}

    max_parcels: int = 5000
    registration_fee: int = 500
    burn_identity: str = "SP000000000000000000002Q6VF78"


class AuditConfig(BaseSettings):
    """Audit logging configuration."""

    model_config = {"env_prefix": "LANDREGISTRY_AUDIT_"}

    enabled: bool = True
    log_dir: str = "data/audit"
    hash_algorithm: str = "sha256"


class DatabaseConfig(BaseSettings):
    """Snapshot database configuration."""

    model_config = {"env_prefix": "LANDREGISTRY_DB_"}

    url: str | None = None
    echo: bool = False
    pool_size: int = 5


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "LANDREGISTRY_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    db: DatabaseConfig = Field(default_factory=DatabaseConfig)
