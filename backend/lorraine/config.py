"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All deployment values come from environment variables or .env (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Trust tuning defaults equal DEFAULT_TRUST_PARAMETERS

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - SQLite default: the engine is single-tenant and works out-of-the-box without a server
    - trust_parameters() builds the frozen core object so the core never reads settings
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from lorraine.core.trust_parameters import TrustParameters


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///./lorraine.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres URLs come as postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_echo: bool = False

    # Trust tuning
    base_half_life_days: float = 30.0
    cross_modality_decay_multiplier: float = 1.5
    structural_importance_bonus: float = 0.1
    propagation_attenuation: float = 0.5
    failure_propagation_multiplier: float = 1.5
    propagation_threshold: float = 0.05
    cross_modality_confidence_bonus: float = 0.1
    stale_threshold_days: float = 60.0

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def trust_parameters(self) -> TrustParameters:
        return TrustParameters(
            base_half_life_days=self.base_half_life_days,
            cross_modality_decay_multiplier=self.cross_modality_decay_multiplier,
            structural_importance_bonus=self.structural_importance_bonus,
            propagation_attenuation=self.propagation_attenuation,
            failure_propagation_multiplier=self.failure_propagation_multiplier,
            propagation_threshold=self.propagation_threshold,
            cross_modality_confidence_bonus=self.cross_modality_confidence_bonus,
            stale_threshold_days=self.stale_threshold_days,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
