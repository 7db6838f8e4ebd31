"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PY_DELAUNAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Logging format (json or plain)")

    # Numerical tolerances (normalized unit-square space)
    epsilon: float = Field(
        default=1e-12, gt=0, description="Tolerance for orientation and containment tests"
    )
    incircle_tolerance: float = Field(
        default=1e-12, gt=0, description="Relative tolerance for the in-circle determinant"
    )
    duplicate_tolerance: float = Field(
        default=1e-10, gt=0, description="Distance under which two points are merged"
    )

    # Triangulation
    validate_mesh: bool = Field(
        default=False, description="Run full mesh consistency checks after triangulation"
    )


settings = Settings()
