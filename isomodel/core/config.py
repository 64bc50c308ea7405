"""
Configuration management for isomodel.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Engine settings.

    Can be configured via environment variables (``ISOMODEL_*``) or a .env
    file. ``compile_model()`` copies what it needs into the compiled model, so
    changing settings never affects a model that is already compiled.
    """

    model_config = SettingsConfigDict(
        env_prefix="ISOMODEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Default setpoints for new models
    default_heating_setpoint: float = Field(default=21.0, description="Occupied heating setpoint (°C)")
    default_heating_setback: float = Field(default=16.0, description="Unoccupied heating setpoint (°C)")
    default_cooling_setpoint: float = Field(default=24.0, description="Occupied cooling setpoint (°C)")
    default_cooling_setback: float = Field(default=28.0, description="Unoccupied cooling setpoint (°C)")

    # Gain utilization (ISO 13790 monthly method)
    utilization_a0: float = Field(default=1.0, description="Reference numerical parameter a_0 (-)")
    utilization_tau0_hours: float = Field(default=15.0, description="Reference time constant tau_0 (h)")
    heating_gain_loss_limit: float = Field(
        default=2.0,
        description="Gain/loss ratio above which a month needs no heating",
    )
    cooling_loss_gain_limit: float = Field(
        default=2.0,
        description="Loss/gain ratio above which a month needs no cooling",
    )

    # Climate aggregation
    heating_degree_day_base: float = Field(default=18.0, description="HDD base temperature (°C)")
    cooling_degree_day_base: float = Field(default=18.0, description="CDD base temperature (°C)")
    reference_year: int = Field(default=2023, description="Non-leap year used for month lengths and weekdays")

    # Physical constants and geometry fallbacks
    air_heat_capacity: float = Field(default=1200.0, description="Volumetric heat capacity of air (J/m³K)")
    default_storey_height: float = Field(default=3.0, description="Floor-to-floor height when unknown (m)")

    # Logging
    log_level: str = Field(default="WARNING", description="Console level used by setup_logging()")


# Global settings instance
settings = Settings()
