"""Configuration management using Pydantic settings."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from nightshift.simulation.shift import ShiftConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "NIGHTSHIFT"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Shift timing
    shift_duration: float = 7200.0        # simulated seconds (midnight -> 02:00)
    real_seconds_per_hour: float = 1500.0  # 1 simulated minute = 25 real seconds
    tick_hz: float = 10.0

    # Pressure
    max_anomalies: int = 5                 # undetected count that ends the shift
    first_spawn_delay: float = 15.0        # real seconds before the first anomaly
    alert_threshold: int = 3               # undetected count that raises tension_alert

    # Reproducible shifts (None = fresh entropy each run)
    rng_seed: Optional[int] = None

    def shift_config(self) -> ShiftConfig:
        return ShiftConfig(
            duration=self.shift_duration,
            real_seconds_per_hour=self.real_seconds_per_hour,
            max_anomalies=self.max_anomalies,
            first_spawn_delay=self.first_spawn_delay,
            alert_threshold=self.alert_threshold,
        )


settings = Settings()
