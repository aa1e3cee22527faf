"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "narrative-shock"
    debug: bool = False
    log_level: str = "INFO"

    # Threshold engine: base trigger levels before calendar modifiers
    base_event_spike_threshold: int = 10
    base_chaos_spike_threshold: int = 4
    base_chaos_saturation_threshold: int = 8
    base_migration_threshold: int = 150

    # Hysteresis: episode age (cycles) and reason counts that relabel a shock
    fading_after_cycles: int = 3
    chronic_after_cycles: int = 5
    fading_max_reasons: int = 2
    chronic_max_reasons: int = 3

    model_config = {"env_prefix": "SHOCK_"}


settings = Settings()
