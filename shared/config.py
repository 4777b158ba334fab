"""Configuration management for the demo experience."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="DEMO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_title: str = Field("360° Method Property Dashboard", description="Browser tab title")
    debug: bool = Field(False, description="Enable debug mode (console log renderer)")
    log_level: str = Field("INFO", description="Logging level")
    dev_tools_enabled: bool = Field(False, description="Show the developer portal switcher")

    # Guided tour timing
    navigate_delay_seconds: float = Field(0.3, description="Debounce before navigating after a step change")
    position_poll_seconds: float = Field(0.1, description="Polling interval for highlighted element positions")
    timer_tick_seconds: float = Field(0.25, description="How often the UI pumps the timer queue")

    # Exit funnel
    exit_intent_enabled: bool = Field(True, description="Offer the exit-intent dialog on desktop")

    # Engagement popups
    engagement_max_popups: int = Field(2, description="Maximum engagement popups per session")
    engagement_min_gap_seconds: float = Field(120, description="Minimum time between two popups")
    engagement_warmup_seconds: float = Field(60, description="No popup before this much engagement")
    engagement_time_trigger_seconds: float = Field(180, description="Engagement time that fires time_engaged")
    engagement_features_trigger: int = Field(5, description="Distinct features viewed that fire features_explored")


# Global settings instance
settings = Settings()
