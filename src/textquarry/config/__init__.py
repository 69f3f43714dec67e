"""Configuration models and loaders."""

from .config import (
    Config,
    ExtractionSettings,
    FetchConfig,
    MonitoringConfig,
    StrategyConfig,
    TranscriptConfig,
    WebConfig,
    load_config,
    settings,
)

__all__ = [
    "Config",
    "ExtractionSettings",
    "FetchConfig",
    "MonitoringConfig",
    "StrategyConfig",
    "TranscriptConfig",
    "WebConfig",
    "load_config",
    "settings",
]
