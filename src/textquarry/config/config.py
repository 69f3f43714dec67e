"""
Configuration management for textquarry using Pydantic.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, ClassVar, List, Optional, cast

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

KNOWN_STRATEGIES = ("render_proxy", "json_proxy", "raw_proxy")

# --- Nested Configuration Models ---


class FetchConfig(BaseModel):
    """Bounded fetcher configuration."""

    timeout: float = Field(
        default=5.0,
        description="Wall-clock limit in seconds for one request, connection and body download included.",
    )
    user_agent: str = Field(
        default="textquarry/0.1 (+https://github.com/textquarry/textquarry)",
        description="User-Agent string for HTTP requests.",
    )

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v


class StrategyConfig(BaseModel):
    """Acquisition strategies and the endpoints they call.

    Endpoint templates are formatted with ``url`` (the target URL as given)
    and ``url_quoted`` (the target URL fully percent-encoded).
    """

    order: List[str] = Field(
        default_factory=lambda: list(KNOWN_STRATEGIES),
        description="Strategies to try, highest priority first.",
    )
    render_proxy_template: str = Field(default="https://r.jina.ai/{url}")
    render_proxy_api_key: Optional[str] = Field(
        default=None, description="Bearer token for the rendering service, if any."
    )
    json_proxy_template: str = Field(default="https://api.allorigins.win/get?url={url_quoted}")
    raw_proxy_template: str = Field(default="https://corsproxy.io/?{url_quoted}")

    @field_validator("order")
    @classmethod
    def validate_order(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("order must contain at least one strategy")
        for name in v:
            if name not in KNOWN_STRATEGIES:
                raise ValueError(f"Unknown strategy '{name}'. Available strategies: {list(KNOWN_STRATEGIES)}")
        return v


class ExtractionSettings(BaseModel):
    """Thresholds used when deciding whether extracted text is usable."""

    min_content_length: int = Field(default=50, ge=1, description="Shortest body accepted as a result.")
    thin_body_length: int = Field(
        default=150, ge=0, description="Bodies shorter than this may be replaced by the meta description."
    )
    min_description_length: int = Field(
        default=50, ge=0, description="Shortest meta description usable as a replacement body."
    )
    bot_sample_length: int = Field(
        default=2000, ge=0, description="Leading body characters inspected for challenge-page wording."
    )


class TranscriptConfig(BaseModel):
    """Video transcript service used by the source resolver."""

    endpoint_template: str = Field(default="https://api.supadata.ai/v1/youtube/transcript?url={url_quoted}")
    api_key: Optional[str] = Field(default=None, description="Sent as the x-api-key header.")


class MonitoringConfig(BaseModel):
    """Configuration for logging output."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to console.")

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


class WebConfig(BaseModel):
    """Configuration for the HTTP API."""

    host: str = Field(default="127.0.0.1", description="Host for the web server.")
    port: int = Field(default=8000, description="Port for the web server.")


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "textquarry"
    version: str = "0.1.0"
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    strategies: StrategyConfig = Field(default_factory=StrategyConfig)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    transcripts: TranscriptConfig = Field(default_factory=TranscriptConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    web: WebConfig = Field(default_factory=WebConfig)

    model_config = SettingsConfigDict(env_prefix="TEXTQUARRY_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    for path in (current_dir / "config.yaml", current_dir / "config.yml"):
        if path.exists():
            return path
    return None


def load_config(path: Path | None = None) -> Config:
    """Load configuration from an explicit file, a discovered file, or defaults."""
    config_path = path or find_config_file()
    if config_path is None:
        return Config()
    return Config.from_yaml(config_path)


# --- Lazy Configuration Loader ---


class LazyConfig:
    """
    A proxy for the Config object that delays its loading and validation
    until an attribute is first accessed. This prevents configuration errors
    from crashing the application on import.
    """

    _config: ClassVar[Config | None] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __getattr__(self, name: str) -> Any:
        if self.__class__._config is None:
            with self.__class__._lock:
                if self.__class__._config is None:
                    self.__class__._config = self._load_config_with_fallback()
        return getattr(self.__class__._config, name)

    def _load_config_with_fallback(self) -> Config:
        """Load configuration from file or fall back to defaults."""
        config_path = find_config_file()
        if config_path:
            try:
                log.info("Lazy loading configuration from: %s", config_path)
                return Config.from_yaml(config_path)
            except (ValidationError, FileNotFoundError, yaml.YAMLError) as e:
                log.error(
                    "Failed to load or validate configuration from '%s': %s. "
                    "Falling back to default settings. Please check your config file.",
                    config_path,
                    e,
                    exc_info=log.getEffectiveLevel() <= logging.DEBUG,
                )
        else:
            log.info("No config file found. Using default settings for lazy load.")

        try:
            return Config()
        except ValidationError as e:
            log.critical("FATAL: Default configuration is invalid: %s", e, exc_info=True)
            raise RuntimeError(f"Default configuration is invalid, cannot start: {e}") from e


# --- Global Settings Instance ---
# Entry points only; the extraction engine always receives an explicit Config.
settings: "Config" = cast("Config", LazyConfig())
