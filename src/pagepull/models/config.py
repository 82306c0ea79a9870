"""Pydantic configuration models for pagepull."""

import os
import re
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..errors import ConfigError
from .page import WaitStrategy

DEFAULT_API_URL = "https://api.pagepull.dev/v1"


def _expand_env_var(value: Optional[str]) -> Optional[str]:
    """Expand environment variable references in a string.

    Supports $VAR and ${VAR} syntax. Unset variables expand to an empty
    string so a missing key reads as "not configured".
    """
    if value is None:
        return None

    # Match $VAR or ${VAR}
    pattern = r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)"

    def replace(match: re.Match) -> str:
        var_name = match.group(1) or match.group(2)
        return os.environ.get(var_name, "")

    return re.sub(pattern, replace, value)


def _default_api_url() -> str:
    return os.environ.get("PAGEPULL_API_URL", DEFAULT_API_URL)


class ApiConfig(BaseModel):
    """Configuration for the remote render service.

    The API key supports environment variable expansion using $VAR or
    ${VAR} syntax, for example ``api_key: ${SCRAPER_TOKEN}``.
    """

    base_url: str = Field(
        default_factory=_default_api_url,
        validate_default=True,
        description="Render service base URL",
    )
    api_key: Optional[str] = Field("$PAGEPULL_API_KEY", description="API key sent as X-API-Key")
    timeout: float = Field(60.0, gt=0, description="Request timeout in seconds (rendering is slow)")
    max_content_size: int = Field(
        50 * 1024 * 1024,
        ge=1024,
        description="Maximum response size in bytes",
    )
    user_agent: Optional[str] = Field(None, description="Custom User-Agent header")

    model_config = {"extra": "forbid"}

    def model_post_init(self, __context: object) -> None:
        """Expand environment variables in the API key after init."""
        if self.api_key:
            object.__setattr__(self, "api_key", _expand_env_var(self.api_key) or None)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class ExtractionConfig(BaseModel):
    """Configuration for content extraction and normalization."""

    dedup_lookback: int = Field(
        3,
        ge=0,
        description="Number of previously kept paragraphs checked for duplicates",
    )
    min_article_words: int = Field(
        50,
        ge=1,
        description="Minimum words for structural extraction to count as a success",
    )
    extra_remove_selectors: list[str] = Field(
        default_factory=list,
        description="CSS selectors removed by the fallback pruner in addition to the defaults",
    )
    cpu_workers: Optional[int] = Field(
        None,
        ge=1,
        description="Thread pool workers for extraction (None = run inline on the event loop)",
    )

    model_config = {"extra": "forbid"}


class BatchConfig(BaseModel):
    """Configuration for multi-URL fetches."""

    max_urls: int = Field(10, ge=1, le=10, description="Maximum URLs per batch")
    default_wait_for: WaitStrategy = Field(
        WaitStrategy.NETWORKIDLE,
        description="Load condition used when the caller does not pass one",
    )

    model_config = {"extra": "forbid"}


class PagepullConfig(BaseModel):
    """
    Root configuration model for pagepull.

    Example:
        config = PagepullConfig(
            api=ApiConfig(base_url="https://scraper.example.com/api"),
            extraction=ExtractionConfig(dedup_lookback=5),
        )

    YAML format:
        api:
          base_url: https://scraper.example.com/api
          api_key: ${SCRAPER_TOKEN}
        extraction:
          dedup_lookback: 5
        log_level: DEBUG
    """

    api: ApiConfig = Field(default_factory=ApiConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string (the API key is never written out)."""
        import yaml

        data = self.model_dump(mode="json", exclude_none=True, exclude={"api": {"api_key"}})
        return yaml.dump(data, default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "PagepullConfig":
        """
        Load config from YAML string.

        Raises:
            ConfigError: If the YAML is malformed or does not validate
        """
        import yaml

        try:
            data = yaml.safe_load(yaml_str) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Config must be a YAML mapping")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_yaml_file(cls, path: Path) -> "PagepullConfig":
        """Load config from YAML file."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        return cls.from_yaml(text)
