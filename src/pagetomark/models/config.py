"""Pydantic configuration models for pagetomark."""

import os
import re
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_CAPTION_LANGUAGES = ["en", "ru", "es", "fr", "de"]


def _expand_env_var(value: Optional[str]) -> Optional[str]:
    """Expand environment variable references in a string.

    Supports $VAR and ${VAR} syntax. Returns original value if
    the env var is not set.
    """
    if value is None:
        return None

    # Match $VAR or ${VAR}
    pattern = r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)"

    def replace(match: re.Match) -> str:
        var_name = match.group(1) or match.group(2)
        return os.environ.get(var_name, match.group(0))

    return re.sub(pattern, replace, value)


class NetworkConfig(BaseModel):
    """Configuration for HTTP client and network behavior."""

    timeout: float = Field(20.0, gt=0, description="Per-call timeout in seconds")
    max_retries: int = Field(
        0,
        ge=0,
        description="Retries per call for 429/5xx and transport errors (0 = fail fast)",
    )
    retry_base_delay: float = Field(1.0, ge=0, description="Base delay for exponential backoff")
    user_agent: Optional[str] = Field(None, description="Custom User-Agent header")
    max_content_size: int = Field(
        20 * 1024 * 1024,
        ge=1024,
        description="Maximum response size in bytes",
    )

    model_config = {"extra": "forbid"}


class ProxyConfig(BaseModel):
    """Configuration for the relay services used to reach upstream content.

    Relay URLs support environment variable expansion ($VAR or ${VAR}).
    """

    cors_proxy_url: Optional[str] = Field(
        None,
        description="Relay base for page fetches (None = fetch directly)",
    )
    cors_proxy_mode: Literal["raw", "json"] = Field(
        "raw",
        description="Relay contract: raw body passthrough or JSON {contents} envelope",
    )
    transcript_relay_url: Optional[str] = Field(
        None,
        description="Delegated transcript relay answering ?videoId=<id> (None = skip)",
    )

    model_config = {"extra": "forbid"}

    def model_post_init(self, __context: object) -> None:
        """Expand environment variables in relay URLs after init."""
        if self.cors_proxy_url:
            object.__setattr__(self, "cors_proxy_url", _expand_env_var(self.cors_proxy_url))
        if self.transcript_relay_url:
            object.__setattr__(self, "transcript_relay_url", _expand_env_var(self.transcript_relay_url))


class TranscriptConfig(BaseModel):
    """Configuration for caption discovery."""

    primary_language: str = Field("en", min_length=2, description="Preferred caption language")
    languages: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CAPTION_LANGUAGES),
        min_length=1,
        description="Languages tried, in order, against the caption endpoint",
    )
    caption_api_url: str = Field(
        "https://www.youtube.com/api/timedtext",
        description="Caption-delivery endpoint (?v=<id>&lang=<code>)",
    )
    watch_url: str = Field(
        "https://www.youtube.com/watch?v={video_id}",
        description="Watch-page URL template",
    )
    default_title: str = Field("YouTube Video Transcript", min_length=1)

    model_config = {"extra": "forbid"}

    @field_validator("watch_url")
    @classmethod
    def _has_placeholder(cls, v: str) -> str:
        if "{video_id}" not in v:
            raise ValueError("watch_url must contain a {video_id} placeholder")
        return v


class ConverterConfig(BaseModel):
    """
    Root configuration model for pagetomark.

    Example:
        config = ConverterConfig(
            proxy=ProxyConfig(cors_proxy_url="https://cors.example.workers.dev"),
            transcript=TranscriptConfig(primary_language="de"),
        )

    YAML format:
        proxy:
          cors_proxy_url: https://cors.example.workers.dev
          transcript_relay_url: ${TRANSCRIPT_RELAY}
        transcript:
          languages: [en, de]
        max_concurrent: 3
    """

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    proxy: ProxyConfig = Field(default_factory=ProxyConfig)
    transcript: TranscriptConfig = Field(default_factory=TranscriptConfig)

    max_concurrent: int = Field(5, ge=1, description="Conversions run at once by convert_many")
    min_article_length: int = Field(
        25,
        ge=0,
        description="Minimum characters of article text for a document to count as extracted",
    )
    default_document_title: str = Field("Untitled", min_length=1)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConverterConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "ConverterConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "ConverterConfig":
        """
        Build a config from PAGETOMARK_* environment variables.

        Recognized: PAGETOMARK_CORS_PROXY_URL, PAGETOMARK_CORS_PROXY_MODE,
        PAGETOMARK_TRANSCRIPT_RELAY_URL, PAGETOMARK_LOG_LEVEL.
        """
        env = os.environ if environ is None else environ

        proxy_kwargs: dict = {}
        if env.get("PAGETOMARK_CORS_PROXY_URL"):
            proxy_kwargs["cors_proxy_url"] = env["PAGETOMARK_CORS_PROXY_URL"]
        if env.get("PAGETOMARK_CORS_PROXY_MODE"):
            proxy_kwargs["cors_proxy_mode"] = env["PAGETOMARK_CORS_PROXY_MODE"]
        if env.get("PAGETOMARK_TRANSCRIPT_RELAY_URL"):
            proxy_kwargs["transcript_relay_url"] = env["PAGETOMARK_TRANSCRIPT_RELAY_URL"]

        config_kwargs: dict = {"proxy": proxy_kwargs}
        if env.get("PAGETOMARK_LOG_LEVEL"):
            config_kwargs["log_level"] = env["PAGETOMARK_LOG_LEVEL"].upper()

        return cls.model_validate(config_kwargs)
