"""Tests for configuration models."""

import pytest
from pagetomark.models.config import (
    DEFAULT_CAPTION_LANGUAGES,
    ConverterConfig,
    NetworkConfig,
    ProxyConfig,
    TranscriptConfig,
)
from pydantic import ValidationError


class TestDefaults:
    """Tests for default values."""

    def test_converter_defaults(self):
        config = ConverterConfig()

        assert config.network.timeout == 20.0
        assert config.network.max_retries == 0
        assert config.proxy.cors_proxy_url is None
        assert config.proxy.cors_proxy_mode == "raw"
        assert config.transcript.languages == DEFAULT_CAPTION_LANGUAGES
        assert config.transcript.default_title == "YouTube Video Transcript"
        assert config.default_document_title == "Untitled"
        assert config.max_concurrent == 5

    def test_language_order(self):
        assert DEFAULT_CAPTION_LANGUAGES == ["en", "ru", "es", "fr", "de"]


class TestValidation:
    """Tests for invalid values."""

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            ConverterConfig(unknown_option=True)

    def test_invalid_proxy_mode(self):
        with pytest.raises(ValidationError):
            ProxyConfig(cors_proxy_mode="xml")

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            NetworkConfig(timeout=0)

    def test_watch_url_needs_placeholder(self):
        with pytest.raises(ValidationError):
            TranscriptConfig(watch_url="https://www.youtube.com/watch")

    def test_max_concurrent_at_least_one(self):
        with pytest.raises(ValidationError):
            ConverterConfig(max_concurrent=0)


class TestEnvironment:
    """Tests for environment-driven configuration."""

    def test_env_expansion(self, monkeypatch):
        monkeypatch.setenv("RELAY_HOST", "relay.example.com")
        config = ProxyConfig(transcript_relay_url="https://${RELAY_HOST}/transcript", cors_proxy_url="$RELAY_HOST")

        assert config.transcript_relay_url == "https://relay.example.com/transcript"
        assert config.cors_proxy_url == "relay.example.com"

    def test_unset_variable_left_alone(self, monkeypatch):
        monkeypatch.delenv("NOT_SET_ANYWHERE", raising=False)
        config = ProxyConfig(cors_proxy_url="https://$NOT_SET_ANYWHERE/")
        assert config.cors_proxy_url == "https://$NOT_SET_ANYWHERE/"

    def test_from_env(self):
        config = ConverterConfig.from_env(
            {
                "PAGETOMARK_CORS_PROXY_URL": "https://cors.example.com",
                "PAGETOMARK_CORS_PROXY_MODE": "json",
                "PAGETOMARK_TRANSCRIPT_RELAY_URL": "https://relay.example.com",
                "PAGETOMARK_LOG_LEVEL": "debug",
            }
        )

        assert config.proxy.cors_proxy_url == "https://cors.example.com"
        assert config.proxy.cors_proxy_mode == "json"
        assert config.proxy.transcript_relay_url == "https://relay.example.com"
        assert config.log_level == "DEBUG"

    def test_from_empty_env(self):
        assert ConverterConfig.from_env({}) == ConverterConfig()


class TestYaml:
    """Tests for YAML round trips."""

    def test_round_trip(self):
        pytest.importorskip("yaml")
        config = ConverterConfig(
            proxy=ProxyConfig(cors_proxy_url="https://cors.example.com"),
            transcript=TranscriptConfig(primary_language="de", languages=["de", "en"]),
            max_concurrent=2,
        )
        assert ConverterConfig.from_yaml(config.to_yaml()) == config

    def test_from_yaml_file(self, tmp_path):
        pytest.importorskip("yaml")
        path = tmp_path / "pagetomark.yaml"
        path.write_text("proxy:\n  cors_proxy_mode: json\nmax_concurrent: 3\n")

        config = ConverterConfig.from_yaml_file(path)
        assert config.proxy.cors_proxy_mode == "json"
        assert config.max_concurrent == 3
