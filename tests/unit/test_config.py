"""
Unit tests for the platform configuration record.
"""
import pytest
from pydantic import ValidationError

from gardenbridge.core.domain.config import (
    DEFAULT_MAX_RETRIES, DEFAULT_READY_TIMEOUT, DEFAULT_REQUEST_TIMEOUT, PlatformConfig
)


class TestPlatformConfig:
    """Test cases for PlatformConfig."""

    def test_defaults(self):
        config = PlatformConfig.from_mapping(None)

        assert config.api_key == ""
        assert not config.has_api_key
        assert config.unregister_on_shutdown is False
        assert config.debug is False
        assert config.request_timeout == DEFAULT_REQUEST_TIMEOUT
        assert config.max_retries == DEFAULT_MAX_RETRIES
        assert config.ready_timeout == DEFAULT_READY_TIMEOUT

    def test_host_keys_are_read(self, platform_config):
        config = PlatformConfig.from_mapping({**platform_config, "systemId": "sys-1", "unregisterOnShutdown": True})

        assert config.api_key == "test-api-key-123456"
        assert config.system_id == "sys-1"
        assert config.unregister_on_shutdown is True
        assert config.name == "matterbridge-plugin-gardena"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_api_key_means_absent(self, raw):
        assert not PlatformConfig.from_mapping({"apiKey": raw}).has_api_key

    def test_unknown_keys_are_ignored(self):
        config = PlatformConfig.from_mapping({"apiKey": "K1", "whiteList": ["a"]})

        assert "whiteList" not in config.to_mapping()

    def test_api_key_is_hidden_from_repr(self):
        assert "K-secret" not in repr(PlatformConfig.from_mapping({"apiKey": "K-secret"}))

    @pytest.mark.parametrize("changes", [{"requestTimeout": 0}, {"maxRetries": 0}, {"readyTimeout": -1}])
    def test_invalid_bounds_are_rejected(self, changes):
        with pytest.raises(ValidationError):
            PlatformConfig.from_mapping(changes)

    def test_config_is_immutable(self):
        config = PlatformConfig.from_mapping({"apiKey": "K1"})

        with pytest.raises(ValidationError):
            config.api_key = "K2"

    def test_merged_overlays_changes(self, platform_config):
        config = PlatformConfig.from_mapping(platform_config)

        merged = config.merged({"apiKey": "K2", "debug": True})

        assert merged.api_key == "K2"
        assert merged.debug is True
        assert merged.name == config.name
        assert config.api_key == "test-api-key-123456"

    def test_merged_accepts_field_names(self, platform_config):
        merged = PlatformConfig.from_mapping(platform_config).merged({"api_key": "K3"})

        assert merged.api_key == "K3"

    def test_merged_with_config_only_applies_set_fields(self, platform_config):
        base = PlatformConfig.from_mapping(platform_config)

        merged = base.merged(PlatformConfig.from_mapping({"debug": True}))

        assert merged.debug is True
        assert merged.api_key == base.api_key

    def test_to_mapping_round_trips_aliases(self, platform_config):
        config = PlatformConfig.from_mapping(platform_config)

        assert PlatformConfig.from_mapping(config.to_mapping()) == config
