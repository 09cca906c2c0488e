"""Tests for LoaderConfig."""

import pytest

from pointbin.config import DEFAULT_BUFFER_SIZE, MAX_POINT_COUNT, LoaderConfig
from pointbin.domain.interfaces import DecodeMode
from pointbin.shared.exceptions import ConfigError


class TestLoaderConfig:
    """Defaults, coercion and validation."""

    def test_defaults(self):
        config = LoaderConfig()
        assert config.decode_mode == DecodeMode.AUTO
        assert config.max_point_count == MAX_POINT_COUNT == 50_000_000
        assert config.buffer_size == DEFAULT_BUFFER_SIZE
        assert config.max_workers == 4

    @pytest.mark.parametrize("value", ["bulk", "BULK", "Bulk"])
    def test_string_mode_is_coerced(self, value):
        assert LoaderConfig(decode_mode=value).decode_mode == DecodeMode.BULK

    def test_unknown_mode(self):
        with pytest.raises(ConfigError, match="decode_mode"):
            LoaderConfig(decode_mode="mmap")

    @pytest.mark.parametrize(
        "field_name, value",
        [("max_point_count", -1), ("buffer_size", 0), ("max_workers", 0)],
    )
    def test_invalid_values(self, field_name, value):
        with pytest.raises(ConfigError) as info:
            LoaderConfig(**{field_name: value})
        assert info.value.field_name == field_name
        assert info.value.value == value

    def test_dict_roundtrip(self):
        config = LoaderConfig(decode_mode=DecodeMode.STREAMED, buffer_size=4096)
        data = config.to_dict()

        assert data["decode_mode"] == "streamed"
        assert LoaderConfig.from_dict(data) == config

    def test_from_dict_ignores_unknown_keys(self):
        config = LoaderConfig.from_dict({"max_workers": 2, "colour": "red"})
        assert config.max_workers == 2
