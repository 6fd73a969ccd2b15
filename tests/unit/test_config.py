"""Unit tests for digestcore.config module."""

import pytest

from digestcore.config import (
    DISABLED_ALGORITHMS_ENV,
    MAX_TRUNCATE_LENGTH_ENV,
    UINT32_MAX,
    EngineConfig,
)
from digestcore.crypto import MD5, SHA256, InvalidArgumentError, ZeroingAllocator


class TestEngineConfig:
    """Test EngineConfig dataclass."""

    def test_default_config(self):
        config = EngineConfig()
        assert isinstance(config.allocator, ZeroingAllocator)
        assert config.disabled_algorithms == frozenset()
        assert config.max_truncate_length == UINT32_MAX
        assert config.validate() == []

    def test_custom_config(self, allocator):
        config = EngineConfig(
            allocator=allocator,
            disabled_algorithms=frozenset({"md5", "SHA-1"}),
            max_truncate_length=64,
        )
        assert config.allocator is allocator
        assert config.disabled_algorithms == frozenset({"MD5", "SHA1"})
        assert config.max_truncate_length == 64

    def test_is_enabled(self):
        config = EngineConfig(disabled_algorithms=frozenset({"md5"}))
        assert not config.is_enabled(MD5)
        assert config.is_enabled(SHA256)
        config.require_enabled(SHA256)
        with pytest.raises(InvalidArgumentError):
            config.require_enabled(MD5)

    def test_frozen(self):
        config = EngineConfig()
        with pytest.raises(AttributeError):
            config.max_truncate_length = 1

    def test_validate_bad_truncate_limit(self):
        errors = EngineConfig(max_truncate_length=-1).validate()
        assert any("max_truncate_length" in e for e in errors)

        errors = EngineConfig(max_truncate_length=UINT32_MAX + 1).validate()
        assert any("max_truncate_length" in e for e in errors)

    def test_validate_bad_allocator(self):
        errors = EngineConfig(allocator=object()).validate()
        assert "allocator must provide allocate()" in errors
        assert "allocator must provide release()" in errors


class TestFromEnvironment:
    """Test environment overrides."""

    def test_defaults_without_variables(self, monkeypatch):
        monkeypatch.delenv(DISABLED_ALGORITHMS_ENV, raising=False)
        monkeypatch.delenv(MAX_TRUNCATE_LENGTH_ENV, raising=False)
        config = EngineConfig.from_environment()
        assert config.disabled_algorithms == frozenset()
        assert config.max_truncate_length == UINT32_MAX

    def test_reads_variables(self, monkeypatch):
        monkeypatch.setenv(DISABLED_ALGORITHMS_ENV, " md5, ,hmac-md5 ")
        monkeypatch.setenv(MAX_TRUNCATE_LENGTH_ENV, "128")
        config = EngineConfig.from_environment()
        assert config.disabled_algorithms == frozenset({"MD5", "HMACMD5"})
        assert config.max_truncate_length == 128

    def test_passes_allocator_through(self, monkeypatch, allocator):
        monkeypatch.delenv(DISABLED_ALGORITHMS_ENV, raising=False)
        config = EngineConfig.from_environment(allocator=allocator)
        assert config.allocator is allocator

    def test_bad_integer(self, monkeypatch):
        monkeypatch.setenv(MAX_TRUNCATE_LENGTH_ENV, "lots")
        with pytest.raises(InvalidArgumentError, match=MAX_TRUNCATE_LENGTH_ENV):
            EngineConfig.from_environment()

    @pytest.mark.parametrize("raw", ["-1", str(UINT32_MAX + 1)])
    def test_out_of_range_truncate_limit(self, monkeypatch, raw):
        monkeypatch.setenv(MAX_TRUNCATE_LENGTH_ENV, raw)
        with pytest.raises(InvalidArgumentError, match="max_truncate_length"):
            EngineConfig.from_environment()
