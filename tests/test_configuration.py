"""Tests for configuration module."""
import logging

import pytest

from ipnis.infrastructure.configuration import (
    ClientConfiguration,
    GraphOptimizationLevel,
    LoggingLevel,
)


class TestClientConfiguration:
    """Tests for ClientConfiguration class."""

    def test_default(self):
        """The default is WARNING logs, BASIC optimization and a single thread."""
        config = ClientConfiguration.default()
        assert config == ClientConfiguration(
            log_level=LoggingLevel.WARNING,
            optimization_level=GraphOptimizationLevel.BASIC,
            number_threads=1,
        )

    def test_from_env_returns_default(self):
        """Environment overrides are not read yet; the default is returned."""
        environ = {
            "IPNIS_LOG_LEVEL": "verbose",
            "IPNIS_NUMBER_THREADS": "8",
        }
        assert ClientConfiguration.from_env(environ) == ClientConfiguration.default()
        assert ClientConfiguration.from_env() == ClientConfiguration.default()

    def test_enum_names_are_parsed(self):
        config = ClientConfiguration(log_level="info", optimization_level="ALL")
        assert config.log_level is LoggingLevel.INFO
        assert config.optimization_level is GraphOptimizationLevel.ALL

    def test_invalid_enum_name(self):
        with pytest.raises(ValueError, match="LoggingLevel"):
            ClientConfiguration(log_level="loud")

    @pytest.mark.parametrize("number_threads", [0, -1, 1.5, True, "2"])
    def test_invalid_number_threads(self, number_threads):
        with pytest.raises(ValueError, match="number_threads"):
            ClientConfiguration(number_threads=number_threads)

    def test_load_from_toml(self, tmp_path):
        """Test loading configuration from TOML file."""
        config_file = tmp_path / "client.toml"
        config_file.write_text("""
[client]
log_level = "error"
optimization_level = "extended"
number_threads = 4
""")

        config = ClientConfiguration.load(str(config_file))
        assert config.log_level is LoggingLevel.ERROR
        assert config.optimization_level is GraphOptimizationLevel.EXTENDED
        assert config.number_threads == 4

    def test_load_missing_table_uses_defaults(self, tmp_path):
        config_file = tmp_path / "empty.toml"
        config_file.write_text("[other]\nvalue = 1\n")
        assert ClientConfiguration.load(str(config_file)) == ClientConfiguration.default()

    def test_load_file_not_found(self, tmp_path):
        """Test that loading non-existent file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ClientConfiguration.load(str(tmp_path / "missing.toml"))


class TestLoggingLevel:
    """Tests for LoggingLevel."""

    @pytest.mark.parametrize(
        "level, expected",
        [
            (LoggingLevel.ERROR, logging.ERROR),
            (LoggingLevel.WARNING, logging.WARNING),
            (LoggingLevel.INFO, logging.INFO),
            (LoggingLevel.VERBOSE, logging.DEBUG),
        ],
    )
    def test_logging_level(self, level, expected):
        assert level.logging_level == expected

    def test_off_is_above_critical(self):
        assert LoggingLevel.OFF.logging_level > logging.CRITICAL
