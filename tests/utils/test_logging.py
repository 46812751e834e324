"""
Unit tests for logging setup module.

This module contains tests for logging configuration, formatting,
and performance decorators.
"""

import json
import logging
import logging.handlers
import tempfile
import pytest
from pathlib import Path
import sys

from src.utils.logging_setup import (
    setup_logging,
    configure_logging,
    log_performance,
    JSONFormatter
)


def _make_record(msg="Test message", level=logging.INFO, exc_info=None):
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="/path/to/file.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info
    )
    record.funcName = "test_function"
    record.module = "test_module"
    return record


class TestJSONFormatter:
    """Test suite for JSONFormatter class."""
    
    def test_json_formatter_basic(self):
        """Test basic JSON formatting."""
        formatter = JSONFormatter(datefmt='%Y-%m-%d %H:%M:%S')
        
        parsed = json.loads(formatter.format(_make_record()))
        
        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "test.logger"
        assert parsed["message"] == "Test message"
        assert parsed["module"] == "test_module"
        assert parsed["function"] == "test_function"
        assert parsed["line"] == 42
        assert "timestamp" in parsed
    
    def test_json_formatter_with_exception(self):
        """Test JSON formatting with exception information."""
        formatter = JSONFormatter()
        
        try:
            raise ValueError("Test exception")
        except ValueError:
            record = _make_record("Error occurred", logging.ERROR, sys.exc_info())
        
        parsed = json.loads(formatter.format(record))
        
        assert parsed["level"] == "ERROR"
        assert "ValueError" in parsed["exception"]
    
    def test_json_formatter_with_extra_fields(self):
        """Test JSON formatting with extra fields, including non-JSON values."""
        formatter = JSONFormatter()
        record = _make_record()
        record.environment = "production"
        record.output_path = Path("output/sites_geotagged.xlsx")
        
        parsed = json.loads(formatter.format(record))
        
        assert parsed["environment"] == "production"
        assert parsed["output_path"] == str(Path("output/sites_geotagged.xlsx"))


class TestSetupLogging:
    """Test suite for setup_logging function."""
    
    def setup_method(self):
        """Reset logging configuration before each test."""
        logger = logging.getLogger()
        logger.handlers.clear()
        logger.setLevel(logging.WARNING)
    
    def teardown_method(self):
        """Close handlers opened by the test."""
        logger = logging.getLogger()
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
    
    def test_setup_logging_development(self):
        """Test logging setup for development environment."""
        setup_logging(environment="development", log_level="DEBUG")
        
        logger = logging.getLogger()
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        
        handler = logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stdout
        assert not isinstance(handler.formatter, JSONFormatter)
    
    def test_setup_logging_production(self):
        """Test logging setup for production environment."""
        setup_logging(environment="production", log_level="INFO")
        
        logger = logging.getLogger()
        assert logger.level == logging.INFO
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
    
    def test_setup_logging_with_log_dir(self):
        """Test logging setup with log directory."""
        with tempfile.TemporaryDirectory() as temp_dir:
            setup_logging(environment="development", log_level="INFO", log_dir=temp_dir)
            
            logger = logging.getLogger()
            assert len(logger.handlers) == 2
            
            file_handlers = [h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
            assert len(file_handlers) == 1
            assert (Path(temp_dir) / "geotag_development.log").exists()
            
            self.teardown_method()
    
    def test_setup_logging_removes_existing_handlers(self):
        """Test that setup_logging removes existing handlers."""
        logger = logging.getLogger()
        dummy_handler = logging.StreamHandler()
        logger.addHandler(dummy_handler)
        
        setup_logging(environment="development")
        
        assert len(logger.handlers) == 1
        assert logger.handlers[0] is not dummy_handler
    
    def test_setup_logging_sets_third_party_levels(self):
        """Test that setup_logging quietens geospatial and spreadsheet libraries."""
        setup_logging(environment="development", log_level="DEBUG")
        
        for name in ("shapely", "pyogrio", "fiona", "openpyxl"):
            assert logging.getLogger(name).level == logging.WARNING
    
    def test_setup_logging_invalid_level(self):
        """Test that setup_logging rejects invalid log levels."""
        with pytest.raises(ValueError, match="Unknown log level"):
            setup_logging(environment="development", log_level="INVALID")
    
    def test_setup_logging_invalid_format(self):
        """Test that setup_logging rejects unknown output formats."""
        with pytest.raises(ValueError, match="Unknown log format"):
            setup_logging(environment="development", log_format="xml")
    
    def test_explicit_format_overrides_environment_default(self):
        """Test that an explicit format wins over the environment default."""
        setup_logging(environment="development", log_format="json")
        assert isinstance(logging.getLogger().handlers[0].formatter, JSONFormatter)
        
        setup_logging(environment="production", log_format="standard")
        assert not isinstance(logging.getLogger().handlers[0].formatter, JSONFormatter)
    
    def test_json_logging_output_format(self):
        """Test that JSON logging produces parseable output."""
        with tempfile.TemporaryDirectory() as temp_dir:
            setup_logging(environment="production", log_level="INFO", log_dir=temp_dir)
            
            logging.getLogger("test.module").info("Zones written", extra={"zones_built": 12})
            for handler in logging.getLogger().handlers:
                handler.flush()
            
            log_file = Path(temp_dir) / "geotag_production.log"
            parsed = json.loads(log_file.read_text().strip().splitlines()[-1])
            assert parsed["message"] == "Zones written"
            assert parsed["zones_built"] == 12
            
            self.teardown_method()


class TestConfigureLogging:
    """Test suite for configure_logging function."""
    
    def teardown_method(self):
        """Close handlers opened by the test."""
        logger = logging.getLogger()
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
    
    def test_applies_environment_logging_section(self, tmp_path):
        """Test that level, format and log directory come from the config section."""
        configure_logging(
            {"level": "WARNING", "format": "json", "log_dir": str(tmp_path)},
            "development"
        )
        
        logger = logging.getLogger()
        assert logger.level == logging.WARNING
        assert all(isinstance(h.formatter, JSONFormatter) for h in logger.handlers)
        assert (tmp_path / "geotag_development.log").exists()
    
    def test_missing_keys_use_defaults(self):
        """Test that an empty section gives INFO, console only, environment format."""
        configure_logging({}, "production")
        
        logger = logging.getLogger()
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)


class TestLogPerformance:
    """Test suite for log_performance decorator."""
    
    def test_log_performance_success(self, caplog):
        """Test log_performance decorator with successful function."""
        @log_performance
        def load_layers():
            return "success"
        
        with caplog.at_level(logging.INFO):
            result = load_layers()
        
        assert result == "success"
        assert "Starting load_layers" in caplog.text
        assert "Completed load_layers" in caplog.text
    
    def test_log_performance_with_exception(self, caplog):
        """Test log_performance decorator with function that raises exception."""
        @log_performance
        def load_layers():
            raise ValueError("Test error")
        
        with caplog.at_level(logging.INFO):
            with pytest.raises(ValueError):
                load_layers()
        
        assert "Failed load_layers" in caplog.text
        assert "Test error" in caplog.text
    
    def test_log_performance_preserves_metadata(self):
        """Test that log_performance preserves function metadata."""
        @log_performance
        def load_layers():
            """Load the layers."""
        
        assert load_layers.__name__ == "load_layers"
        assert load_layers.__doc__ == "Load the layers."
