"""
Tests for configuration, structured logging and report date parsing
"""

import pytest
import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal

from core_accounting import config as config_module
from core_accounting.config import AccountingConfig, get_config, reload_config
from core_accounting.dates import (
    end_of_day, parse_date_range, parse_iso_datetime, parse_report_date, start_of_day
)
from core_accounting.errors import InvalidArgumentError, ValidationError
from core_accounting.logging_config import (
    JSONFormatter, get_logger, log_action, setup_logging, setup_logging_from_config
)


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


class TestConfig:
    """Test pydantic-settings configuration"""

    def test_defaults(self):
        """Test defaults"""
        config = AccountingConfig()

        assert config.max_hierarchy_depth == 4
        assert config.path_separator == " > "
        assert config.tolerance == Decimal('0.01')
        assert config.default_accounts_enabled

    def test_environment_override(self, monkeypatch):
        """Test COREACCT_ environment variables override defaults"""
        monkeypatch.setenv("COREACCT_MAX_HIERARCHY_DEPTH", "3")
        monkeypatch.setenv("COREACCT_BALANCE_TOLERANCE", "0.001")

        config = AccountingConfig()

        assert config.max_hierarchy_depth == 3
        assert config.tolerance == Decimal('0.001')

    def test_reload_config_replaces_global(self, monkeypatch):
        """Test reload config replaces global"""
        original = get_config()
        monkeypatch.setenv("COREACCT_LOG_LEVEL", "DEBUG")
        try:
            reloaded = reload_config()
            assert reloaded.log_level == "DEBUG"
            assert get_config() is reloaded
        finally:
            config_module.config = original


class TestLogging:
    """Test structured logging helpers"""

    def test_json_formatter_includes_structured_fields(self):
        """Test json formatter includes structured fields"""
        record = logging.LogRecord(
            "core_accounting.accounts", logging.INFO, __file__, 1,
            "Account created", None, None
        )
        record.tenant_id = "company-1"
        record.action = "account_created"

        entry = json.loads(JSONFormatter().format(record))

        assert entry['message'] == "Account created"
        assert entry['level'] == "INFO"
        assert entry['tenant_id'] == "company-1"
        assert entry['action'] == "account_created"
        assert 'resource' not in entry

    def test_json_formatter_includes_exception(self):
        """Test json formatter includes exception"""
        try:
            raise ValueError("bad")
        except ValueError:
            import sys
            record = logging.LogRecord(
                "core_accounting", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        entry = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad" in entry['exception']

    def test_setup_logging(self):
        """Test JSON handler setup is idempotent"""
        logger = setup_logging("DEBUG", logger_name="core_accounting_test_json")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert not logger.propagate

        setup_logging("INFO", logger_name="core_accounting_test_json")
        assert len(logger.handlers) == 1

    def test_setup_logging_text_format(self):
        """Test setup logging text format"""
        logger = setup_logging("WARNING", logger_name="core_accounting_test_text", fmt="text")

        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_setup_logging_from_config(self):
        """Test setup logging from config"""
        config = AccountingConfig(log_level="ERROR", log_format="json")
        logger = setup_logging_from_config(config)
        try:
            assert logger.name == "core_accounting"
            assert logger.level == logging.ERROR
        finally:
            for handler in logger.handlers[:]:
                logger.removeHandler(handler)
            logger.propagate = True
            logger.setLevel(logging.NOTSET)

    def test_get_logger_defaults_to_package_logger(self):
        """Test get logger defaults to package logger"""
        assert get_logger().name == "core_accounting"
        assert get_logger("core_accounting.reporting").parent.name == "core_accounting"

    def test_log_action_attaches_fields(self):
        """Test log action attaches fields"""
        logger = logging.getLogger("core_accounting_test_action")
        logger.setLevel(logging.INFO)
        handler = ListHandler()
        logger.addHandler(handler)
        try:
            log_action(logger, "info", "Account deleted", tenant_id="company-1",
                       action="account_deleted", resource="acc-1", extra={"count": 1})
        finally:
            logger.removeHandler(handler)

        record = handler.records[0]
        assert record.getMessage() == "Account deleted"
        assert record.tenant_id == "company-1"
        assert record.resource == "acc-1"
        assert record.extra == {"count": 1}
        assert not hasattr(record, "correlation_id")


class TestReportDates:
    """Test report date parsing"""

    def test_parse_iso_date(self):
        """Test parse iso date"""
        assert parse_report_date("2025-01-10", "as_of_date") == date(2025, 1, 10)

    def test_parse_datetime_string_keeps_day(self):
        """Test parse datetime string keeps day"""
        assert parse_report_date("2025-01-10T15:30:00", "as_of_date") == date(2025, 1, 10)

    def test_parse_utc_z_suffix(self):
        """Test a Z-suffixed UTC timestamp is accepted"""
        assert parse_report_date("2025-01-15T00:00:00Z", "end_date") == date(2025, 1, 15)
        assert parse_iso_datetime("2025-01-15T10:00:00Z") == datetime(
            2025, 1, 15, 10, 0, tzinfo=timezone.utc
        )

    def test_parse_date_objects(self):
        """Test parse date objects"""
        assert parse_report_date(date(2025, 1, 10), "d") == date(2025, 1, 10)
        assert parse_report_date(datetime(2025, 1, 10, 8, 0), "d") == date(2025, 1, 10)

    def test_missing_is_none(self):
        """Test missing is none"""
        assert parse_report_date(None, "d") is None
        assert parse_report_date("", "d") is None

    @pytest.mark.parametrize("value", ["yesterday", "2025-02-30", "10/01/2025", 20250110])
    def test_malformed(self, value):
        """Test malformed"""
        with pytest.raises(InvalidArgumentError) as exc_info:
            parse_report_date(value, "end_date")

        assert exc_info.value.field == "end_date"
        assert isinstance(exc_info.value, ValidationError)

    def test_range(self):
        """Test range"""
        assert parse_date_range("2025-01-01", None) == (date(2025, 1, 1), None)

        with pytest.raises(InvalidArgumentError):
            parse_date_range("2025-02-01", "2025-01-31")

    def test_day_boundaries(self):
        """Test UTC start and end of day"""
        day = date(2025, 1, 10)

        assert start_of_day(day) == datetime(2025, 1, 10, tzinfo=timezone.utc)
        assert end_of_day(day) == datetime(2025, 1, 10, 23, 59, 59, 999999, tzinfo=timezone.utc)
