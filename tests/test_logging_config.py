import logging
from pathlib import Path

import pytest

from resume_screener.utils.logging_config import (
    PIPELINE_LOGGERS,
    LoggingProfile,
    RequestIdFilter,
    build_logging_config,
    get_logger,
    profile_for_environment,
    request_id_var,
)


def make_record():
    return logging.LogRecord("resume_screener.test", logging.INFO, __file__, 1, "hello", None, None)


class TestLoggingProfiles:
    """Test cases for environment logging profiles"""

    def test_testing_profile_is_console_only(self):
        profile = profile_for_environment("testing")
        config = build_logging_config(profile, Path("logs"))

        assert profile.level == "WARNING"
        assert list(config["handlers"]) == ["console"]
        assert config["handlers"]["console"]["formatter"] == "simple"

    def test_development_profile_is_verbose(self):
        profile = profile_for_environment("development")
        assert profile == LoggingProfile("DEBUG", "DEBUG", True, "detailed")

    def test_production_pipeline_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        monkeypatch.setenv("LLM_LOG_LEVEL", "debug")

        profile = profile_for_environment("production")
        config = build_logging_config(profile, Path("/var/log/screener"))

        assert config["loggers"][""]["level"] == "WARNING"
        for name in PIPELINE_LOGGERS:
            assert config["loggers"][name] == {"level": "DEBUG"}
        assert config["handlers"]["file"]["filename"].startswith(str(Path("/var/log/screener")))
        assert config["handlers"]["error_file"]["level"] == "ERROR"

    def test_environment_read_from_env(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "Testing")
        assert profile_for_environment().to_file is False

    def test_every_handler_stamps_request_id(self):
        config = build_logging_config(profile_for_environment("production"), Path("logs"))
        assert config["filters"]["request_id"]["()"] is RequestIdFilter
        for handler in config["handlers"].values():
            assert handler["filters"] == ["request_id"]
        for fmt in config["formatters"].values():
            assert "%(request_id)" in fmt["format"]


class TestRequestIdFilter:
    """Test cases for request id stamping"""

    def test_default_outside_request(self):
        record = make_record()
        assert RequestIdFilter().filter(record) is True
        assert record.request_id == "-"

    def test_uses_current_request_id(self):
        token = request_id_var.set("req-123")
        try:
            record = make_record()
            RequestIdFilter().filter(record)
        finally:
            request_id_var.reset(token)
        assert record.request_id == "req-123"


class TestGetLogger:

    @pytest.mark.parametrize("name,expected", [
        ("resume_screener.services.graph", "resume_screener.services.graph"),
        ("performance", "resume_screener.performance"),
    ])
    def test_namespacing(self, name, expected):
        assert get_logger(name).name == expected
