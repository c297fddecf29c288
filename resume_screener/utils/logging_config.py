"""
Logging configuration for the Resume Screener API

Profiles are picked by ENVIRONMENT. The completion pipeline loggers get their
own level (LLM_LOG_LEVEL) so model timings stay visible when LOG_LEVEL is
raised in production. Every record carries the id of the request it belongs to.
"""
import logging
import logging.config
import os
import time
from contextvars import ContextVar
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, NamedTuple

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

# Loggers whose level follows LLM_LOG_LEVEL instead of LOG_LEVEL
PIPELINE_LOGGERS = (
    "resume_screener.services.completion",
    "resume_screener.services.graph",
)

FORMATS = {
    "detailed": "%(asctime)s | %(levelname)-8s | %(request_id)-36s | %(name)-38s | %(message)s",
    "simple": "%(levelname)s - %(name)s [%(request_id)s] - %(message)s",
}


class LoggingProfile(NamedTuple):
    level: str
    pipeline_level: str
    to_file: bool
    format_style: str


class RequestIdFilter(logging.Filter):
    """Stamps each record with the current request id ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def profile_for_environment(environment: str = None) -> LoggingProfile:
    environment = (environment or os.getenv("ENVIRONMENT", "development")).lower()
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    pipeline_level = os.getenv("LLM_LOG_LEVEL", "INFO").upper()

    if environment == "development":
        return LoggingProfile("DEBUG", "DEBUG", True, "detailed")
    if environment == "testing":
        return LoggingProfile("WARNING", "WARNING", False, "simple")
    # production and anything unrecognised
    return LoggingProfile(level, pipeline_level, True, "detailed")


def build_logging_config(profile: LoggingProfile, log_dir: Path) -> Dict[str, Any]:
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": profile.format_style,
            "filters": ["request_id"],
            "stream": "ext://sys.stdout",
        }
    }
    if profile.to_file:
        stamp = datetime.now().strftime('%Y%m%d')
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "detailed",
            "filters": ["request_id"],
            "filename": str(log_dir / f"resume_screener_{stamp}.log"),
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
            "encoding": "utf8",
        }
        handlers["error_file"] = {
            **handlers["file"],
            "level": "ERROR",
            "filename": str(log_dir / f"resume_screener_errors_{stamp}.log"),
        }

    names = list(handlers)
    loggers: Dict[str, Any] = {
        "": {"level": profile.level, "handlers": names},
        "uvicorn": {"level": "INFO", "handlers": names, "propagate": False},
    }
    for name in PIPELINE_LOGGERS:
        loggers[name] = {"level": profile.pipeline_level}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"request_id": {"()": RequestIdFilter}},
        "formatters": {
            style: {"format": fmt, "datefmt": "%Y-%m-%d %H:%M:%S"}
            for style, fmt in FORMATS.items()
        },
        "handlers": handlers,
        "loggers": loggers,
    }


def setup_logging(profile: LoggingProfile) -> None:
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    if profile.to_file:
        log_dir.mkdir(exist_ok=True)

    logging.config.dictConfig(build_logging_config(profile, log_dir))

    get_logger("logging").info(
        f"Logging configured - level {profile.level}, pipeline {profile.pipeline_level}, "
        f"file {'on' if profile.to_file else 'off'}"
    )


def configure_for_environment():
    """Configure logging from ENVIRONMENT / LOG_LEVEL / LLM_LOG_LEVEL"""
    setup_logging(profile_for_environment())


def get_logger(name: str) -> logging.Logger:
    """Logger under the resume_screener namespace (module __name__ is kept as-is)"""
    if name.startswith("resume_screener"):
        return logging.getLogger(name)
    return logging.getLogger(f"resume_screener.{name}")


class PerformanceMonitor:
    """Times a block, warning past threshold_ms"""

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        self.logger.debug(f"Starting {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        execution_time = (time.time() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {execution_time:.2f}ms: {exc_val!r}")
        elif execution_time > self.threshold_ms:
            self.logger.warning(f"{self.operation_name} completed in {execution_time:.2f}ms (exceeded threshold {self.threshold_ms}ms)")
        else:
            self.logger.info(f"{self.operation_name} completed in {execution_time:.2f}ms")
