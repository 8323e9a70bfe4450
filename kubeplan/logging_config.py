"""
Logging configuration with an env-style level filter.

The filter is a comma-separated list of directives: a bare level sets the
root level, `name=level` sets the level of one logger. For example
`info,kubeplan=debug,kopf=warning`.
"""

import logging
import logging.config
from typing import Any, Dict, Tuple

from kubeplan.config.provider import LoggingConfig

DEFAULT_FILTER = "info"

_LEVELS = {
    "trace": "DEBUG",
    "debug": "DEBUG",
    "info": "INFO",
    "warn": "WARNING",
    "warning": "WARNING",
    "error": "ERROR",
    "critical": "CRITICAL",
    "off": "CRITICAL",
}


class ProbeAccessFilter(logging.Filter):
    """Filter to suppress liveness probe access logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter out /healthz requests from aiohttp access logs."""
        if record.name == "aiohttp.access":
            message = record.getMessage()
            if "/healthz" in message and "GET" in message:
                return False
        return True


def _level(value: str) -> str:
    try:
        return _LEVELS[value.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown log level: {value!r}") from None


def parse_log_filter(log_filter: str) -> Tuple[str, Dict[str, str]]:
    """
    Parse a log filter string.

    Returns:
        Tuple of (root_level, {logger_name: level})

    Raises:
        ValueError: If a directive is malformed or names an unknown level
    """
    root_level = "INFO"
    loggers: Dict[str, str] = {}

    for directive in log_filter.split(","):
        directive = directive.strip()
        if not directive:
            continue
        if "=" in directive:
            name, _, level = directive.partition("=")
            name = name.strip()
            if not name:
                raise ValueError(f"Missing logger name in directive: {directive!r}")
            loggers[name] = _level(level)
        else:
            root_level = _level(directive)

    return root_level, loggers


def get_logging_config(config: LoggingConfig) -> Dict[str, Any]:
    """Get logging configuration for the given filter."""
    try:
        root_level, loggers = parse_log_filter(config.log_filter)
    except ValueError:
        root_level, loggers = parse_log_filter(DEFAULT_FILTER)

    handler_filters = ["probe_access_filter"] if config.suppress_probe_logs else []

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "probe_access_filter": {
                "()": ProbeAccessFilter
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
                "filters": handler_filters,
            }
        },
        "loggers": {
            name: {"level": level} for name, level in loggers.items()
        },
        "root": {
            "level": root_level,
            "handlers": ["default"]
        }
    }


def setup_logging(config: LoggingConfig) -> logging.Logger:
    """Configure logging once at startup and return the controller logger."""
    logging.config.dictConfig(get_logging_config(config))
    return logging.getLogger("kubeplan")
