"""Centralized logging configuration."""
from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any, Dict

from dayforge.core.context import get_plan_date, get_request_id

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(request_id)s %(plan_date)s] %(name)s: %(message)s"


class PlanningContextFilter(logging.Filter):
    """Stamp request_id and plan_date onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        record.plan_date = get_plan_date() or "-"
        return True


def build_logging_config(log_level: str, planner_log_level: str | None = None) -> Dict[str, Any]:
    """dictConfig payload: one console handler, quieter third-party loggers."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"planning": {"format": LOG_FORMAT}},
        "filters": {"planning_context": {"()": PlanningContextFilter}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "planning",
                "filters": ["planning_context"],
            }
        },
        "loggers": {
            "dayforge.planning": {"level": planner_log_level or log_level},
            "apscheduler": {"level": "WARNING"},
            "sqlalchemy.engine": {"level": "WARNING"},
        },
        "root": {"handlers": ["console"], "level": log_level},
    }


def configure_logging(*, log_level: str = "INFO", planner_log_level: str | None = None) -> None:
    """Apply the logging config once per process (API or worker)."""
    if getattr(configure_logging, "_configured", False):
        return
    dictConfig(build_logging_config(log_level, planner_log_level))
    logging.getLogger(__name__).debug("Logging configured at %s", log_level)
    configure_logging._configured = True  # type: ignore[attr-defined]
