"""
Logging setup - Process-level configuration and the per-run logger.

Components never configure logging themselves. The entry point calls
configure_logging() once, creates one run logger with get_run_logger(), and
passes it to every component it builds. Tests pass their own logger (or rely
on the module-level default) without touching global state.
"""

import logging
import uuid
from typing import Optional

LOGGER_NAME = "aspace_migrator"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class RunLoggerAdapter(logging.LoggerAdapter):
    """Prefixes every message with the run id."""

    def process(self, msg, kwargs):
        return f"[run {self.extra['run_id']}] {msg}", kwargs


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format=LOG_FORMAT)
    # Keep urllib3 connection chatter out of debug runs
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_run_logger(run_id: Optional[str] = None) -> RunLoggerAdapter:
    run_id = run_id or uuid.uuid4().hex[:8]
    return RunLoggerAdapter(logging.getLogger(LOGGER_NAME), {"run_id": run_id})
