"""
Structured Logging for SI-AGENT.
Outputs JSON-formatted logs for machine readability and observability.
"""

import json
import sys
import logging
from datetime import datetime, timezone

# Configure root logger
logger = logging.getLogger("SI-AGENT")
logger.setLevel(logging.INFO)
handler = logging.StreamHandler(sys.stdout)
logger.addHandler(handler)

class JsonFormatter(logging.Formatter):
    """JSON formatter that dynamically extracts all extra fields."""

    # Standard LogRecord attributes to exclude (these are Python logging internals)
    STANDARD_ATTRS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
        'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname', 'process',
        'processName', 'relativeCreated', 'thread', 'threadName', 'exc_info',
        'exc_text', 'stack_info', 'asctime', 'taskName'
    }

    def format(self, record):
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
        }

        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS and not key.startswith('_'):
                try:
                    json.dumps(value)
                    log_record[key] = value
                except (TypeError, ValueError):
                    # Exceptions, Paths and the like
                    log_record[key] = str(value)

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record)

handler.setFormatter(JsonFormatter())

def get_logger(component: str = "SYSTEM"):
    return ComponentLogger(component)

class ComponentLogger:
    def __init__(self, component):
        self.component = component
        self.logger = logging.getLogger("SI-AGENT")

    def _extra(self, fields):
        extra = {"component": self.component}
        extra.update(fields)
        return extra

    def debug(self, msg, **kwargs):
        self.logger.debug(msg, extra=self._extra(kwargs))

    def info(self, msg, **kwargs):
        self.logger.info(msg, extra=self._extra(kwargs))

    def warning(self, msg, **kwargs):
        self.logger.warning(msg, extra=self._extra(kwargs))

    def error(self, msg, **kwargs):
        self.logger.error(msg, extra=self._extra(kwargs))
