"""
Log output for the DNS target webhook.

Every admission review runs with its request UID as the correlation ID, so one
``grep`` on a UID from the API server audit log finds every line the webhook
wrote for that review. Outside a review the correlation ID is ``-``.
"""

import json
import logging
from contextvars import ContextVar
from datetime import UTC, datetime

from dns_target_webhook.constants import HEALTHZ_PATH, METRICS_PATH

NO_CORRELATION_ID = "-"

correlation_id: ContextVar[str] = ContextVar(
    "correlation_id", default=NO_CORRELATION_ID
)

# Fields passed through ``extra=`` that end up as top-level JSON keys
STRUCTURED_FIELDS = (
    "kind",
    "resource_name",
    "namespace",
    "operation",
    "uid",
    "result",
    "http_status",
    "content_type",
    "error_type",
    "duration",
)

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"
PLAIN_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Third-party loggers that are only interesting when something goes wrong
QUIET_LOGGERS = (
    "kubernetes",
    "urllib3",
    "aiohttp.access",
    "aiohttp.server",
    "aiohttp.web",
)


def set_correlation_id(value: str) -> None:
    """Tag log lines emitted from the current context with ``value``."""
    correlation_id.set(value)


class CorrelationIDFilter(logging.Filter):
    """Copies the current correlation ID onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id.get()
        return True


class HealthProbeFilter(logging.Filter):
    """Drops records about /healthz and /metrics requests."""

    def __init__(self, suppress_health_logs: bool = True):
        super().__init__()
        self.suppress_health_logs = suppress_health_logs

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.suppress_health_logs:
            return True
        message = record.getMessage()
        return HEALTHZ_PATH not in message and METRICS_PATH not in message


class StructuredFormatter(logging.Formatter):
    """Renders each record as a single-line JSON document."""

    def format(self, record: logging.LogRecord) -> str:
        document = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", NO_CORRELATION_ID),
        }
        document.update(
            (field, getattr(record, field))
            for field in STRUCTURED_FIELDS
            if hasattr(record, field)
        )
        if record.exc_info:
            document["exception"] = self.formatException(record.exc_info)

        return json.dumps(document, default=str)


def setup_structured_logging(
    log_level: str = "INFO",
    enable_json_formatting: bool = True,
    correlation_id_enabled: bool = True,
    log_health_probes: bool = False,
) -> None:
    """
    Replace the root handlers with a single stderr handler.

    Args:
        log_level: Root level name; unknown names fall back to INFO
        enable_json_formatting: JSON lines instead of plain text
        correlation_id_enabled: Attach the review UID to each record
        log_health_probes: Keep records about /healthz and /metrics
    """
    handler = logging.StreamHandler()

    if enable_json_formatting:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                TEXT_FORMAT if correlation_id_enabled else PLAIN_TEXT_FORMAT
            )
        )

    if correlation_id_enabled:
        handler.addFilter(CorrelationIDFilter())
    handler.addFilter(HealthProbeFilter(suppress_health_logs=not log_health_probes))

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
