import logging
import re
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, Processor

LOGGER_NAME = "verikit"

# Mask tokens and credentials before anything reaches a log sink.
_SENSITIVE_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    # Client secrets, API keys and tokens in key=value / "key": "value" form
    (
        re.compile(
            r'(["\']?(?:api[_-]?|client[_-]?)?(?:key|token|secret|password|passwd|pwd)["\']?\s*[:=]\s*["\']?)([^"\'\s,&]+)(["\']?)',
            re.IGNORECASE,
        ),
        r"\1***SECRET_REDACTED***\3",
    ),
    # Bearer tokens
    (re.compile(r"(Bearer\s+)([A-Za-z0-9\-_.~+/]+=*)", re.IGNORECASE), r"\1***BEARER_TOKEN_REDACTED***"),
    # JWT tokens
    (re.compile(r"(eyJ[A-Za-z0-9\-_]+\.eyJ[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+)"), r"***JWT_REDACTED***"),
    # URLs with credentials
    (re.compile(r"([a-z][a-z0-9+.\-]*://[^:/\s]+:)([^@\s]+)(@)", re.IGNORECASE), r"\1***URL_CREDS_REDACTED***\3"),
]


def sanitize_sensitive_data(data: str) -> str:
    """Remove or mask sensitive information from log data."""
    for pattern, replacement in _SENSITIVE_PATTERNS:
        data = pattern.sub(replacement, data)
    return data


def redact_sensitive_values(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = sanitize_sensitive_data(value)
    return event_dict


def project_name_adder(project_name: str) -> Processor:
    def add_project_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("project", project_name)
        return event_dict

    return add_project_name


def setup_logger(
    log_level: str = "INFO",
    json_output: bool = True,
    project_name: str = LOGGER_NAME,
) -> structlog.stdlib.BoundLogger:
    """Configure structlog on top of stdlib logging and return the harness logger.

    Safe to call repeatedly (e.g. once per test session); handlers are replaced,
    not stacked.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    renderer: Processor = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        project_name_adder(project_name),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        redact_sensitive_values,
        renderer,
    ]
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    stdlib_logger = logging.getLogger(LOGGER_NAME)
    stdlib_logger.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    stdlib_logger.addHandler(handler)
    stdlib_logger.setLevel(level)

    logger: structlog.stdlib.BoundLogger = structlog.get_logger(LOGGER_NAME)
    return logger
