import logging
import sys

import structlog

from authstarter.core.config import settings

# Event keys that may carry a secret; their values are replaced before rendering.
REDACTED_KEYS = frozenset({"password", "new_password", "password_hash", "code", "credential", "token"})


def redact_secrets(logger, method_name, event_dict):
    for key in REDACTED_KEYS & event_dict.keys():
        event_dict[key] = "[redacted]"
    return event_dict


def configure_logging(level: str | None = None) -> None:
    log_level = logging.getLevelName((level or settings.log_level).upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_secrets,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )


def email_domain(email: str | None) -> str | None:
    """Loggable stand-in for an address: the part after ``@`` only."""
    if not email or "@" not in email:
        return None
    return email.rsplit("@", 1)[1]
