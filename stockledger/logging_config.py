from __future__ import annotations

import logging
import re

from flask import Flask

LOG_FORMATS = {
    "development": "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d  %(message)s",
    "production": "%(asctime)s %(levelname)s %(name)s %(message)s",
}

# Recipients and supplier contacts can reach log lines.
_REDACTIONS = (
    (re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+"), "[email]"),
    (re.compile(r"(?i)\b(password|secret|token|api[_-]?key)\b\s*[:=]\s*\S+"), r"\1=[redacted]"),
)

QUIET_LOGGERS = ("werkzeug", "sqlalchemy.engine", "urllib3")


def redact(message: str) -> str:
    for pattern, replacement in _REDACTIONS:
        message = pattern.sub(replacement, message)
    return message


class RedactingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact(record.getMessage())
        record.args = None
        return True


def configure_logging(app: Flask) -> None:
    level = logging.getLevelName(str(app.config.get("LOG_LEVEL") or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    app.logger.setLevel(level)
    logging.getLogger("stockledger").setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    env_name = "production" if app.config.get("ENV") == "production" and not app.debug else "development"
    formatter = logging.Formatter(LOG_FORMATS[env_name])
    redacting = bool(app.config.get("LOG_REDACT_PII", True))

    for handler in [*root.handlers, *app.logger.handlers]:
        handler.setFormatter(formatter)
        if redacting and not any(isinstance(f, RedactingFilter) for f in handler.filters):
            handler.addFilter(RedactingFilter())
