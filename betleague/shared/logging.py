import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler

EVENTS_LEVEL_NUM = 38
DEFAULT_LOG_BACKUP_COUNT = 10

_CONSOLE_HANDLER_NAME = "betleague.console"
_EVENTS_HANDLER_NAME = "betleague.events"
AUDIT_LOGGER_NAME = "betleague.audit"

logging.addLevelName(EVENTS_LEVEL_NUM, "EVENT")


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record; dict messages are merged in as fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }
        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            payload["message"] = record.getMessage()
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_events_logger(log_dir, events_retention_size, logger_name=AUDIT_LOGGER_NAME):
    """Route EVENT-level records from ``logger_name`` into ``<log_dir>/events.log``.

    The file handler is named, so calling this again swaps the file instead of
    writing every event twice.
    """
    close_events_logger(logger_name)
    logger = logging.getLogger(logger_name)

    os.makedirs(log_dir, exist_ok=True)
    file_handler = RotatingFileHandler(
        os.path.join(log_dir, "events.log"),
        maxBytes=events_retention_size,
        backupCount=DEFAULT_LOG_BACKUP_COUNT,
    )
    file_handler.set_name(_EVENTS_HANDLER_NAME)
    file_handler.setFormatter(JsonLineFormatter())
    file_handler.setLevel(EVENTS_LEVEL_NUM)
    logger.addHandler(file_handler)

    return logger


def close_events_logger(logger_name=AUDIT_LOGGER_NAME):
    logger = logging.getLogger(logger_name)
    for handler in list(logger.handlers):
        if handler.get_name() == _EVENTS_HANDLER_NAME:
            logger.removeHandler(handler)
            handler.close()


def configure_logging(settings) -> logging.Logger:
    """Install the console handler on the ``betleague`` logger.

    Safe to call more than once; the handler is replaced, not duplicated.
    """
    log_cfg = settings.logging
    root = logging.getLogger("betleague")
    root.setLevel(getattr(logging, str(log_cfg.level).upper(), logging.INFO))

    for handler in list(root.handlers):
        if handler.get_name() == _CONSOLE_HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_CONSOLE_HANDLER_NAME)
    if log_cfg.json_logs:
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    root.addHandler(handler)

    if log_cfg.log_dir:
        setup_events_logger(log_cfg.log_dir, log_cfg.events_retention_size)

    return root
