import logging
import sys

from rentroll.settings import settings

TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Third-party loggers that are noisy at INFO during migrations and seeding.
QUIET_LOGGERS = ("alembic", "faker", "sqlalchemy.engine")


def _formatter() -> logging.Formatter:
    if not settings.log_json:
        return logging.Formatter(TEXT_FORMAT)

    from pythonjsonlogger.json import JsonFormatter

    return JsonFormatter(fmt=JSON_FORMAT, rename_fields={"asctime": "timestamp", "levelname": "level"})


def configure_logging() -> None:
    """Install a single stderr handler on the root logger.

    Alembic's ``fileConfig`` replaces the root handlers while migrations
    run, so ``__main__`` calls ``reconfigure()`` once ``initialize_db()``
    has returned.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


reconfigure = configure_logging
