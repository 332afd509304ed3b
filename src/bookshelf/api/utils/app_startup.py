"""Loguru setup for the service and for libraries that log through stdlib logging."""

import logging
import sys
from pathlib import Path

from loguru import logger

from src.bookshelf.runtime.config.config_data import LoggingConfig
from src.bookshelf.runtime.context import get_config

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# The request middleware already logs one line per request
DROPPED_STDLIB_LOGGERS = frozenset({"uvicorn.access"})


class InterceptHandler(logging.Handler):
    """Re-emit stdlib log records (uvicorn, sqlalchemy) through loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        if record.name in DROPPED_STDLIB_LOGGERS:
            return

        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=2, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def _add_file_sink(cfg: LoggingConfig, verbose_tracebacks: bool) -> None:
    path = Path(cfg.file)
    path.parent.mkdir(parents=True, exist_ok=True)
    as_json = cfg.format == "json"
    logger.add(
        path,
        level=cfg.level,
        format="{message}" if as_json else CONSOLE_FORMAT,
        serialize=as_json,
        rotation=f"{cfg.max_size_mb} MB",
        retention=cfg.backup_count,
        compression="zip",
        enqueue=True,
        backtrace=verbose_tracebacks,
        diagnose=verbose_tracebacks,
    )


def _route_stdlib_logging(cfg: LoggingConfig) -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # Loggers created before this point may carry their own handlers
    for name in list(logging.root.manager.loggerDict):
        existing = logging.getLogger(name)
        existing.handlers.clear()
        existing.propagate = True

    for name in ("sqlalchemy.engine", "sqlalchemy.pool"):
        logging.getLogger(name).setLevel(cfg.sqlalchemy_level)
    for name in ("uvicorn", "uvicorn.error"):
        logging.getLogger(name).setLevel(cfg.uvicorn_level)


def configure_logging() -> None:
    """Install the console sink, the optional file sink and stdlib interception.

    Safe to call more than once; every call starts from a clean loguru state.
    """
    config = get_config()
    cfg = config.logging
    verbose_tracebacks = config.app.environment != "production"

    logger.remove()
    logger.configure(extra={"request_id": "-"})
    logger.add(
        sys.stderr,
        level=cfg.level,
        format=CONSOLE_FORMAT,
        colorize=True,
        backtrace=verbose_tracebacks,
        diagnose=verbose_tracebacks,
    )
    if cfg.file:
        _add_file_sink(cfg, verbose_tracebacks)

    _route_stdlib_logging(cfg)

    logger.info(
        "Logging configured",
        level=cfg.level,
        format=cfg.format,
        file=cfg.file,
        environment=config.app.environment,
    )
