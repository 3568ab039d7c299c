"""Structured logging for the storefront service.

structlog renders every record; stdlib logging routes them. Output format and
level follow the deployment environment (``PROTEAN_ENV``) unless overridden:

- ``LOG_LEVEL``: any stdlib level name
- ``LOG_FORMAT``: ``json`` or ``console``
- ``LOG_DIR``: directory for the rotating ``storefront.log`` and
  ``storefront_error.log`` files
- ``LOG_TO_FILE``: ``0`` to keep logs on the console only (the default for
  the ``test`` environment)
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog

ROTATE_BYTES = 10 * 1024 * 1024
ROTATE_BACKUPS = 5

# Third-party loggers that are only interesting when something goes wrong
QUIET_LOGGERS = ("protean", "urllib3", "asyncio", "sqlalchemy.engine", "httpx")

_ENV_DEFAULTS = {
    # env: (level, json output, file output)
    "production": ("INFO", True, True),
    "staging": ("INFO", True, True),
    "development": ("DEBUG", False, True),
    "test": ("WARNING", False, False),
}

_configured = False


def current_env() -> str:
    return (os.getenv("PROTEAN_ENV") or os.getenv("ENVIRONMENT") or "development").lower()


def _defaults(env: str) -> tuple[str, bool, bool]:
    return _ENV_DEFAULTS.get(env, ("INFO", False, True))


def log_level(env: str | None = None) -> str:
    level, _, _ = _defaults(env or current_env())
    return os.getenv("LOG_LEVEL", level).upper()


def renders_json(env: str | None = None) -> bool:
    override = os.getenv("LOG_FORMAT", "").lower()
    if override in ("json", "console"):
        return override == "json"
    _, json_output, _ = _defaults(env or current_env())
    return json_output


def writes_files(env: str | None = None) -> bool:
    override = os.getenv("LOG_TO_FILE")
    if override is not None:
        return override.lower() not in ("0", "false", "no")
    _, _, file_output = _defaults(env or current_env())
    return file_output


def _rotating_file(path: Path, level: int | str) -> logging.Handler:
    handler = RotatingFileHandler(path, maxBytes=ROTATE_BYTES, backupCount=ROTATE_BACKUPS, encoding="utf-8")
    handler.setLevel(level)
    return handler


def build_handlers(env: str | None = None) -> list[logging.Handler]:
    """Console handler, plus rotating files when file output is on."""
    level = log_level(env)
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    handlers = [console]

    if writes_files(env):
        log_dir = Path(os.getenv("LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating_file(log_dir / "storefront.log", level))
        handlers.append(_rotating_file(log_dir / "storefront_error.log", logging.ERROR))

    return handlers


def _renderer(json_output: bool):
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=3),
    )


def build_processors(json_output: bool) -> list:
    callsite = structlog.processors.CallsiteParameterAdder(
        parameters=[
            structlog.processors.CallsiteParameter.MODULE,
            structlog.processors.CallsiteParameter.FUNC_NAME,
            structlog.processors.CallsiteParameter.LINENO,
        ]
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        callsite,
        _renderer(json_output),
    ]


def configure_logging(force: bool = False) -> None:
    """Install handlers and structlog processors once per process.

    Pass ``force=True`` to rebuild after changing the environment variables.
    """
    global _configured
    if _configured and not force:
        return

    env = current_env()
    level = log_level(env)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in build_handlers(env):
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=build_processors(renders_json(env)),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=not force,
    )
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(**kwargs: Any) -> None:
    """Attach key/values (request id, path) to every log line of the current request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
