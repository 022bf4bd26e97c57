"""!
@brief Structured logging helpers for the provisioner.
@details Implements a dual-stream pipeline: a human-readable channel written to
a rotating text file and echoed on the console, and a machine channel written
as JSON lines for fleet telemetry. Startup metadata sourced from
:mod:`office_desktop_provisioner.version` is recorded so log bundles collected
from many hosts can be correlated.
"""
from __future__ import annotations

import datetime as _dt
import json
import logging
import sys
import tempfile
import uuid
from logging import handlers
from pathlib import Path
from typing import Dict, Iterable, Tuple

from . import version

HUMAN_LOGGER_NAME = "office_desktop_provisioner.human"
"""!
@brief Logger name for human-readable output.
"""

MACHINE_LOGGER_NAME = "office_desktop_provisioner.machine"
"""!
@brief Logger name for JSONL telemetry output.
"""

HUMAN_LOG_FILENAME = "provisioner.log"
MACHINE_LOG_FILENAME = "provisioner.jsonl"

_STANDARD_RECORD_KEYS: Dict[str, None] = {
    "name": None,
    "msg": None,
    "args": None,
    "levelname": None,
    "levelno": None,
    "pathname": None,
    "filename": None,
    "module": None,
    "exc_info": None,
    "exc_text": None,
    "stack_info": None,
    "lineno": None,
    "funcName": None,
    "created": None,
    "msecs": None,
    "relativeCreated": None,
    "thread": None,
    "threadName": None,
    "processName": None,
    "process": None,
    "taskName": None,
    "message": None,
    "asctime": None,
    "channel": None,
}

class _ChannelFilter(logging.Filter):
    """!
    @brief Inject a fixed ``channel`` attribute on log records.
    """

    def __init__(self, channel: str) -> None:
        super().__init__()
        self._channel = channel

    def filter(self, record: logging.LogRecord) -> bool:
        record.channel = self._channel
        return True


class _JsonLineFormatter(logging.Formatter):
    """!
    @brief Format ``LogRecord`` instances as single-line JSON objects.
    @details Standard metadata (timestamp, level, logger, message) is merged
    with any ``extra`` attributes supplied by the caller. Values that are not
    JSON serializable are coerced to their ``repr``.
    """

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - concise override
        moment = _dt.datetime.fromtimestamp(record.created, tz=_dt.timezone.utc)
        payload: Dict[str, object] = {
            "timestamp": moment.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "channel": getattr(record, "channel", "machine"),
        }

        payload.update(_extract_extras(record))
        try:
            return json.dumps(payload, ensure_ascii=False)
        except TypeError:
            sanitized = {key: _coerce_json(value) for key, value in payload.items()}
            return json.dumps(sanitized, ensure_ascii=False)


def _extract_extras(record: logging.LogRecord) -> Dict[str, object]:
    """!
    @brief Collect non-standard attributes from a log record.
    """

    extras: Dict[str, object] = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_RECORD_KEYS:
            continue
        extras[key] = value
    return extras


def _coerce_json(value: object) -> object:
    try:
        json.dumps(value)
    except TypeError:
        return repr(value)
    return value


def _configure_logger(logger: logging.Logger, handlers_to_add: Iterable[Tuple[logging.Handler, logging.Formatter]]) -> None:
    """!
    @brief Reset a logger and attach the supplied handler/formatter pairs.
    """

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for flt in list(logger.filters):
        logger.removeFilter(flt)
    for handler, formatter in handlers_to_add:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False


def _prepare_directory(root_dir: Path) -> Path:
    """!
    @brief Create ``root_dir`` or fall back to the temp directory when that fails.
    """

    try:
        root_dir.mkdir(parents=True, exist_ok=True)
        return root_dir
    except OSError:
        fallback = Path(tempfile.gettempdir()) / "office-desktop-provisioner"
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


def setup_logging(
    root_dir: Path,
    *,
    json_to_stdout: bool = False,
    console: bool = True,
    level: int = logging.INFO,
    console_level: int | None = None,
) -> Tuple[logging.Logger, logging.Logger]:
    """!
    @brief Set up human and machine loggers.
    @details Returns the human-readable and structured event loggers. The log
    directory is created when missing; if it cannot be created the system temp
    directory is used so the run is never blocked by logging. The human channel
    is mirrored to ``stderr`` when ``console`` is set, which is the only
    interactive surface the tool has.
    @param root_dir Directory receiving ``provisioner.log`` and ``provisioner.jsonl``.
    @param json_to_stdout Mirror machine events to ``stdout``.
    @param console Echo human messages on the console.
    @param level Minimum level recorded by both loggers.
    @param console_level Minimum level shown on the console, defaults to ``level``.
    """

    log_dir = _prepare_directory(Path(root_dir))

    human_logger = logging.getLogger(HUMAN_LOGGER_NAME)
    machine_logger = logging.getLogger(MACHINE_LOGGER_NAME)

    human_logger.setLevel(level)
    machine_logger.setLevel(level)

    file_formatter = logging.Formatter(
        "%(asctime)s %(levelname)-8s [%(channel)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_formatter = logging.Formatter("%(levelname)-8s %(message)s")
    machine_formatter = _JsonLineFormatter()

    human_file = handlers.RotatingFileHandler(
        log_dir / HUMAN_LOG_FILENAME,
        maxBytes=1_048_576,
        backupCount=5,
        encoding="utf-8",
    )
    machine_file = handlers.RotatingFileHandler(
        log_dir / MACHINE_LOG_FILENAME,
        maxBytes=1_048_576,
        backupCount=5,
        encoding="utf-8",
    )

    human_handlers: list[Tuple[logging.Handler, logging.Formatter]] = [(human_file, file_formatter)]
    if console:
        console_handler = logging.StreamHandler(stream=sys.stderr)
        console_handler.setLevel(console_level if console_level is not None else level)
        human_handlers.append((console_handler, console_formatter))

    machine_handlers: list[Tuple[logging.Handler, logging.Formatter]] = [(machine_file, machine_formatter)]
    if json_to_stdout:
        machine_handlers.append((logging.StreamHandler(stream=sys.stdout), machine_formatter))

    _configure_logger(human_logger, human_handlers)
    _configure_logger(machine_logger, machine_handlers)

    human_logger.addFilter(_ChannelFilter("human"))
    machine_logger.addFilter(_ChannelFilter("machine"))

    _emit_run_metadata(human_logger, machine_logger, log_dir)

    return human_logger, machine_logger


def get_human_logger() -> logging.Logger:
    """!
    @brief Retrieve the configured human-readable logger.
    """

    return logging.getLogger(HUMAN_LOGGER_NAME)


def get_machine_logger() -> logging.Logger:
    """!
    @brief Retrieve the configured machine/JSON logger.
    """

    return logging.getLogger(MACHINE_LOGGER_NAME)


def build_event_extra(event: str, **payload: object) -> Dict[str, object]:
    """!
    @brief Build the ``extra`` mapping for a machine log event.
    @details Every structured record carries an ``event`` key; the remaining
    keyword arguments are merged verbatim.
    """

    extra: Dict[str, object] = {"event": event}
    extra.update(payload)
    return extra


def _emit_run_metadata(human_logger: logging.Logger, machine_logger: logging.Logger, log_dir: Path) -> None:
    moment = _dt.datetime.now(tz=_dt.timezone.utc)
    metadata: Dict[str, object] = {
        "run_id": uuid.uuid4().hex,
        "timestamp": moment.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "version": version.__version__,
        "build": version.__build__,
        "python": sys.version.split()[0],
        "logdir": str(log_dir),
    }

    human_logger.info(
        "Office Desktop Provisioner %s (%s) starting, run %s",
        version.__version__,
        version.__build__,
        metadata["run_id"],
    )
    human_logger.debug("Logs directory: %s", log_dir)

    machine_logger.info("run_start", extra=build_event_extra("run_start", run=metadata))


__all__ = [
    "HUMAN_LOGGER_NAME",
    "MACHINE_LOGGER_NAME",
    "build_event_extra",
    "get_human_logger",
    "get_machine_logger",
    "setup_logging",
]
