"""Logging for the service: rich console output, a daily file and queued emission.

Records are pushed through a ``QueueHandler`` so request threads never block
on console or file I/O; a single ``QueueListener`` thread writes them out.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import date, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from queue import SimpleQueue
from threading import RLock
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

from .context import ContextFilter, log_context
from .progress import progress_manager
from .timing import timeit

__all__ = [
    "init_logging",
    "get_logger",
    "log_context",
    "progress_manager",
    "timeit",
]

CONSOLE_FORMAT = "%(context)s%(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(context)s%(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _env_log_dir() -> Optional[Path]:
    value = os.getenv("LOG_DIR", "logs")
    return Path(value) if value else None


@dataclass
class LoggingConfig:
    """Options accepted by :func:`init_logging`; defaults come from the environment."""

    app_name: str = "benefits"
    level: str | int = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_dir: Optional[Path] = field(default_factory=_env_log_dir)
    console: bool = True
    rich_tracebacks: bool = True
    queue: bool = True

    @property
    def numeric_level(self) -> int:
        if isinstance(self.level, int):
            return self.level
        return getattr(logging, str(self.level).upper(), logging.INFO)


class DailyFileHandler(logging.FileHandler):
    """File handler writing to ``<dir>/YYYY_MM_DD.log``, switching at midnight."""

    def __init__(self, directory: Path, *, encoding: str = "utf-8") -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._day = date.today()
        super().__init__(self._path_for(self._day), mode="a", encoding=encoding)

    def _path_for(self, day: date) -> Path:
        return self.directory / f"{day:%Y_%m_%d}.log"

    def emit(self, record: logging.LogRecord) -> None:
        day = datetime.fromtimestamp(record.created).date()
        if day != self._day:
            self._day = day
            self.close()
            self.baseFilename = os.fspath(self._path_for(day))
            self.stream = self._open()
        super().emit(record)


class _LoggingRuntime:
    """Owns the active configuration and the queue listener thread."""

    def __init__(self) -> None:
        self.lock = RLock()
        self.config: LoggingConfig | None = None
        self.listener: QueueListener | None = None
        self.context_filter = ContextFilter()

    def _handlers(self, cfg: LoggingConfig) -> list[logging.Handler]:
        level = cfg.numeric_level
        handlers: list[logging.Handler] = []

        console = Console(stderr=True)
        progress_manager.use_console(console)
        if cfg.console:
            console_handler = RichHandler(
                console=console,
                rich_tracebacks=cfg.rich_tracebacks,
                show_path=False,
                markup=False,
                log_time_format=DATE_FORMAT,
            )
            console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            handlers.append(console_handler)

        if cfg.log_dir:
            file_handler = DailyFileHandler(Path(cfg.log_dir))
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
            handlers.append(file_handler)

        for handler in handlers:
            handler.setLevel(level)
            handler.addFilter(self.context_filter)
        return handlers

    def _reset(self) -> None:
        if self.listener is not None:
            self.listener.stop()
        self.listener = None
        self.config = None
        progress_manager.reset_console()
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)

    def apply(self, cfg: LoggingConfig) -> None:
        with self.lock:
            if self.config == cfg:
                return
            self._reset()
            if cfg.rich_tracebacks:
                install_rich_traceback(show_locals=False)

            root = logging.getLogger()
            root.setLevel(logging.NOTSET)
            handlers = self._handlers(cfg)
            if cfg.queue and handlers:
                queue_handler = QueueHandler(SimpleQueue())
                queue_handler.setLevel(cfg.numeric_level)
                # Context is rendered on the producer thread; the listener thread has its own.
                queue_handler.addFilter(self.context_filter)
                root.addHandler(queue_handler)
                self.listener = QueueListener(
                    queue_handler.queue, *handlers, respect_handler_level=True
                )
                self.listener.start()
            else:
                for handler in handlers:
                    root.addHandler(handler)
            self.config = cfg


_runtime = _LoggingRuntime()


def init_logging(**kwargs: object) -> None:
    """Configure root logging.

    Idempotent: calling again with the same options keeps the running
    listener; different options replace it.
    """

    cfg = LoggingConfig()
    for key, value in kwargs.items():
        if hasattr(cfg, key):
            setattr(cfg, key, value)  # type: ignore[arg-type]
    _runtime.apply(cfg)


def get_logger(name: str | None = None) -> logging.Logger:
    with _runtime.lock:
        if _runtime.config is None:
            init_logging()
        app_name = _runtime.config.app_name if _runtime.config else LoggingConfig().app_name
    return logging.getLogger(name or app_name)
