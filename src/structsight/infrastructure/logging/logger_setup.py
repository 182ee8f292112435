#!/usr/bin/env python3

"""Process-wide logging configuration for the CLI."""

import logging
import sys
from datetime import datetime
from pathlib import Path

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LoggerSetup:
    """Installs the console and log-file handlers on the root logger once per process."""

    _initialized = False
    _log_file_path: Path | None = None
    _handlers: list[logging.Handler] = []

    @classmethod
    def initialize(cls, log_dir: Path, verbose: bool = False) -> None:
        """
        Route all records to stderr and to a timestamped file in ``log_dir``.

        The console shows INFO and above (DEBUG when ``verbose``); the file
        always receives DEBUG. Stdout is left free for reports. Later calls
        are ignored until :meth:`reset`.

        Args:
            log_dir: Directory for ``structsight_<timestamp>.log``, created if missing
            verbose: Show DEBUG records on the console
        """
        if cls._initialized:
            return

        log_dir.mkdir(parents=True, exist_ok=True)
        cls._log_file_path = log_dir / f"structsight_{datetime.now():%Y%m%d_%H%M%S}.log"

        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)
        root_logger.handlers.clear()

        cls._handlers = [
            cls._console_handler(logging.DEBUG if verbose else logging.INFO),
            cls._file_handler(cls._log_file_path),
        ]
        for handler in cls._handlers:
            root_logger.addHandler(handler)
        cls._initialized = True

        logger = logging.getLogger(__name__)
        logger.debug(f"Writing debug log to {cls._log_file_path} (verbose={verbose})")

    @staticmethod
    def _console_handler(level: int) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        return handler

    @staticmethod
    def _file_handler(path: Path) -> logging.Handler:
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
        return handler

    @classmethod
    def get_log_file_path(cls) -> Path | None:
        return cls._log_file_path

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._initialized

    @classmethod
    def reset(cls) -> None:
        """Close and detach the handlers installed by :meth:`initialize`."""
        root_logger = logging.getLogger()
        for handler in cls._handlers:
            handler.close()
            root_logger.removeHandler(handler)
        cls._handlers = []
        cls._initialized = False
        cls._log_file_path = None
