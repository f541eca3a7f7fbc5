"""
Logging for the Vesta client.

Command output goes to stdout, so log records go to stderr and, when
enabled, to a rotating file under the state directory.

Usage:
    from Vesta.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Watch started")

Presets are picked by VESTA_ENV (development, production, testing);
VESTA_LOG_LEVEL overrides the preset's level.
"""

import json
import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

from Vesta.config import config as client_config

CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s"
LOG_FILE = "vesta.log"


@dataclass
class LogConfig:
    """
    Settings for configure_logging().

    Attributes:
        level: Root level name
        log_dir: Directory for the rotating file, defaults to <state dir>/logs
        console_output: Write records to stderr
        file_output: Write records to log_dir/vesta.log
        json_output: File records as JSON lines
        component_levels: Per-logger level overrides, e.g. {"websockets": "ERROR"}
    """
    level: str = "INFO"
    log_dir: Optional[str] = None
    console_output: bool = True
    file_output: bool = False
    json_output: bool = False
    max_bytes: int = 2 * 1024 * 1024
    backup_count: int = 3
    console_format: str = CONSOLE_FORMAT
    date_format: str = "%Y-%m-%d %H:%M:%S"
    component_levels: Dict[str, str] = field(default_factory=dict)

    def resolved_log_dir(self) -> str:
        return self.log_dir or os.path.join(client_config.STATE_DIR, "logs")


class ColoredFormatter(logging.Formatter):
    """Colors the level name when the stream is a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str, datefmt: Optional[str] = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname) if self.use_colors else None
        if color is None:
            return super().format(record)
        original = record.levelname
        record.levelname = f"{color}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra_data`` from RequestLogger is merged in."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'time': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        extra = getattr(record, 'extra_data', None)
        if isinstance(extra, dict):
            entry.update(extra)
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class LoggingManager:
    """Owns the handlers installed on the root logger so reconfiguring replaces them."""

    def __init__(self):
        self.config: Optional[LogConfig] = None
        self._handlers: List[logging.Handler] = []

    def _console_handler(self, config: LogConfig) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        use_colors = sys.platform != 'win32' and getattr(sys.stderr, 'isatty', lambda: False)()
        handler.setFormatter(ColoredFormatter(config.console_format, config.date_format, use_colors))
        return handler

    def _file_handler(self, config: LogConfig) -> logging.Handler:
        log_dir = config.resolved_log_dir()
        os.makedirs(log_dir, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, LOG_FILE),
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding='utf-8',
        )
        if config.json_output:
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(logging.Formatter(FILE_FORMAT, config.date_format))
        return handler

    def configure(self, config: LogConfig) -> None:
        root = logging.getLogger()
        for handler in self._handlers:
            root.removeHandler(handler)
            handler.close()
        self._handlers = []

        if config.console_output:
            self._handlers.append(self._console_handler(config))
        if config.file_output:
            try:
                self._handlers.append(self._file_handler(config))
            except OSError as e:
                # Keep going without the file; the console handler still works
                print(f"Cannot open log file in {config.resolved_log_dir()}: {e}", file=sys.stderr)

        root.setLevel(config.level.upper())
        for handler in self._handlers:
            root.addHandler(handler)
        for name, level in config.component_levels.items():
            logging.getLogger(name).setLevel(level.upper())
        self.config = config


_manager = LoggingManager()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(config: LogConfig) -> None:
    _manager.configure(config)


def get_logging_manager() -> LoggingManager:
    return _manager


def create_development_config() -> LogConfig:
    return LogConfig(
        level="DEBUG",
        file_output=True,
        component_levels={"websockets": "WARNING", "aiohttp": "WARNING"},
    )


def create_production_config() -> LogConfig:
    """Only warnings reach the terminal; the file keeps INFO as JSON lines."""
    return LogConfig(
        level="INFO",
        file_output=True,
        json_output=True,
        max_bytes=10 * 1024 * 1024,
        backup_count=5,
        component_levels={"websockets": "ERROR", "aiohttp": "ERROR", "Vesta": "WARNING"},
    )


def create_testing_config() -> LogConfig:
    return LogConfig(
        level="DEBUG",
        console_format="%(levelname)s - %(message)s",
        component_levels={"websockets": "ERROR"},
    )


PRESETS: Dict[str, Callable[[], LogConfig]] = {
    "development": create_development_config,
    "dev": create_development_config,
    "production": create_production_config,
    "prod": create_production_config,
    "testing": create_testing_config,
    "test": create_testing_config,
}


def auto_configure(env: Optional[str] = None) -> None:
    """
    Configure logging from a preset.

    Args:
        env: Preset name; falls back to VESTA_ENV, then "production" so a
             plain CLI run stays quiet.
    """
    env = (env or os.environ.get("VESTA_ENV") or "production").lower()
    config = PRESETS.get(env, create_production_config)()
    level = os.environ.get("VESTA_LOG_LEVEL")
    if level:
        config.level = level
    configure_logging(config)
    get_logger(__name__).debug("Logging configured with the %s preset", env)


__all__ = [
    'LogConfig',
    'LoggingManager',
    'ColoredFormatter',
    'JsonFormatter',
    'get_logger',
    'configure_logging',
    'get_logging_manager',
    'create_development_config',
    'create_production_config',
    'create_testing_config',
    'auto_configure',
]
