"""
Logging for the network visualizer and the reference service.

Every module logs through a child of the 'nnviz' logger:

    from nnviz.utils.logger import get_logger

    _logger = get_logger(__name__)
    _logger.info("Polling every 1000 ms")
    _logger.debug("Neuron 1:2 has 2 weights for 3 inputs")

The first get_logger() call installs a colored console handler at INFO.
main.py then calls setup_logging(..., force=True) with the level and file
settings from Config / the command line.

Levels (Config.LOG_LEVEL or --log-level):
    DEBUG   - every state replacement, skipped connections, skipped polls
    INFO    - commands, training results, lifecycle (default)
    WARNING - failed requests, rejected train bodies
    ERROR   - unexpected crashes in worker threads
"""

import logging
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Any

ROOT_LOGGER_NAME = 'nnviz'
LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'


class LogLevel(Enum):
    """Log levels for configuration."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


_initialized = False
_file_handler: Optional[logging.FileHandler] = None


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name when stdout is a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str = LOG_FORMAT, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)
        # Color a copy so other handlers still see the plain level name
        colored = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, self.RESET)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _console_handler(level: LogLevel) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level.value)
    handler.setFormatter(ColoredFormatter())
    return handler


def _open_file_handler(log_dir: str, log_filename: Optional[str]) -> logging.FileHandler:
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    if log_filename is None:
        log_filename = f"nnviz_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    handler = logging.FileHandler(directory / log_filename, mode='a', encoding='utf-8')
    handler.setLevel(logging.DEBUG)  # File keeps everything
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def setup_logging(
    log_dir: str = 'logs',
    level: LogLevel = LogLevel.INFO,
    console_output: bool = True,
    file_output: bool = False,
    log_filename: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Configure the 'nnviz' logger.

    Args:
        log_dir: Directory for log files
        level: Minimum level for the console
        console_output: Log to stdout
        file_output: Also log to a file under log_dir
        log_filename: File name (default: nnviz_YYYYMMDD_HHMMSS.log)
        force: Reconfigure even if already set up (get_logger() sets up
            defaults on first use)
    """
    global _initialized, _file_handler

    if _initialized and not force:
        return

    if _file_handler is not None:
        _file_handler.close()
        _file_handler = None

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()

    if console_output:
        root_logger.addHandler(_console_handler(level))

    if file_output:
        _file_handler = _open_file_handler(log_dir, log_filename)
        root_logger.addHandler(_file_handler)
        # The file captures DEBUG even when the console doesn't
        root_logger.setLevel(logging.DEBUG)
    else:
        root_logger.setLevel(level.value)

    _initialized = True
    root_logger.debug(f"Logging configured (level={level.name}, file={get_log_path()})")


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a module, under the 'nnviz' root.

    Args:
        name: Module name (typically __name__)
    """
    if not _initialized:
        setup_logging()

    # 'nnviz.network.client' and 'network.client' map to the same logger
    if name.startswith(ROOT_LOGGER_NAME + '.'):
        name = name[len(ROOT_LOGGER_NAME) + 1:]
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')


def get_log_path() -> Optional[Path]:
    """Path of the active log file, if file logging is on."""
    if _file_handler is None:
        return None
    return Path(_file_handler.baseFilename)


def log_state_update(source: str, state: Any) -> None:
    """
    One DEBUG line per replaced snapshot.

    Args:
        source: Producer ('poll', 'train', 'reset', 'refresh')
        state: The new NetworkState
    """
    shape = "x".join(str(len(layer.neurons)) for layer in state.layers) or "empty"
    fields = [f"source={source}", f"layers={shape}"]
    if state.epoch is not None:
        fields.append(f"epoch={state.epoch}")
    if state.error is not None:
        fields.append(f"error={state.error:.6f}")

    get_logger('state').debug(" | ".join(fields))


def log_request_failure(command: str, error: BaseException, **context) -> None:
    """
    One WARNING line per failed service request.

    Args:
        command: 'poll', 'train', 'reset' or 'refresh'
        error: What the client raised
        **context: Extra key=value pairs (epochs, patterns, ...)
    """
    parts = [f"{command.upper()} failed", str(error)]
    parts.extend(f"{k}={v}" for k, v in context.items())
    get_logger('requests').warning(" | ".join(parts))
