# refer - https://loguru.readthedocs.io/en/stable/api/logger.html
import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

logger.remove() # remove default stuff

CONSOLE_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}"

logger.configure(extra={"name": "harvest"})

_console_sink_id = logger.add(
    sys.stderr,
    format=CONSOLE_FORMAT,
    level="INFO",
    colorize=True,
)


# Function to get logger with context
def get_logger(name: Optional[str] = None):
    if name:
        return logger.bind(name=name)
    return logger


def add_log_file(log_dir: Union[str, Path], level: str = "ERROR", **kwargs) -> int:
    """store error log files under `log_dir`, rotated daily by name."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    kwargs.setdefault("rotation", "5 MB")
    kwargs.setdefault("retention", "90 days")
    return logger.add(
        log_dir / "errors_{time:YYYY-MM-DD}.log",
        format=FILE_FORMAT,
        level=level,
        **kwargs,
    )


def set_log_level(level: str):
    global _console_sink_id
    logger.remove(_console_sink_id)
    _console_sink_id = logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level.upper(), colorize=True)
