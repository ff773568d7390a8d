import datetime
from enum import Enum
from typing import Optional

class LogLevel(Enum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3

class ILogger:
    def log(self, level: LogLevel, component: str, msg: str):
        pass

class ConsoleLogger(ILogger):
    def __init__(self, min_level: LogLevel = LogLevel.DEBUG):
        self.min_level = min_level

    def log(self, level: LogLevel, component: str, msg: str):
        if level.value < self.min_level.value:
            return
        ts = datetime.datetime.now().strftime("%H:%M:%S.%f")[:-3]
        print(f"[{ts}] [{level.name:5}] [{component}] {msg}")

_default_logger: ILogger = ConsoleLogger()

def get_logger() -> ILogger:
    return _default_logger

def set_logger(logger: Optional[ILogger]) -> ILogger:
    """Install the process-wide logger. Passing None restores a ConsoleLogger.

    Returns the previously installed logger so callers can put it back.
    """
    global _default_logger
    previous = _default_logger
    _default_logger = logger or ConsoleLogger()
    return previous
