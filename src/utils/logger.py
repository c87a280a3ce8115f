"""
Structured console logger
-------------------------

Every module binds a category logger at import time:

    log = get_logger().for_category(LogCategory.STAGE)
    log.info("Performance ended", silence="10.00s", tick=10)

Output:

    [21:04:12] STAGE     ✓ Performance ended
               ├─ silence: 10.00s
               └─ tick: 10

configure_logger() mutates the shared instance, so loggers bound before it
runs pick up the new level and color settings.
"""

import sys
from datetime import datetime
from typing import Dict, List, Optional, TextIO

from models.enums import LogLevel, LogCategory

# ANSI escape sequences
RESET = '\033[0m'
DIM = '\033[2m'
RED = '\033[31m'
GREEN = '\033[32m'
YELLOW = '\033[33m'
MAGENTA = '\033[35m'
CYAN = '\033[36m'
WHITE = '\033[37m'
BRIGHT_GREEN = '\033[92m'
BRIGHT_YELLOW = '\033[93m'
BRIGHT_BLUE = '\033[94m'
BRIGHT_MAGENTA = '\033[95m'
BRIGHT_CYAN = '\033[96m'
BRIGHT_WHITE = '\033[97m'

CATEGORY_STYLE: Dict[LogCategory, str] = {
    LogCategory.CONFIG: CYAN,
    LogCategory.STAGE: BRIGHT_CYAN,
    LogCategory.AUDIENCE: BRIGHT_GREEN,
    LogCategory.LIGHTING: BRIGHT_YELLOW,
    LogCategory.EVENT: BRIGHT_MAGENTA,
    LogCategory.TASK: MAGENTA,
    LogCategory.RUNTIME: BRIGHT_BLUE,
    LogCategory.SYSTEM: BRIGHT_WHITE,
}

# level -> (symbol, color)
LEVEL_STYLE: Dict[LogLevel, tuple] = {
    LogLevel.DEBUG: ('·', DIM),
    LogLevel.INFO: ('✓', GREEN),
    LogLevel.WARN: ('⚠', YELLOW),
    LogLevel.ERROR: ('✗', RED),
}

LEVEL_ORDER: List[LogLevel] = [LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARN, LogLevel.ERROR]

CATEGORY_WIDTH = 9
DETAIL_INDENT = " " * 11


class Logger:
    """
    Category logger writing one headline plus tree-formatted details

    Attributes:
        min_level: Messages below this level are dropped
        use_colors: ANSI colors on/off (off for files and captured output)
        stream: Target stream; None means the current sys.stdout
    """

    def __init__(
        self,
        min_level: LogLevel = LogLevel.INFO,
        use_colors: bool = True,
        stream: Optional[TextIO] = None,
    ):
        self.min_level = min_level
        self.use_colors = use_colors
        self.stream = stream

    def enabled_for(self, level: LogLevel) -> bool:
        return LEVEL_ORDER.index(level) >= LEVEL_ORDER.index(self.min_level)

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{RESET}" if self.use_colors else text

    def format_lines(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel = LogLevel.INFO,
        details: Optional[list] = None,
        **kwargs
    ) -> List[str]:
        """Render a message to output lines without writing them"""
        symbol, level_color = LEVEL_STYLE.get(level, ('·', WHITE))
        headline = " ".join((
            datetime.now().strftime('[%H:%M:%S]'),
            self._paint(category.name.ljust(CATEGORY_WIDTH), CATEGORY_STYLE.get(category, WHITE)),
            self._paint(symbol, level_color),
            self._paint(message, level_color),
        ))

        items = list(details or []) + [f"{key}: {value}" for key, value in kwargs.items()]
        lines = [headline]
        for index, item in enumerate(items):
            branch = "└─" if index == len(items) - 1 else "├─"
            lines.append(f"{DETAIL_INDENT}{self._paint(branch, DIM)} {item}")
        return lines

    def log(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel = LogLevel.INFO,
        details: Optional[list] = None,
        **kwargs
    ):
        """
        Log a structured message

        Args:
            category: Log category (STAGE, AUDIENCE, ...)
            message: Headline text
            level: DEBUG, INFO, WARN or ERROR
            details: Extra detail strings shown under the headline
            **kwargs: Shown as "key: value" detail lines
        """
        if not self.enabled_for(level):
            return

        stream = self.stream or sys.stdout
        for line in self.format_lines(category, message, level, details, **kwargs):
            print(line, file=stream)

    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self, category)


class BoundLogger:
    """Logger with a fixed default category (overridable per call)"""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self._category = category

    def log(self, message: str, level: LogLevel = LogLevel.INFO, category: Optional[LogCategory] = None, **kw):
        self._base.log(category or self._category, message, level, **kw)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)


_logger = Logger()


def get_logger() -> Logger:
    return _logger


def get_category_logger(category: LogCategory) -> BoundLogger:
    return _logger.for_category(category)


def configure_logger(
    min_level: LogLevel = LogLevel.INFO,
    use_colors: bool = True,
    stream: Optional[TextIO] = None,
):
    """Reconfigure the shared logger in place"""
    _logger.min_level = min_level
    _logger.use_colors = use_colors
    _logger.stream = stream
