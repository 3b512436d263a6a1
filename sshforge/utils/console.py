"""Colorful console logging for sshforge."""

import logging
import sys
from datetime import datetime

from sshforge.config import Settings

RESET = "\033[0m"
DIM = "\033[2m"

# SGR codes per log level
LEVEL_STYLES = {
    "DEBUG": "\033[90m",
    "INFO": "\033[92m",
    "WARNING": "\033[93m",
    "ERROR": "\033[91m",
    "CRITICAL": "\033[41;37;1m",
}

# Longest matching prefix wins
COMPONENT_STYLES = {
    "sshforge.services.process": "\033[96m",
    "sshforge.services.library": "\033[94m",
    "sshforge.services.handoff": "\033[95m",
    "sshforge.services": "\033[36m",
    "sshforge.config": "\033[32m",
}
DEFAULT_STYLE = "\033[37m"

NOISY_LOGGERS = ("asyncssh", "asyncio")


class ColorfulFormatter(logging.Formatter):
    """Log formatter with per-level and per-component colors.

    Lines look like ``12:30:01.042 10/19 | INFO     | services.process | ...``.
    """

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def _paint(self, text: str, style: str) -> str:
        return f"{style}{text}{RESET}" if self.use_colors else text

    @staticmethod
    def _component_style(logger_name: str) -> str:
        matches = [p for p in COMPONENT_STYLES if logger_name.startswith(p)]
        return COMPONENT_STYLES[max(matches, key=len)] if matches else DEFAULT_STYLE

    def format(self, record: logging.LogRecord) -> str:
        when = datetime.fromtimestamp(record.created)
        stamp = f"{when:%H:%M:%S}.{int(record.msecs):03d} {when:%m/%d}"
        component = record.name.removeprefix("sshforge.")

        fields = [
            self._paint(stamp, DIM),
            self._paint(f"{record.levelname:<8}", LEVEL_STYLES.get(record.levelname, DEFAULT_STYLE)),
            self._paint(f"{component:<20}", self._component_style(record.name)),
            record.getMessage(),
        ]
        line = f" {self._paint('|', DIM)} ".join(fields)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(
    level: str | None = None,
    use_colors: bool | None = None,
) -> logging.Logger:
    """Configure the ``sshforge`` logger once.

    Unset arguments come from SSHFORGE_LOG_LEVEL and SSHFORGE_LOG_COLORS.

    Colors are dropped when stderr is not a TTY. Noisy third-party loggers
    are raised to WARNING.

    Returns:
        The package logger
    """
    settings = Settings.from_env()
    level = level or settings.log_level
    if use_colors is None:
        use_colors = settings.log_colors

    if not sys.stderr.isatty():
        use_colors = False

    package_logger = logging.getLogger("sshforge")
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Only add handler if not already configured
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        package_logger.addHandler(handler)
        package_logger.propagate = False

    for noisy_logger in NOISY_LOGGERS:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    return package_logger
