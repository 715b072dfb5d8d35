"""
Quill logging: the "quill" logger, printed through rich.

Scope
- `logger` is logging.getLogger("quill"), shared by the interpreter and the
  built-in commands. A TRACE level (5, below DEBUG) is registered for the
  per-word details of script parsing; use trace(...) to emit it.
- configure() installs two rich.logging.RichHandler instances: warnings and
  errors on the stderr console, everything below on the stdout console.
- `console` / `stderr` are the rich consoles the built-in commands print
  their own output on (print, version, echo, help).

Configuration
- QUILL_VERBOSITY (environment) sets the initial level: a verbosity digit
  (0 errors, 1 warnings, 2 info, 3 debug, 4 trace) or a level name. The
  default is 1, so errors and warnings are shown.
- The `verbose` and `log-level` built-in commands call logger.setLevel.

Quick example:
    >>> import logging
    >>> from quill.log import logger, trace
    >>> logger.setLevel(logging.DEBUG)
    >>> logger.debug("expanding %s", "$(x)")
"""
import logging
import os

from rich.console import Console
from rich.logging import RichHandler

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# index: verbosity digit
VERBOSITY = (logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG, TRACE)

NAMES = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

console = Console()
stderr = Console(stderr=True)

logger = logging.getLogger("quill")


def parse_level(value, /):
    """
    logging level for a verbosity digit (clamped to 0..4) or a level name.

    raises
    - ValueError: an unknown level name.
    - TypeError: neither an integer nor a string.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return VERBOSITY[min(max(value, 0), len(VERBOSITY) - 1)]
    if isinstance(value, str):
        text = value.strip().lower()
        if text.lstrip("-").isdigit():
            return parse_level(int(text))
        try:
            return NAMES[text]
        except KeyError:
            raise ValueError("unknown log level %r" % value) from None
    raise TypeError("log level must be a verbosity number or a level name")


def _initial():
    try:
        return parse_level(os.environ.get("QUILL_VERBOSITY", "1"))
    except ValueError:
        return logging.WARNING


class _Below(logging.Filter):

    def __init__(self, level, /):
        super().__init__()
        self.level = level

    def filter(self, record):
        return record.levelno < self.level


def configure(level=None, /, out=None, err=None):
    """
    (re)install the rich handlers on the quill logger; returns the logger.

    parameters
    - level: a logging level; defaults to QUILL_VERBOSITY.
    - out / err: rich consoles for messages below WARNING and for warnings
      and errors; default to the module consoles.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    messages = RichHandler(console=out or console, show_time=False, show_path=False, markup=False)
    messages.addFilter(_Below(logging.WARNING))
    errors = RichHandler(console=err or stderr, show_time=False, show_path=False, markup=False)
    errors.setLevel(logging.WARNING)

    logger.addHandler(messages)
    logger.addHandler(errors)
    logger.propagate = False
    logger.setLevel(_initial() if level is None else level)
    return logger


def trace(message, /, *arguments):
    logger.log(TRACE, message, *arguments)


configure()


__all__ = (
    "TRACE",
    "parse_level",
    "configure",
    "trace",
    "logger",
)
