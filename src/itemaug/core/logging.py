r"""Loggers of item transform modules, and configuration of their output in scripts.

Modules of this package obtain their logger with ``get_logger(__name__)``. All these loggers
are descendants of the package logger, which has no handler of its own apart from a
``NullHandler``. A script enables the log output of the item transforms by calling
``configure_logging()``, optionally with the ``log_level`` of its parsed command-line arguments.

"""

from __future__ import annotations

from argparse import Namespace
from enum import Enum
import logging
from logging import Logger
from typing import Optional, Union


LOG_FORMAT = "%(asctime)-15s [%(levelname)s] %(name)s: %(message)s"
PACKAGE_LOGGER = "itemaug"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


class LogLevel(str, Enum):
    r"""Enumeration of logging levels, e.g., for the choices of a ``--log-level`` option."""

    NOTSET = "NOTSET"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @classmethod
    def from_arg(cls, arg: Union[LogLevel, int, str, None]) -> LogLevel:
        r"""Create enumeration value from function argument.

        Args:
            arg: Enumeration value, case insensitive level name, or one of the ``int`` levels
                defined by the ``logging`` module. If ``None``, the ``INFO`` level is returned.

        Raises:
            ValueError: When ``arg`` does not denote a standard logging level.

        """
        if arg is None:
            return cls.INFO
        if isinstance(arg, cls):
            return arg
        if isinstance(arg, int):
            return cls(logging.getLevelName(arg))
        if isinstance(arg, str):
            return cls(arg.upper())
        raise TypeError(f"{cls.__name__}.from_arg() 'arg' must be int, str, or None")

    def __str__(self) -> str:
        return self.value

    def __int__(self) -> int:
        return logging.getLevelName(self.value)

    def __hash__(self) -> int:
        return hash(self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (LogLevel, int)):
            return NotImplemented
        return int(self) == int(other)

    def __lt__(self, other: Union[LogLevel, int]) -> bool:
        return int(self) < int(other)

    def __le__(self, other: Union[LogLevel, int]) -> bool:
        return int(self) <= int(other)

    def __gt__(self, other: Union[LogLevel, int]) -> bool:
        return int(self) > int(other)

    def __ge__(self, other: Union[LogLevel, int]) -> bool:
        return int(self) >= int(other)


def get_logger(name: Optional[str] = None) -> Logger:
    r"""Get logger of a module of this package, or the package logger if ``name`` is ``None``."""
    return logging.getLogger(name or PACKAGE_LOGGER)


def configure_logging(
    logger: Optional[Logger] = None,
    args: Optional[Namespace] = None,
    log_level: Union[LogLevel, int, str, None] = None,
    format: Optional[str] = None,
) -> Logger:
    r"""Initialize logging of a script which uses item transforms.

    Args:
        logger: Logger whose level is set. Defaults to the package logger, such that the level
            applies to the loggers of all item transform modules.
        args: Parsed command-line arguments. An attribute ``log_level`` takes precedence over
            the ``log_level`` argument of this function.
        log_level: Logging level. Defaults to ``INFO``.
        format: Format of log messages written by the root handler.

    Returns:
        The configured ``logger``.

    """
    logging.basicConfig(format=format or LOG_FORMAT)
    if args is not None:
        log_level = getattr(args, "log_level", log_level)
    if logger is None:
        logger = get_logger()
    logger.setLevel(int(LogLevel.from_arg(log_level)))
    return logger
