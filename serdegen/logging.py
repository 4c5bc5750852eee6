"""Logging infrastructure for serdegen.

Every component logs through a child of the ``serdegen`` logger
(``serdegen.generator``, ``serdegen.registry``, ...). The library never
installs handlers on import; applications, and the ``serdegen`` command,
call :func:`configure_logging`.

Example:
    >>> from serdegen.logging import configure_logging, get_logger
    >>> configure_logging(verbose=True)
    >>> get_logger("generator").debug("Emitting Point")
"""

import logging
import sys
from typing import Optional, TextIO


SERDEGEN_ROOT_LOGGER = "serdegen"

DEFAULT_FORMAT = "%(levelname)s %(name)s: %(message)s"


class SerdeGenLoggerFactory:
    """Factory for serdegen component loggers.

    Loggers are arranged under the ``serdegen`` namespace, so levels can be
    tuned per component with :meth:`set_level`.
    """

    _handler: Optional[logging.Handler] = None

    @classmethod
    def get_logger(cls, name: str = "") -> logging.Logger:
        """Get the logger of a component, or the root serdegen logger."""
        if name:
            return logging.getLogger(f"{SERDEGEN_ROOT_LOGGER}.{name}")
        return logging.getLogger(SERDEGEN_ROOT_LOGGER)

    @staticmethod
    def level_for(verbose: bool) -> int:
        return logging.DEBUG if verbose else logging.INFO

    @classmethod
    def configure(
        cls,
        level: int = logging.INFO,
        format_string: str = DEFAULT_FORMAT,
        stream: Optional[TextIO] = None,
    ) -> logging.Logger:
        """Attach a stream handler to the root serdegen logger.

        Calling this again replaces the handler installed by the previous
        call instead of adding a second one.

        Args:
            level: Logging level for the root serdegen logger.
            format_string: Format string for log records.
            stream: Output stream. Defaults to standard error.

        Returns:
            The root serdegen logger.
        """
        logger = logging.getLogger(SERDEGEN_ROOT_LOGGER)
        if cls._handler is not None:
            logger.removeHandler(cls._handler)

        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(logging.Formatter(format_string))
        logger.addHandler(handler)
        logger.setLevel(level)
        cls._handler = handler
        return logger

    @classmethod
    def reset(cls) -> None:
        """Remove the handler installed by :meth:`configure`, if any."""
        if cls._handler is not None:
            logging.getLogger(SERDEGEN_ROOT_LOGGER).removeHandler(cls._handler)
            cls._handler = None

    @classmethod
    def set_level(cls, level: int, component: str = "") -> None:
        cls.get_logger(component).setLevel(level)

    @classmethod
    def is_configured(cls) -> bool:
        return cls._handler is not None


def get_logger(name: str = "") -> logging.Logger:
    """Get a serdegen logger for a component.

    Args:
        name: Component name (e.g., 'generator', 'cli').
    """
    return SerdeGenLoggerFactory.get_logger(name)


def configure_logging(
    level: Optional[int] = None,
    verbose: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure serdegen logging.

    Args:
        level: Explicit logging level. Takes precedence over ``verbose``.
        verbose: Log at DEBUG instead of INFO.
        stream: Output stream. Defaults to standard error.
    """
    if level is None:
        level = SerdeGenLoggerFactory.level_for(verbose)
    return SerdeGenLoggerFactory.configure(level, stream=stream)


def set_level(level: int, component: str = "") -> None:
    SerdeGenLoggerFactory.set_level(level, component)
