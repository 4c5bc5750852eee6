"""serdegen exceptions.

This module defines the exception hierarchy for serdegen. All exceptions
inherit from :class:`SerdeGenError`.

Errors fall in two groups. :class:`ConfigurationError`, :class:`SchemaError`
and :class:`GenerationError` are raised by the generator itself and abort a
generation run. :class:`SerializationError` and :class:`DecodeError` are
raised by the runtime and by generated code while encoding or decoding values.

Example:
    Handling generator errors::

        from serdegen.exceptions import SchemaError, GenerationError

        try:
            generator.output(target_dir, registry)
        except SchemaError as e:
            print(f"Invalid registry: {e}")
        except GenerationError as e:
            print(f"Could not write {e.container_name}: {e}")
"""

from typing import Optional


class SerdeGenError(Exception):
    """Base class for all serdegen exceptions.

    Args:
        message: The error message describing the exception.
        cause: The underlying exception that caused this error, if any.

    Attributes:
        cause: The underlying cause of this exception, if any.
    """

    def __init__(self, message: str = "", cause: Exception = None):
        super().__init__(message)
        self.cause = cause


class ConfigurationError(SerdeGenError):
    """Raised when the generator configuration is invalid.

    Example:
        - Empty or malformed module name
        - Unknown encoding or target language
        - Unreadable configuration file
    """
    pass


class SchemaError(SerdeGenError):
    """Raised when a registry cannot be used as generator input.

    A schema error is fatal: it is raised before any output is written,
    since code emitted for a malformed schema cannot be trusted.

    Args:
        message: The error message.
        container_name: Name of the offending container, if known.
        cause: The underlying exception, if any.

    Example:
        - A named reference to a container that is not defined
        - Duplicate variant tags or field names
        - An unresolved placeholder format
    """

    def __init__(
        self,
        message: str = "",
        container_name: Optional[str] = None,
        cause: Exception = None,
    ):
        super().__init__(message, cause)
        self._container_name = container_name

    @property
    def container_name(self) -> Optional[str]:
        """Get the name of the container that failed validation."""
        return self._container_name


class UnresolvedFormatError(SchemaError):
    """Raised when the unresolved placeholder format reaches the generator.

    The placeholder only exists while a registry is being inferred upstream;
    a finished registry never contains one.
    """
    pass


class GenerationError(SerdeGenError):
    """Raised when a generation run fails after validation.

    Typically an I/O failure while writing one of the output units.

    Args:
        message: The error message.
        container_name: Name of the unit being written when the failure
            happened, if any.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str = "",
        container_name: Optional[str] = None,
        cause: Exception = None,
    ):
        super().__init__(message, cause)
        self._container_name = container_name

    @property
    def container_name(self) -> Optional[str]:
        """Get the name of the unit that could not be produced."""
        return self._container_name


class SerializationError(SerdeGenError):
    """Raised when a value cannot be encoded.

    Example:
        - An integer outside the range of its declared width
        - A fixed-size array whose length differs from the declared size
        - A primitive the active encoding does not support
    """
    pass


class DecodeError(SerdeGenError):
    """Raised when input bytes or JSON cannot be decoded.

    Example:
        - Unknown variant index
        - Map keys not in canonical order
        - Truncated input or trailing bytes
        - Invalid boolean, option tag or UTF-8 data
    """
    pass
