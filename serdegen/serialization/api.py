"""Serialization API interfaces.

Generated code talks to an encoding exclusively through the two interfaces
defined here. An encoding (bincode, BCS) supplies one implementation of
each; the generated ``serialize`` / ``deserialize`` methods never depend on
which one is in use.

Example:
    Driving a generated type by hand::

        from serdegen.serialization.bcs import BcsSerializer, BcsDeserializer

        serializer = BcsSerializer()
        point.serialize(serializer)
        data = serializer.get_bytes()

        deserializer = BcsDeserializer(data)
        assert Point.deserialize(deserializer) == point
"""

from abc import ABC, abstractmethod
from typing import Any, List


class Serializer(ABC):
    """Interface for writing encoded values.

    Integer writers raise :class:`~serdegen.exceptions.SerializationError`
    when the value does not fit the declared width.
    """

    @abstractmethod
    def write_unit(self, value: Any) -> None:
        pass

    @abstractmethod
    def write_bool(self, value: bool) -> None:
        pass

    @abstractmethod
    def write_i8(self, value: int) -> None:
        pass

    @abstractmethod
    def write_i16(self, value: int) -> None:
        pass

    @abstractmethod
    def write_i32(self, value: int) -> None:
        pass

    @abstractmethod
    def write_i64(self, value: int) -> None:
        pass

    @abstractmethod
    def write_i128(self, value: int) -> None:
        pass

    @abstractmethod
    def write_u8(self, value: int) -> None:
        pass

    @abstractmethod
    def write_u16(self, value: int) -> None:
        pass

    @abstractmethod
    def write_u32(self, value: int) -> None:
        pass

    @abstractmethod
    def write_u64(self, value: int) -> None:
        pass

    @abstractmethod
    def write_u128(self, value: int) -> None:
        pass

    @abstractmethod
    def write_f32(self, value: float) -> None:
        pass

    @abstractmethod
    def write_f64(self, value: float) -> None:
        pass

    @abstractmethod
    def write_char(self, value: str) -> None:
        pass

    @abstractmethod
    def write_str(self, value: str) -> None:
        pass

    @abstractmethod
    def write_bytes(self, value: bytes) -> None:
        pass

    @abstractmethod
    def write_option_tag(self, present: bool) -> None:
        """Write the presence marker of an optional value."""
        pass

    @abstractmethod
    def write_length(self, length: int) -> None:
        """Write the length prefix of a sequence, map, string or byte array."""
        pass

    @abstractmethod
    def write_variant_tag(self, index: int) -> None:
        """Write the tag selecting an enum variant."""
        pass

    @abstractmethod
    def current_offset(self) -> int:
        """Get the number of bytes written so far."""
        pass

    @abstractmethod
    def sort_map_entries(self, offsets: List[int]) -> None:
        """Reorder the map entries starting at the given offsets.

        Called once a map has been fully written. Each offset marks the
        start of one entry; the last entry runs to the end of the output.
        Encodings without a canonical map ordering leave the entries as
        they are.
        """
        pass

    @abstractmethod
    def get_bytes(self) -> bytes:
        """Get everything written so far."""
        pass


class Deserializer(ABC):
    """Interface for reading encoded values.

    Every reader raises :class:`~serdegen.exceptions.DecodeError` on
    truncated or malformed input.
    """

    @abstractmethod
    def read_unit(self) -> Any:
        pass

    @abstractmethod
    def read_bool(self) -> bool:
        pass

    @abstractmethod
    def read_i8(self) -> int:
        pass

    @abstractmethod
    def read_i16(self) -> int:
        pass

    @abstractmethod
    def read_i32(self) -> int:
        pass

    @abstractmethod
    def read_i64(self) -> int:
        pass

    @abstractmethod
    def read_i128(self) -> int:
        pass

    @abstractmethod
    def read_u8(self) -> int:
        pass

    @abstractmethod
    def read_u16(self) -> int:
        pass

    @abstractmethod
    def read_u32(self) -> int:
        pass

    @abstractmethod
    def read_u64(self) -> int:
        pass

    @abstractmethod
    def read_u128(self) -> int:
        pass

    @abstractmethod
    def read_f32(self) -> float:
        pass

    @abstractmethod
    def read_f64(self) -> float:
        pass

    @abstractmethod
    def read_char(self) -> str:
        pass

    @abstractmethod
    def read_str(self) -> str:
        pass

    @abstractmethod
    def read_bytes(self) -> bytes:
        pass

    @abstractmethod
    def read_option_tag(self) -> bool:
        pass

    @abstractmethod
    def read_length(self) -> int:
        pass

    @abstractmethod
    def read_variant_tag(self) -> int:
        pass

    @abstractmethod
    def current_offset(self) -> int:
        """Get the number of bytes consumed so far."""
        pass

    @abstractmethod
    def remaining(self) -> int:
        """Get the number of bytes not consumed yet."""
        pass

    @abstractmethod
    def check_that_key_slices_are_increasing(self, key1: Any, key2: Any) -> None:
        """Check that two consecutive map keys are in canonical order.

        Args:
            key1: :class:`~serdegen.serialization.types.Slice` of the
                previous key in the input.
            key2: Slice of the current key.
        """
        pass
