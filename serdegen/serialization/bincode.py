"""Bincode encoding.

Fixed-width little-endian integers and floats, ``u64`` lengths and ``u32``
variant tags. Map entries are written in insertion order.
"""

from serdegen.exceptions import DecodeError, SerializationError
from serdegen.serialization.binary import BinaryDeserializer, BinarySerializer

MAX_LENGTH = (1 << 63) - 1


class BincodeSerializer(BinarySerializer):
    def write_length(self, length: int) -> None:
        if length < 0 or length > MAX_LENGTH:
            raise SerializationError(f"Length {length} exceeds the maximum supported value")
        self.write_u64(length)

    def write_variant_tag(self, index: int) -> None:
        self.write_u32(index)


class BincodeDeserializer(BinaryDeserializer):
    def read_length(self) -> int:
        length = self.read_u64()
        if length > MAX_LENGTH:
            raise DecodeError(f"Length {length} exceeds the maximum supported value")
        return length

    def read_variant_tag(self) -> int:
        return self.read_u32()
