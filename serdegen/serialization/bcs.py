"""Binary Canonical Serialization (BCS).

BCS guarantees a single valid encoding per value:

- lengths and variant tags are ULEB128-encoded ``u32`` values without
  redundant trailing zero groups, and lengths never exceed ``2**31 - 1``;
- map entries are ordered by the bytes of their encoded keys, and
  decoding rejects any other order;
- floating point numbers and chars are not supported.
"""

from typing import List

from serdegen.exceptions import DecodeError, SerializationError
from serdegen.serialization import types as st
from serdegen.serialization.binary import BinaryDeserializer, BinarySerializer

MAX_LENGTH = (1 << 31) - 1
MAX_U32 = (1 << 32) - 1


class BcsSerializer(BinarySerializer):
    def _write_uleb128_u32(self, value: int) -> None:
        while value >= 0x80:
            self._write(bytes([(value & 0x7F) | 0x80]))
            value >>= 7
        self._write(bytes([value]))

    def write_length(self, length: int) -> None:
        if length < 0 or length > MAX_LENGTH:
            raise SerializationError(f"Length {length} exceeds the maximum supported value")
        self._write_uleb128_u32(length)

    def write_variant_tag(self, index: int) -> None:
        if index < 0 or index > MAX_U32:
            raise SerializationError(f"Variant index {index} does not fit in u32")
        self._write_uleb128_u32(index)

    def write_f32(self, value: float) -> None:
        raise SerializationError("BCS does not support floating point values")

    def write_f64(self, value: float) -> None:
        raise SerializationError("BCS does not support floating point values")

    def write_char(self, value: str) -> None:
        raise SerializationError("BCS does not support chars")

    def sort_map_entries(self, offsets: List[int]) -> None:
        """Sort the entries of the map written since ``offsets[0]``.

        Keys are prefix-free, so comparing whole entries orders them by key.
        """
        if not offsets:
            return
        bounds = offsets[1:] + [len(self._output)]
        entries = [bytes(self._output[start:end]) for start, end in zip(offsets, bounds)]
        entries.sort()
        self._output[offsets[0]:] = b"".join(entries)


class BcsDeserializer(BinaryDeserializer):
    def _read_uleb128_u32(self) -> int:
        value = 0
        for shift in range(0, 32, 7):
            byte = self._read(1)[0]
            digit = byte & 0x7F
            value |= digit << shift
            if value > MAX_U32:
                raise DecodeError("Overflow while parsing ULEB128-encoded u32 value")
            if digit == byte:
                if shift > 0 and digit == 0:
                    raise DecodeError("Invalid ULEB128 number: unexpected zero digit")
                return value
        raise DecodeError("Overflow while parsing ULEB128-encoded u32 value")

    def read_length(self) -> int:
        length = self._read_uleb128_u32()
        if length > MAX_LENGTH:
            raise DecodeError(f"Length {length} exceeds the maximum supported value")
        return length

    def read_variant_tag(self) -> int:
        return self._read_uleb128_u32()

    def read_f32(self) -> float:
        raise DecodeError("BCS does not support floating point values")

    def read_f64(self) -> float:
        raise DecodeError("BCS does not support floating point values")

    def read_char(self) -> str:
        raise DecodeError("BCS does not support chars")

    def check_that_key_slices_are_increasing(self, key1: st.Slice, key2: st.Slice) -> None:
        if self.slice_bytes(key1) >= self.slice_bytes(key2):
            raise DecodeError(
                "Error while decoding map: keys are not serialized in the expected order"
            )
