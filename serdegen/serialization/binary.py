"""Shared implementation of the little-endian binary encodings."""

import struct
from typing import List

from serdegen.exceptions import DecodeError, SerializationError
from serdegen.serialization import types as st
from serdegen.serialization.api import Deserializer, Serializer


class BinarySerializer(Serializer):
    """Serializer writing fixed-width little-endian primitives.

    Subclasses choose how lengths and variant tags are written and whether
    map entries are reordered.
    """

    def __init__(self):
        self._output = bytearray()

    def _write(self, data: bytes) -> None:
        self._output.extend(data)

    def _pack(self, fmt: str, value, kind: str) -> None:
        try:
            self._write(struct.pack(fmt, value))
        except (struct.error, OverflowError) as e:
            raise SerializationError(f"Value {value!r} does not fit in {kind}", cause=e)

    def _write_wide(self, value: int, signed: bool, kind: str) -> None:
        try:
            self._write(value.to_bytes(16, "little", signed=signed))
        except (OverflowError, AttributeError) as e:
            raise SerializationError(f"Value {value!r} does not fit in {kind}", cause=e)

    def write_unit(self, value) -> None:
        pass

    def write_bool(self, value: bool) -> None:
        if not isinstance(value, bool):
            raise SerializationError(f"Not a bool: {value!r}")
        self._write(b"\x01" if value else b"\x00")

    def write_i8(self, value: int) -> None:
        self._pack("<b", value, "i8")

    def write_i16(self, value: int) -> None:
        self._pack("<h", value, "i16")

    def write_i32(self, value: int) -> None:
        self._pack("<i", value, "i32")

    def write_i64(self, value: int) -> None:
        self._pack("<q", value, "i64")

    def write_i128(self, value: int) -> None:
        self._write_wide(value, True, "i128")

    def write_u8(self, value: int) -> None:
        self._pack("<B", value, "u8")

    def write_u16(self, value: int) -> None:
        self._pack("<H", value, "u16")

    def write_u32(self, value: int) -> None:
        self._pack("<I", value, "u32")

    def write_u64(self, value: int) -> None:
        self._pack("<Q", value, "u64")

    def write_u128(self, value: int) -> None:
        self._write_wide(value, False, "u128")

    def write_f32(self, value: float) -> None:
        self._pack("<f", value, "f32")

    def write_f64(self, value: float) -> None:
        self._pack("<d", value, "f64")

    def write_char(self, value: str) -> None:
        if not isinstance(value, str) or len(value) != 1:
            raise SerializationError(f"Not a single character: {value!r}")
        self._write(self._encode_utf8(value))

    def write_str(self, value: str) -> None:
        data = self._encode_utf8(value)
        self.write_length(len(data))
        self._write(data)

    def write_bytes(self, value: bytes) -> None:
        self.write_length(len(value))
        self._write(value)

    def write_option_tag(self, present: bool) -> None:
        self._write(b"\x01" if present else b"\x00")

    def current_offset(self) -> int:
        return len(self._output)

    def sort_map_entries(self, offsets: List[int]) -> None:
        pass

    def get_bytes(self) -> bytes:
        return bytes(self._output)

    @staticmethod
    def _encode_utf8(value: str) -> bytes:
        try:
            return value.encode("utf-8")
        except (UnicodeEncodeError, AttributeError) as e:
            raise SerializationError(f"Not a valid UTF-8 string: {value!r}", cause=e)


class BinaryDeserializer(Deserializer):
    """Deserializer reading fixed-width little-endian primitives."""

    def __init__(self, content: bytes):
        self._input = bytes(content)
        self._pos = 0

    def _read(self, length: int) -> bytes:
        end = self._pos + length
        if length < 0 or end > len(self._input):
            raise DecodeError(
                f"Unexpected end of input: needed {length} bytes at offset "
                f"{self._pos}, {self.remaining()} available"
            )
        data = self._input[self._pos:end]
        self._pos = end
        return data

    def _unpack(self, fmt: str, size: int):
        return struct.unpack(fmt, self._read(size))[0]

    def read_unit(self) -> st.Unit:
        return st.UNIT

    def read_bool(self) -> bool:
        value = self._read(1)[0]
        if value == 0:
            return False
        if value == 1:
            return True
        raise DecodeError(f"Invalid bool byte: {value}")

    def read_i8(self) -> int:
        return self._unpack("<b", 1)

    def read_i16(self) -> int:
        return self._unpack("<h", 2)

    def read_i32(self) -> int:
        return self._unpack("<i", 4)

    def read_i64(self) -> int:
        return self._unpack("<q", 8)

    def read_i128(self) -> int:
        return int.from_bytes(self._read(16), "little", signed=True)

    def read_u8(self) -> int:
        return self._unpack("<B", 1)

    def read_u16(self) -> int:
        return self._unpack("<H", 2)

    def read_u32(self) -> int:
        return self._unpack("<I", 4)

    def read_u64(self) -> int:
        return self._unpack("<Q", 8)

    def read_u128(self) -> int:
        return int.from_bytes(self._read(16), "little", signed=False)

    def read_f32(self) -> float:
        return self._unpack("<f", 4)

    def read_f64(self) -> float:
        return self._unpack("<d", 8)

    def read_char(self) -> str:
        first = self._read(1)[0]
        if first < 0x80:
            extra = 0
        elif first >> 5 == 0b110:
            extra = 1
        elif first >> 4 == 0b1110:
            extra = 2
        elif first >> 3 == 0b11110:
            extra = 3
        else:
            raise DecodeError(f"Invalid UTF-8 lead byte for char: {first:#x}")
        return self._decode_utf8(bytes([first]) + self._read(extra))

    def read_str(self) -> str:
        length = self.read_length()
        return self._decode_utf8(self._read(length))

    def read_bytes(self) -> bytes:
        length = self.read_length()
        return self._read(length)

    def read_option_tag(self) -> bool:
        value = self._read(1)[0]
        if value == 0:
            return False
        if value == 1:
            return True
        raise DecodeError(f"Invalid option tag: {value}")

    def current_offset(self) -> int:
        return self._pos

    def remaining(self) -> int:
        return len(self._input) - self._pos

    def check_that_key_slices_are_increasing(self, key1: st.Slice, key2: st.Slice) -> None:
        pass

    def slice_bytes(self, key: st.Slice) -> bytes:
        return self._input[key.start:key.end]

    @staticmethod
    def _decode_utf8(data: bytes) -> str:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Invalid UTF-8 data: {e}", cause=e)
