"""Unit tests for serdegen.serialization.bcs module."""

import pytest

from serdegen.exceptions import DecodeError, SerializationError
from serdegen.serialization.bcs import MAX_LENGTH, BcsDeserializer, BcsSerializer
from serdegen.serialization.types import Slice


class TestUleb128:
    """Tests for ULEB128 lengths and variant tags."""

    @pytest.mark.parametrize(
        "value,encoded",
        [
            (0, b"\x00"),
            (127, b"\x7f"),
            (128, b"\x80\x01"),
            (16384, b"\x80\x80\x01"),
            (MAX_LENGTH, b"\xff\xff\xff\xff\x07"),
        ],
    )
    def test_write_length(self, value, encoded):
        serializer = BcsSerializer()
        serializer.write_length(value)
        assert serializer.get_bytes() == encoded
        assert BcsDeserializer(encoded).read_length() == value

    def test_length_too_large(self):
        with pytest.raises(SerializationError):
            BcsSerializer().write_length(MAX_LENGTH + 1)

    def test_decode_length_too_large(self):
        with pytest.raises(DecodeError):
            BcsDeserializer(b"\x80\x80\x80\x80\x08").read_length()

    def test_large_variant_tag(self):
        assert BcsDeserializer(b"\x80\x80\x80\x80\x08").read_variant_tag() == 1 << 31
        assert BcsDeserializer(b"\xff\xff\xff\xff\x0f").read_variant_tag() == (1 << 32) - 1

    def test_variant_tag_out_of_range(self):
        with pytest.raises(SerializationError):
            BcsSerializer().write_variant_tag(1 << 32)

    def test_non_canonical(self):
        with pytest.raises(DecodeError) as exc_info:
            BcsDeserializer(b"\x80\x00").read_length()
        assert "unexpected zero digit" in str(exc_info.value)

    @pytest.mark.parametrize("data", [b"\xff\xff\xff\xff\x1f", b"\xff\xff\xff\xff\x8f\x01"])
    def test_overflow(self, data):
        with pytest.raises(DecodeError) as exc_info:
            BcsDeserializer(data).read_variant_tag()
        assert "Overflow" in str(exc_info.value)

    def test_truncated(self):
        with pytest.raises(DecodeError):
            BcsDeserializer(b"\x80").read_length()


class TestBcsPrimitives:
    """Tests for BCS primitive encoding."""

    def test_integers_little_endian(self):
        serializer = BcsSerializer()
        serializer.write_u16(0x0102)
        serializer.write_i32(-1)
        serializer.write_u64(1)
        assert serializer.get_bytes() == b"\x02\x01" + b"\xff" * 4 + b"\x01" + b"\x00" * 7

    def test_128_bit(self):
        serializer = BcsSerializer()
        serializer.write_u128((1 << 128) - 1)
        serializer.write_i128(-2)
        data = serializer.get_bytes()
        assert data == b"\xff" * 16 + b"\xfe" + b"\xff" * 15
        deserializer = BcsDeserializer(data)
        assert deserializer.read_u128() == (1 << 128) - 1
        assert deserializer.read_i128() == -2

    @pytest.mark.parametrize(
        "method,value",
        [("write_u8", 256), ("write_u8", -1), ("write_i8", 128), ("write_u128", 1 << 128)],
    )
    def test_out_of_range(self, method, value):
        with pytest.raises(SerializationError):
            getattr(BcsSerializer(), method)(value)

    def test_str_and_bytes(self):
        serializer = BcsSerializer()
        serializer.write_str("hé")
        serializer.write_bytes(b"\x00\x01")
        data = serializer.get_bytes()
        assert data == b"\x03h\xc3\xa9\x02\x00\x01"
        deserializer = BcsDeserializer(data)
        assert deserializer.read_str() == "hé"
        assert deserializer.read_bytes() == b"\x00\x01"
        assert deserializer.remaining() == 0

    def test_invalid_utf8(self):
        with pytest.raises(DecodeError):
            BcsDeserializer(b"\x01\xff").read_str()

    def test_bool_and_option_tag(self):
        assert BcsDeserializer(b"\x01").read_bool() is True
        assert BcsDeserializer(b"\x00").read_option_tag() is False
        with pytest.raises(DecodeError):
            BcsDeserializer(b"\x02").read_bool()
        with pytest.raises(DecodeError):
            BcsDeserializer(b"\x02").read_option_tag()

    @pytest.mark.parametrize("value", [1, 2, 0, None, "yes"])
    def test_bool_rejects_non_bool(self, value):
        with pytest.raises(SerializationError):
            BcsSerializer().write_bool(value)

    def test_floats_rejected(self):
        with pytest.raises(SerializationError):
            BcsSerializer().write_f64(1.0)
        with pytest.raises(DecodeError):
            BcsDeserializer(b"\x00" * 4).read_f32()

    def test_char_rejected(self):
        with pytest.raises(SerializationError):
            BcsSerializer().write_char("a")
        with pytest.raises(DecodeError):
            BcsDeserializer(b"a").read_char()


class TestBcsMaps:
    """Tests for canonical map entry ordering."""

    def test_sort_map_entries(self):
        serializer = BcsSerializer()
        serializer.write_length(2)
        offsets = []
        for key, value in [("b", 1), ("a", 2)]:
            offsets.append(serializer.current_offset())
            serializer.write_str(key)
            serializer.write_u8(value)
        serializer.sort_map_entries(offsets)
        assert serializer.get_bytes() == b"\x02\x01a\x02\x01b\x01"

    def test_sort_compares_encoded_bytes(self):
        serializer = BcsSerializer()
        offsets = []
        for key in [b"\x01\x02", b"\x01"]:
            offsets.append(serializer.current_offset())
            serializer.write_bytes(key)
        serializer.sort_map_entries(offsets)
        assert serializer.get_bytes() == b"\x01\x01\x02\x01\x02"

    def test_sort_empty_map(self):
        serializer = BcsSerializer()
        serializer.write_length(0)
        serializer.sort_map_entries([])
        assert serializer.get_bytes() == b"\x00"

    def test_key_order_check(self):
        deserializer = BcsDeserializer(b"\x01a\x01b")
        deserializer.check_that_key_slices_are_increasing(Slice(0, 2), Slice(2, 4))
        with pytest.raises(DecodeError) as exc_info:
            deserializer.check_that_key_slices_are_increasing(Slice(2, 4), Slice(0, 2))
        assert str(exc_info.value) == (
            "Error while decoding map: keys are not serialized in the expected order"
        )

    def test_equal_keys_rejected(self):
        deserializer = BcsDeserializer(b"\x01a\x01a")
        with pytest.raises(DecodeError):
            deserializer.check_that_key_slices_are_increasing(Slice(0, 2), Slice(2, 4))
