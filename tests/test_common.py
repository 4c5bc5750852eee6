"""Unit tests for serdegen.common module."""

import pytest

from serdegen.common import escape_identifier, mangle_type, needs_helper
from serdegen.exceptions import UnresolvedFormatError
from serdegen.formats import (
    BOOL,
    BYTES,
    I16,
    STR,
    U8,
    U64,
    MapFormat,
    OptionFormat,
    SeqFormat,
    TupleArrayFormat,
    TupleFormat,
    TypeNameFormat,
    VariableFormat,
)


class TestMangleType:
    """Tests for mangle_type."""

    @pytest.mark.parametrize(
        "format,expected",
        [
            (U64, "u64"),
            (BYTES, "bytes"),
            (TypeNameFormat("Point"), "Point"),
            (OptionFormat(U64), "option_u64"),
            (SeqFormat(TypeNameFormat("Point")), "vector_Point"),
            (MapFormat(STR, U64), "map_str_to_u64"),
            (TupleFormat([U8, STR]), "tuple2_u8_str"),
            (TupleArrayFormat(U8, 32), "array32_u8_array"),
            (
                MapFormat(TupleFormat([U8, STR]), OptionFormat(I16)),
                "map_tuple2_u8_str_to_option_i16",
            ),
            (OptionFormat(SeqFormat(TupleArrayFormat(BOOL, 2))), "option_vector_array2_bool_array"),
        ],
    )
    def test_signature(self, format, expected):
        assert mangle_type(format) == expected

    def test_distinct_shapes_differ(self):
        assert mangle_type(OptionFormat(U64)) != mangle_type(OptionFormat(STR))

    def test_equal_shapes_match(self):
        assert mangle_type(SeqFormat(OptionFormat(U8))) == mangle_type(SeqFormat(OptionFormat(U8)))

    def test_signature_is_identifier_suffix(self):
        signature = mangle_type(MapFormat(TupleFormat([U8, STR]), SeqFormat(U64)))
        assert f"serialize_{signature}".isidentifier()

    def test_variable(self):
        with pytest.raises(UnresolvedFormatError):
            mangle_type(OptionFormat(VariableFormat()))

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Point", "Point"),
            ("x_to_y", "6_x_to_y"),
            ("u8", "2_u8"),
            ("option", "6_option"),
            ("tuple2", "6_tuple2"),
            ("array4", "6_array4"),
            ("_Hidden", "7__Hidden"),
        ],
    )
    def test_type_name(self, name, expected):
        assert mangle_type(TypeNameFormat(name)) == expected

    def test_type_names_cannot_forge_structure(self):
        left = MapFormat(TypeNameFormat("x_to_y"), U8)
        right = MapFormat(TypeNameFormat("x"), TypeNameFormat("y_to_u8"))
        assert mangle_type(left) != mangle_type(right)
        assert mangle_type(OptionFormat(U8)) != mangle_type(OptionFormat(TypeNameFormat("u8")))
        assert mangle_type(TupleFormat([TypeNameFormat("a_b")])) != mangle_type(
            TupleFormat([TypeNameFormat("a"), TypeNameFormat("b")])
        )

    def test_escaped_signature_is_identifier_suffix(self):
        signature = mangle_type(SeqFormat(TypeNameFormat("x_to_y")))
        assert f"serialize_{signature}".isidentifier()


class TestNeedsHelper:
    """Tests for needs_helper."""

    @pytest.mark.parametrize(
        "format",
        [
            OptionFormat(U8),
            SeqFormat(U8),
            MapFormat(U8, U8),
            TupleFormat([U8]),
            TupleArrayFormat(U8, 2),
        ],
    )
    def test_composites(self, format):
        assert needs_helper(format) is True

    @pytest.mark.parametrize("format", [U8, STR, TypeNameFormat("Point")])
    def test_leaves(self, format):
        assert needs_helper(format) is False


class TestEscapeIdentifier:
    """Tests for escape_identifier."""

    def test_keyword(self):
        assert escape_identifier("class") == "class_"
        assert escape_identifier("None") == "None_"

    def test_reserved(self):
        assert escape_identifier("st", {"st", "sj"}) == "st_"

    def test_plain_name(self):
        assert escape_identifier("owner", {"st"}) == "owner"
