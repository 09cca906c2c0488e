"""Tests for the point record layout and color packing."""

import numpy as np
import pytest

from pointbin.domain.point import (
    POINT_DTYPE,
    STRIDE,
    PointRecord,
    check_native_layout,
    make_points,
    pack_color,
    pack_colors,
    records_to_array,
    unpack_color,
    unpack_colors,
)


class TestPointLayout:
    """The record dtype is the wire layout."""

    def test_stride_and_offsets(self):
        assert STRIDE == 16
        assert POINT_DTYPE.itemsize == STRIDE
        assert POINT_DTYPE.names == ("x", "y", "z", "rgba")
        assert [POINT_DTYPE.fields[name][1] for name in POINT_DTYPE.names] == [0, 4, 8, 12]

    def test_native_layout_check_passes_on_little_endian(self):
        import sys

        if sys.byteorder != "little":
            pytest.skip("Bulk layout only matches on little-endian hosts")
        assert check_native_layout() == []

    def test_layout_check_flags_padding(self):
        padded = np.dtype(
            {
                "names": ["x", "y", "z", "rgba"],
                "formats": ["<f4", "<f4", "<f4", "<u4"],
                "offsets": [0, 4, 8, 16],
                "itemsize": 20,
            }
        )
        errors = check_native_layout(padded)
        assert any("itemsize" in e for e in errors)
        assert any("offset" in e for e in errors)

    def test_layout_check_flags_field_order(self):
        reordered = np.dtype([("rgba", "<u4"), ("x", "<f4"), ("y", "<f4"), ("z", "<f4")])
        errors = check_native_layout(reordered)
        assert any("Field order" in e for e in errors)

    def test_layout_check_flags_wrong_endianness(self):
        swapped = np.dtype([("x", ">f4"), ("y", ">f4"), ("z", ">f4"), ("rgba", ">u4")])
        import sys

        errors = check_native_layout(swapped)
        if sys.byteorder == "little":
            assert any("native byte order" in e for e in errors)


class TestColorPacking:
    """Packed colors put red in the low byte and alpha in the high byte."""

    def test_channel_positions(self):
        assert pack_color(0xFF, 0, 0, 0) == 0x000000FF
        assert pack_color(0, 0xFF, 0, 0) == 0x0000FF00
        assert pack_color(0, 0, 0xFF, 0) == 0x00FF0000
        assert pack_color(0, 0, 0, 0xFF) == 0xFF000000

    def test_bijection_over_all_byte_values(self):
        for value in range(256):
            other = 255 - value
            for channels in (
                (value, other, value, other),
                (other, value, other, value),
                (value, value, value, value),
            ):
                assert unpack_color(pack_color(*channels)) == channels

    def test_unpack_then_pack_is_identity(self):
        for packed in (0, 0xFFFFFFFF, 0x12345678, 0x80000001):
            assert pack_color(*unpack_color(packed)) == packed

    def test_rejects_out_of_range_channel(self):
        with pytest.raises(ValueError):
            pack_color(256, 0, 0, 0)
        with pytest.raises(ValueError):
            pack_color(0, -1, 0, 0)

    def test_vectorised_matches_scalar(self):
        rgba = np.array([[1, 2, 3, 4], [255, 0, 128, 7], [0, 0, 0, 0]], dtype=np.uint8)
        packed = pack_colors(rgba)
        assert packed.tolist() == [pack_color(*row) for row in rgba.tolist()]
        np.testing.assert_array_equal(unpack_colors(packed), rgba)

    def test_vectorised_rejects_bad_shape(self):
        with pytest.raises(ValueError):
            pack_colors(np.zeros((3, 3), dtype=np.uint8))


class TestPointRecord:
    """PointRecord value semantics."""

    def test_position_and_color(self):
        record = PointRecord.from_color((1.0, 2.0, 3.0), (10, 20, 30, 40))
        assert record.position == (1.0, 2.0, 3.0)
        assert record.color == (10, 20, 30, 40)

    def test_is_immutable(self):
        record = PointRecord(1.0, 2.0, 3.0)
        with pytest.raises(AttributeError):
            record.x = 5.0

    def test_str(self):
        record = PointRecord(1.0, 2.0, 3.0, 0xFF0000FF)
        assert str(record) == "Point(1.00, 2.00, 3.00) RGBA:FF0000FF"

    def test_from_row_roundtrip(self):
        records = [PointRecord(1.5, -2.0, 0.25, 0xDEADBEEF), PointRecord(0.0, 0.0, 0.0, 0)]
        array = records_to_array(records)
        assert array.dtype == POINT_DTYPE
        assert [PointRecord.from_row(row) for row in array] == records


class TestMakePoints:
    """make_points builds record arrays from separate arrays."""

    def test_packed_colors(self):
        positions = np.array([[0, 0, 0], [1, 2, 3]], dtype=np.float32)
        points = make_points(positions, np.array([1, 2], dtype=np.uint32))
        assert points["rgba"].tolist() == [1, 2]
        assert points["z"].tolist() == [0.0, 3.0]

    def test_channel_colors(self):
        positions = np.zeros((2, 3))
        colors = np.array([[255, 0, 0, 255], [0, 255, 0, 128]], dtype=np.uint8)
        points = make_points(positions, colors)
        assert points["rgba"].tolist() == [pack_color(255, 0, 0, 255), pack_color(0, 255, 0, 128)]

    def test_default_color_is_opaque_white(self):
        points = make_points(np.zeros((3, 3)))
        assert (points["rgba"] == 0xFFFFFFFF).all()

    def test_scalar_color_broadcasts(self):
        points = make_points(np.zeros((2, 3)), 0x11223344)
        assert points["rgba"].tolist() == [0x11223344, 0x11223344]

    def test_shape_validation(self):
        with pytest.raises(ValueError):
            make_points(np.zeros((3, 2)))
        with pytest.raises(ValueError):
            make_points(np.zeros((3, 3)), np.zeros(2, dtype=np.uint32))
