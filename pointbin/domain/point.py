"""
Point record layout and color packing.

A point is 16 bytes: three little-endian float32 coordinates followed by a
uint32 color with red in the lowest byte and alpha in the highest. Arrays of
points use the structured dtype ``POINT_DTYPE`` whose memory layout is the
file layout itself.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np


STRIDE = 16

POINT_DTYPE = np.dtype(
    {
        "names": ["x", "y", "z", "rgba"],
        "formats": ["<f4", "<f4", "<f4", "<u4"],
        "offsets": [0, 4, 8, 12],
        "itemsize": STRIDE,
    }
)


def pack_color(r: int, g: int, b: int, a: int = 255) -> int:
    """Pack four 0-255 channels into a uint32 (R low byte, A high byte)."""
    for channel in (r, g, b, a):
        if not 0 <= channel <= 255:
            raise ValueError(f"Color channel out of range 0-255: {channel}")
    return r | (g << 8) | (b << 16) | (a << 24)


def unpack_color(packed: int) -> tuple[int, int, int, int]:
    """Unpack a uint32 color into an (r, g, b, a) tuple."""
    packed = int(packed)
    return (
        packed & 0xFF,
        (packed >> 8) & 0xFF,
        (packed >> 16) & 0xFF,
        (packed >> 24) & 0xFF,
    )


def pack_colors(rgba: np.ndarray) -> np.ndarray:
    """Vectorised ``pack_color`` for an (N, 4) uint8 array."""
    rgba = np.ascontiguousarray(rgba, dtype=np.uint8)
    if rgba.ndim != 2 or rgba.shape[1] != 4:
        raise ValueError(f"Invalid color shape: {rgba.shape}, expected (N, 4)")
    return rgba.view("<u4").reshape(-1).astype(np.uint32)


def unpack_colors(packed: np.ndarray) -> np.ndarray:
    """Vectorised ``unpack_color`` returning an (N, 4) uint8 array."""
    packed = np.ascontiguousarray(packed, dtype="<u4").reshape(-1)
    return packed.view(np.uint8).reshape(-1, 4).copy()


def make_points(positions: np.ndarray, colors: np.ndarray | int | None = None) -> np.ndarray:
    """Build a ``POINT_DTYPE`` array from (N, 3) positions and packed colors.

    Parameters
    ----------
    positions : np.ndarray
        (N, 3) coordinates, converted to float32
    colors : np.ndarray | int | None
        (N,) packed uint32 colors, (N, 4) uint8 channels, a single packed
        color broadcast to every point, or None for opaque white

    Returns
    -------
    np.ndarray
        Structured array of N records
    """
    positions = np.asarray(positions, dtype=np.float32)
    if positions.ndim != 2 or positions.shape[1] != 3:
        raise ValueError(f"Invalid positions shape: {positions.shape}, expected (N, 3)")

    points = np.empty(positions.shape[0], dtype=POINT_DTYPE)
    points["x"] = positions[:, 0]
    points["y"] = positions[:, 1]
    points["z"] = positions[:, 2]

    if colors is None:
        points["rgba"] = 0xFFFFFFFF
    elif np.isscalar(colors):
        points["rgba"] = int(colors)
    else:
        colors = np.asarray(colors)
        if colors.ndim == 2:
            colors = pack_colors(colors)
        if colors.shape[0] != positions.shape[0]:
            raise ValueError(
                f"Colors count mismatch: {colors.shape[0]} != {positions.shape[0]}"
            )
        points["rgba"] = colors
    return points


@dataclass(frozen=True)
class PointRecord:
    """A single point: float32 position plus packed RGBA color."""

    x: float
    y: float
    z: float
    rgba: int = 0xFFFFFFFF

    @classmethod
    def from_row(cls, row: np.void) -> PointRecord:
        """Create from one element of a ``POINT_DTYPE`` array."""
        return cls(float(row["x"]), float(row["y"]), float(row["z"]), int(row["rgba"]))

    @classmethod
    def from_color(
        cls,
        position: tuple[float, float, float],
        color: tuple[int, int, int, int],
    ) -> PointRecord:
        return cls(*position, rgba=pack_color(*color))

    @property
    def position(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @property
    def color(self) -> tuple[int, int, int, int]:
        return unpack_color(self.rgba)

    def __str__(self) -> str:
        return f"Point({self.x:.2f}, {self.y:.2f}, {self.z:.2f}) RGBA:{self.rgba:08X}"


def records_to_array(records: Iterable[PointRecord]) -> np.ndarray:
    """Convert an iterable of ``PointRecord`` into a ``POINT_DTYPE`` array."""
    return np.array(
        [(r.x, r.y, r.z, r.rgba) for r in records],
        dtype=POINT_DTYPE,
    )


def check_native_layout(dtype: np.dtype = POINT_DTYPE) -> list[str]:
    """Compare the record dtype against the wire layout.

    Returns a list of violations; an empty list means a byte buffer in file
    order can be reinterpreted as records without any per-field conversion on
    this host.
    """
    errors: list[str] = []
    if dtype.itemsize != STRIDE:
        errors.append(f"Record itemsize is {dtype.itemsize}, expected {STRIDE}")

    expected = [("x", "f", 0), ("y", "f", 4), ("z", "f", 8), ("rgba", "u", 12)]
    names = list(dtype.names or ())
    if names != [name for name, _, _ in expected]:
        errors.append(f"Field order is {names}, expected ['x', 'y', 'z', 'rgba']")
    else:
        for name, kind, offset in expected:
            field_dtype, field_offset = dtype.fields[name][:2]
            if field_dtype.kind != kind or field_dtype.itemsize != 4:
                errors.append(f"Field {name!r} has type {field_dtype}, expected 4-byte '{kind}'")
            if field_offset != offset:
                errors.append(f"Field {name!r} at offset {field_offset}, expected {offset}")
            if not field_dtype.isnative:
                errors.append(f"Field {name!r} is not in native byte order")

    if sys.byteorder != "little":
        errors.append(f"Host byte order is {sys.byteorder}, wire format is little-endian")
    return errors
