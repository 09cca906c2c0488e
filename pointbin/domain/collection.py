"""
Immutable point collection with a cached axis-aligned bounding box.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from pointbin.domain.point import POINT_DTYPE, STRIDE, PointRecord


Vector3 = tuple[float, float, float]


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box.

    Stored as its min and max corners; center, size and extents are derived.
    The default instance is the zero-size box at the origin.
    """

    minimum: Vector3 = (0.0, 0.0, 0.0)
    maximum: Vector3 = (0.0, 0.0, 0.0)

    @property
    def center(self) -> Vector3:
        return tuple((lo + hi) * 0.5 for lo, hi in zip(self.minimum, self.maximum))

    @property
    def size(self) -> Vector3:
        return tuple(hi - lo for lo, hi in zip(self.minimum, self.maximum))

    @property
    def extents(self) -> Vector3:
        """Half the size along each axis."""
        return tuple(s * 0.5 for s in self.size)

    @property
    def is_zero_size(self) -> bool:
        return all(s == 0.0 for s in self.size)

    def contains(self, point: Vector3) -> bool:
        return all(lo <= p <= hi for lo, p, hi in zip(self.minimum, point, self.maximum))

    def __str__(self) -> str:
        cx, cy, cz = self.center
        ex, ey, ez = self.extents
        return f"Center: ({cx:.2f}, {cy:.2f}, {cz:.2f}), Extents: ({ex:.2f}, {ey:.2f}, {ez:.2f})"


def compute_bounds(points: np.ndarray) -> Bounds:
    """Compute the bounding box of a ``POINT_DTYPE`` array.

    Each axis is reduced over a strided field view, so no copy of the point
    data is made. NaN coordinates are skipped. An empty array yields a
    zero-size box at the origin.
    """
    if points.shape[0] == 0:
        return Bounds()

    minimum = tuple(float(np.fmin.reduce(points[axis])) for axis in ("x", "y", "z"))
    maximum = tuple(float(np.fmax.reduce(points[axis])) for axis in ("x", "y", "z"))
    return Bounds(minimum=minimum, maximum=maximum)


class PointCollection:
    """
    Read-only container for a decoded point cloud.

    The collection takes ownership of the array it is given: the array is
    flagged non-writeable and bounds, count and memory footprint are computed
    once here. Instances can be shared between threads without locking.

    Parameters
    ----------
    points : np.ndarray | None
        Structured array with ``POINT_DTYPE``. None is treated as empty.
    """

    def __init__(self, points: np.ndarray | None = None) -> None:
        if points is None:
            points = np.empty(0, dtype=POINT_DTYPE)
        elif points.dtype != POINT_DTYPE:
            raise TypeError(f"points must use POINT_DTYPE, got {points.dtype}")
        if points.ndim != 1:
            raise ValueError(f"Invalid points shape: {points.shape}, expected (N,)")

        points.flags.writeable = False
        self._points = points
        self._bounds = compute_bounds(points)
        self._point_count = int(points.shape[0])

    @property
    def points(self) -> np.ndarray:
        """The read-only record array."""
        return self._points

    @property
    def bounds(self) -> Bounds:
        return self._bounds

    @property
    def point_count(self) -> int:
        return self._point_count

    @property
    def memory_size(self) -> int:
        """Memory footprint of the records in bytes."""
        return self._point_count * STRIDE

    @property
    def positions(self) -> np.ndarray:
        """(N, 3) float32 copy of the point positions."""
        return np.stack([self._points["x"], self._points["y"], self._points["z"]], axis=1)

    def get_subset(self, start_index: int, count: int) -> np.ndarray:
        """Copy up to ``count`` records starting at ``start_index``.

        The result is shorter than ``count`` when the range runs past the end
        and empty when it starts outside the collection.
        """
        count = min(count, self._point_count - start_index)
        if start_index < 0 or count <= 0:
            return np.empty(0, dtype=POINT_DTYPE)
        return self._points[start_index : start_index + count].copy()

    def __len__(self) -> int:
        return self._point_count

    def __getitem__(self, index: int) -> PointRecord:
        return PointRecord.from_row(self._points[index])

    def __iter__(self) -> Iterator[PointRecord]:
        for row in self._points:
            yield PointRecord.from_row(row)

    def __str__(self) -> str:
        return (
            f"PointCollection: {self._point_count:,} points, Bounds: {self._bounds}, "
            f"Memory: {self.memory_size / (1024 * 1024):.2f} MB"
        )

    def __repr__(self) -> str:
        return f"PointCollection(point_count={self._point_count})"
