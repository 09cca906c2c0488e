"""
Writer for binary point cloud files.

Produces the layout read by ``BinaryPointCloudLoader``. The streamed variant
packs each record as four explicit little-endian words; the bulk variant dumps
the record array in one call. Both emit identical bytes.
"""

from __future__ import annotations

import io
import logging
import os
from collections.abc import Iterable

import numpy as np

from pointbin.config import MAX_POINT_COUNT
from pointbin.domain.collection import PointCollection
from pointbin.domain.point import POINT_DTYPE, PointRecord, records_to_array
from pointbin.infrastructure.formats.binary.codec import HEADER, RECORD_WORDS
from pointbin.infrastructure.io.path_io import UniversalPath
from pointbin.shared.exceptions import CountExceedsLimitError
from pointbin.shared.perf import format_size


logger = logging.getLogger(__name__)

PointsLike = np.ndarray | PointCollection | Iterable[PointRecord]


def _as_point_array(points: PointsLike) -> np.ndarray:
    if isinstance(points, PointCollection):
        return points.points
    if isinstance(points, np.ndarray):
        if points.dtype != POINT_DTYPE:
            raise TypeError(f"points must use POINT_DTYPE, got {points.dtype}")
        return points
    return records_to_array(points)


def encode_points(points: PointsLike, *, bulk: bool = False) -> bytes:
    """Encode points to the binary format.

    Parameters
    ----------
    points : np.ndarray | PointCollection | Iterable[PointRecord]
        Records to encode, in output order
    bulk : bool
        Dump the array memory in one call instead of packing field by field

    Returns
    -------
    bytes
        Header followed by ``len(points)`` 16-byte records
    """
    array = _as_point_array(points)
    count = int(array.shape[0])
    if count > MAX_POINT_COUNT:
        raise CountExceedsLimitError(
            "Refusing to write more points than a loader accepts",
            point_count=count,
            limit=MAX_POINT_COUNT,
        )

    array = np.ascontiguousarray(array)
    if bulk:
        return HEADER.pack(count) + array.tobytes()

    buffer = io.BytesIO()
    buffer.write(HEADER.pack(count))
    pack = RECORD_WORDS.pack
    for words in array.view("<u4").reshape(count, 4).tolist():
        buffer.write(pack(*words))
    return buffer.getvalue()


def write_points(
    file_path: str | os.PathLike[str] | UniversalPath,
    points: PointsLike,
    *,
    bulk: bool = False,
) -> int:
    """Write points to ``file_path``, creating parent directories.

    Returns
    -------
    int
        Number of bytes written
    """
    file_path = UniversalPath(file_path)
    data = encode_points(points, bulk=bulk)

    parent = file_path.parent
    if parent.path_str and not parent.exists():
        parent.mkdir(parents=True, exist_ok=True)

    file_path.write_bytes(data)

    count = (len(data) - HEADER.size) // RECORD_WORDS.size
    logger.info(
        "[BinaryWriter] Saved %s points to %s (%s)",
        f"{count:,}",
        file_path,
        format_size(len(data)),
    )
    return len(data)
