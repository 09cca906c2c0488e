"""
Decode strategies for the binary point cloud format.

Format (little-endian)::

    uint32 point_count
    point_count x { float32 x, float32 y, float32 z, uint32 rgba }

Two strategies produce the same ``POINT_DTYPE`` array:

- ``StreamedDecoder`` reads a buffered sequential stream and unpacks every
  record as explicit little-endian words. Works on any host.
- ``BulkDecoder`` reads the whole file into one buffer and reinterprets the
  bytes after the header as records in a single block copy. Only valid when
  the host's record layout matches the wire layout, which it checks up front;
  on mismatch every decode fails with ``LayoutAssumptionError``.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from typing import Protocol

import numpy as np

from pointbin.domain.interfaces import DecodeMode, LoadWarning
from pointbin.domain.point import POINT_DTYPE, STRIDE, check_native_layout
from pointbin.infrastructure.io.path_io import UniversalPath
from pointbin.shared.exceptions import (
    CountExceedsLimitError,
    DecodeFailureError,
    LayoutAssumptionError,
    LoadErrorKind,
)
from pointbin.shared.perf import PerfMonitor


logger = logging.getLogger(__name__)

HEADER = struct.Struct("<I")
HEADER_SIZE = HEADER.size
# One record as four little-endian words; float bits pass through untouched.
RECORD_WORDS = struct.Struct("<4I")


@dataclass
class DecodedPoints:
    """Records produced by a decoder plus any non-fatal findings."""

    points: np.ndarray
    declared_count: int
    warnings: list[LoadWarning] = field(default_factory=list)


def expected_file_size(point_count: int) -> int:
    return HEADER_SIZE + point_count * STRIDE


def parse_point_count(header: bytes, path: str | None = None) -> int:
    """Decode the uint32 point count from the first four bytes."""
    if len(header) < HEADER_SIZE:
        raise DecodeFailureError(
            f"File too short for point count header ({len(header)} of {HEADER_SIZE} bytes)",
            path,
            offset=0,
        )
    return HEADER.unpack_from(header)[0]


def validate_point_count(point_count: int, limit: int, path: str | None = None) -> None:
    if point_count > limit:
        raise CountExceedsLimitError(
            "Point count exceeds maximum allowed",
            path,
            point_count=point_count,
            limit=limit,
        )


def check_file_size(
    actual_size: int, point_count: int, path: str | None = None
) -> tuple[int, LoadWarning | None]:
    """Compare the file length with the header.

    Returns the number of whole records present (never more than declared)
    and a size-mismatch warning when the lengths differ. Trailing bytes past
    the declared records are ignored.
    """
    expected = expected_file_size(point_count)
    if actual_size == expected:
        return point_count, None

    available = max(actual_size - HEADER_SIZE, 0) // STRIDE
    readable = min(point_count, available)
    message = (
        f"File size mismatch. Expected {expected}, got {actual_size}. "
        f"File may be corrupted; reading {readable:,} of {point_count:,} points."
    )
    logger.warning("[BinaryCodec] %s (path: %s)", message, path)
    return readable, LoadWarning(
        kind=LoadErrorKind.SIZE_MISMATCH,
        message=message,
        expected_size=expected,
        actual_size=actual_size,
    )


class RecordDecoder(Protocol):
    """Strategy protocol for binary record decoders."""

    mode: DecodeMode

    def decode(
        self,
        file_path: UniversalPath,
        *,
        max_point_count: int,
        monitor: PerfMonitor,
    ) -> DecodedPoints: ...


class StreamedDecoder:
    """Field-by-field decoder over a buffered sequential stream."""

    mode = DecodeMode.STREAMED

    def __init__(self, buffer_size: int = 64 * 1024) -> None:
        self.buffer_size = buffer_size

    def decode(
        self,
        file_path: UniversalPath,
        *,
        max_point_count: int,
        monitor: PerfMonitor,
    ) -> DecodedPoints:
        path = str(file_path)
        file_size = file_path.size()

        with monitor.track("decode"):
            with file_path.open("rb", buffer_size=self.buffer_size) as stream:
                point_count = parse_point_count(stream.read(HEADER_SIZE), path)
                validate_point_count(point_count, max_point_count, path)
                readable, warning = check_file_size(file_size, point_count, path)
                points = self._read_records(stream, readable, path)

        return DecodedPoints(
            points=points,
            declared_count=point_count,
            warnings=[warning] if warning else [],
        )

    @staticmethod
    def _read_records(stream, count: int, path: str) -> np.ndarray:
        points = np.empty(count, dtype=POINT_DTYPE)
        words = points.view("<u4").reshape(count, 4)
        read = stream.read
        unpack = RECORD_WORDS.unpack
        for i in range(count):
            chunk = read(STRIDE)
            if len(chunk) != STRIDE:
                raise DecodeFailureError(
                    f"Unexpected end of data in record {i}",
                    path,
                    offset=HEADER_SIZE + i * STRIDE + len(chunk),
                )
            words[i] = unpack(chunk)
        return points


class BulkDecoder:
    """Whole-buffer decoder that reinterprets bytes as records."""

    mode = DecodeMode.BULK

    def __init__(self) -> None:
        self.layout_violations = check_native_layout(POINT_DTYPE)
        if self.layout_violations:
            logger.warning(
                "[BinaryCodec] Bulk decoding unavailable on this host: %s",
                "; ".join(self.layout_violations),
            )

    def decode(
        self,
        file_path: UniversalPath,
        *,
        max_point_count: int,
        monitor: PerfMonitor,
    ) -> DecodedPoints:
        path = str(file_path)
        if self.layout_violations:
            raise LayoutAssumptionError(
                "Native record layout does not match the wire format: "
                + "; ".join(self.layout_violations),
                path,
            )

        with monitor.track("read"):
            data = file_path.read_bytes()

        with monitor.track("decode"):
            point_count = parse_point_count(data[:HEADER_SIZE], path)
            validate_point_count(point_count, max_point_count, path)
            readable, warning = check_file_size(len(data), point_count, path)
            if readable == 0:
                points = np.empty(0, dtype=POINT_DTYPE)
            else:
                points = np.frombuffer(
                    data, dtype=POINT_DTYPE, count=readable, offset=HEADER_SIZE
                ).copy()

        return DecodedPoints(
            points=points,
            declared_count=point_count,
            warnings=[warning] if warning else [],
        )


def create_decoder(mode: DecodeMode, *, buffer_size: int = 64 * 1024) -> RecordDecoder:
    """Build the decoder for ``mode``; AUTO prefers bulk when the layout check passes."""
    if mode == DecodeMode.AUTO:
        mode = DecodeMode.BULK if not check_native_layout(POINT_DTYPE) else DecodeMode.STREAMED
        logger.debug("[BinaryCodec] AUTO decode mode resolved to %s", mode.value)

    if mode == DecodeMode.BULK:
        return BulkDecoder()
    return StreamedDecoder(buffer_size=buffer_size)
