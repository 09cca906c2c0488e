"""Pytest configuration and shared fixtures."""

import shutil
import struct
import tempfile
from pathlib import Path

import numpy as np
import pytest

from pointbin.domain.point import POINT_DTYPE, make_points


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_points():
    """Deterministic 1000-point cloud with varied colors."""
    rng = np.random.default_rng(50)
    positions = rng.uniform(-10.0, 10.0, size=(1000, 3)).astype(np.float32)
    colors = rng.integers(0, 256, size=(1000, 4), dtype=np.uint8)
    return make_points(positions, colors)


@pytest.fixture
def three_points():
    """The three-point scene used for bounds checks."""
    return np.array(
        [
            (0.0, 0.0, 0.0, 0xFF000000),
            (1.0, 1.0, 1.0, 0x00FF0000),
            (-1.0, 2.0, 0.0, 0x0000FF00),
        ],
        dtype=POINT_DTYPE,
    )


def encode_raw(records, declared_count=None, trailing=b""):
    """Hand-pack a file without going through the package's writer."""
    records = list(records)
    count = len(records) if declared_count is None else declared_count
    body = b"".join(struct.pack("<fffI", *record) for record in records)
    return struct.pack("<I", count) + body + trailing


@pytest.fixture
def write_point_file(temp_dir):
    """Factory writing raw bytes or records to a .bin file in ``temp_dir``."""

    def _write(name="cloud.bin", records=(), *, declared_count=None, trailing=b"", raw=None):
        path = temp_dir / name
        data = raw if raw is not None else encode_raw(records, declared_count, trailing)
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def special_points():
    """Records whose coordinates are non-finite or signed-zero bit patterns."""
    words = np.array(
        [
            [0x7F800001, 0xFFC00000, 0x80000000, 0x11223344],  # signalling NaN, -NaN, -0.0
            [0x7F800000, 0xFF800000, 0x00000001, 0xFFFFFFFF],  # +inf, -inf, denormal
            [0x7FBFFFFF, 0x00000000, 0x7FC00001, 0x00000000],  # NaN payloads
        ],
        dtype="<u4",
    )
    return words.reshape(-1).view(POINT_DTYPE)
