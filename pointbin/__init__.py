"""
Binary point cloud loading.

Public API:
-----------
**Loading**:
- BinaryPointCloudLoader  - ``.bin`` loader with streamed and bulk decoders
- LoaderRegistry          - extension-based dispatch across loaders
- default_registry()      - registry with the binary loader registered

**Data**:
- PointCollection         - read-only records with cached bounds
- PointRecord, POINT_DTYPE, pack_color(), unpack_color()

**Writing**:
- write_points(), encode_points()

Example Usage:
--------------
```python
from pointbin import BinaryPointCloudLoader, DecodeMode

with BinaryPointCloudLoader(decode_mode=DecodeMode.BULK) as loader:
    result = loader.load("scans/room.bin")
    if result.ok:
        print(result.collection.bounds)
    else:
        print(result.error_kind, result.error)
```
"""

from pointbin.config import LoaderConfig, MAX_POINT_COUNT
from pointbin.domain.collection import Bounds, PointCollection
from pointbin.domain.interfaces import (
    DecodeMode,
    LoaderMetadata,
    LoadResult,
    LoadWarning,
    PointCloudLoader,
)
from pointbin.domain.point import (
    POINT_DTYPE,
    STRIDE,
    PointRecord,
    make_points,
    pack_color,
    unpack_color,
)
from pointbin.infrastructure.formats.binary import (
    BinaryPointCloudLoader,
    encode_points,
    write_points,
)
from pointbin.infrastructure.registry import LoaderRegistry, default_registry
from pointbin.shared.exceptions import LoadError, LoadErrorKind, PointBinError

__version__ = "0.1.0"

__all__ = [
    "BinaryPointCloudLoader",
    "Bounds",
    "DecodeMode",
    "LoadError",
    "LoadErrorKind",
    "LoadResult",
    "LoadWarning",
    "LoaderConfig",
    "LoaderMetadata",
    "LoaderRegistry",
    "MAX_POINT_COUNT",
    "POINT_DTYPE",
    "PointBinError",
    "PointCloudLoader",
    "PointCollection",
    "PointRecord",
    "STRIDE",
    "default_registry",
    "encode_points",
    "make_points",
    "pack_color",
    "unpack_color",
    "write_points",
]
