"""
Binary point cloud format.

Public API:
-----------
**Loading**:
- BinaryPointCloudLoader  - Loader with streamed / bulk decoders

**Writing**:
- write_points()          - Write to a local or remote path
- encode_points()         - Encode to bytes (in-memory)

Architecture:
-------------
```
codec.py           - Header parsing, size policy, StreamedDecoder / BulkDecoder
loader.py          - PointCloudLoader implementation (blocking + executor-backed async)
writer.py          - Encoder (streamed / bulk)
```
"""

from pointbin.infrastructure.formats.binary.codec import (
    BulkDecoder,
    StreamedDecoder,
    create_decoder,
)
from pointbin.infrastructure.formats.binary.loader import BinaryPointCloudLoader
from pointbin.infrastructure.formats.binary.writer import encode_points, write_points

__all__ = [
    "BinaryPointCloudLoader",
    "BulkDecoder",
    "StreamedDecoder",
    "create_decoder",
    "encode_points",
    "write_points",
]
