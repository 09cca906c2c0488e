"""
Point cloud loader registry.

Usage
-----
>>> from pointbin.infrastructure.registry import default_registry
>>>
>>> registry = default_registry()
>>> result = registry.load("scans/room.bin")
"""

from pointbin.infrastructure.registry.loader_registry import (
    ENTRY_POINT_GROUP,
    LoaderRegistry,
    default_registry,
)


__all__ = ["ENTRY_POINT_GROUP", "LoaderRegistry", "default_registry"]
