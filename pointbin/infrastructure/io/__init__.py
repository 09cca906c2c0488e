"""I/O infrastructure for local and remote storage."""

from pointbin.infrastructure.io.path_io import UniversalPath


__all__ = ["UniversalPath"]
