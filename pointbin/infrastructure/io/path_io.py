"""
Universal path abstraction supporting local and remote storage.

Loaders only need a handful of file operations: existence check, byte
length, whole-file read and a buffered sequential stream. This module
provides them for local paths through pathlib and for remote URLs
(s3://, gs://, https://, ...) through fsspec.

Example Usage:
    # Local filesystem (no extra dependencies)
    path = UniversalPath("./scans/room.bin")
    data = path.read_bytes()

    # S3 (requires: pip install fsspec s3fs)
    path = UniversalPath("s3://my-bucket/scans/room.bin")
    with path.open("rb") as f:
        header = f.read(4)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Protocol


logger = logging.getLogger(__name__)


class PathBackend(Protocol):
    """Interface every storage backend implements."""

    def open(self, path: str, mode: str = "rb", buffer_size: int = -1) -> BinaryIO: ...

    def exists(self, path: str) -> bool: ...

    def is_file(self, path: str) -> bool: ...

    def size(self, path: str) -> int: ...

    def mkdir(self, path: str, parents: bool = True, exist_ok: bool = True) -> None: ...


class LocalBackend:
    """Storage backend for local filesystem using pathlib."""

    def open(self, path: str, mode: str = "rb", buffer_size: int = -1) -> BinaryIO:
        return open(path, mode, buffering=buffer_size)

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def is_file(self, path: str) -> bool:
        return Path(path).is_file()

    def size(self, path: str) -> int:
        return Path(path).stat().st_size

    def mkdir(self, path: str, parents: bool = True, exist_ok: bool = True) -> None:
        Path(path).mkdir(parents=parents, exist_ok=exist_ok)


class FsspecBackend:
    """Storage backend for remote filesystems using fsspec."""

    def __init__(self, protocol: str):
        """
        Initialize fsspec backend.

        Parameters
        ----------
        protocol : str
            Storage protocol (s3, gs, az, http, https, etc.)

        Raises
        ------
        ImportError
            If fsspec or the protocol's filesystem package is not installed
        OSError
            If fsspec does not know the protocol
        """
        self.protocol = protocol
        try:
            import fsspec
        except ImportError as e:
            raise ImportError(
                f"fsspec is required for {protocol}:// paths. Install with: pip install pointbin[remote]"
            ) from e

        try:
            self._fs = fsspec.filesystem(protocol)
        except ImportError as e:
            raise ImportError(
                f"Protocol '{protocol}' requires additional dependencies.\nOriginal error: {e}"
            ) from e
        except ValueError as e:
            raise OSError(f"Unknown storage protocol '{protocol}': {e}") from e

    def open(self, path: str, mode: str = "rb", buffer_size: int = -1) -> BinaryIO:
        if buffer_size > 0:
            return self._fs.open(path, mode, block_size=buffer_size)
        return self._fs.open(path, mode)

    def exists(self, path: str) -> bool:
        return self._fs.exists(path)

    def is_file(self, path: str) -> bool:
        try:
            return self._fs.isfile(path)
        except OSError:
            return False

    def size(self, path: str) -> int:
        return int(self._fs.size(path))

    def mkdir(self, path: str, parents: bool = True, exist_ok: bool = True) -> None:
        try:
            self._fs.makedirs(path, exist_ok=exist_ok)
        except AttributeError:
            logger.warning("%s filesystem does not support mkdir", self.protocol)


class UniversalPath:
    """
    Path wrapper that picks a storage backend from the URL protocol.

    Parameters
    ----------
    path : str | Path | UniversalPath
        Local path or URL
    """

    def __init__(self, path: str | Path | UniversalPath):
        if isinstance(path, UniversalPath):
            self.path_str = path.path_str
            self._protocol = path._protocol
            self._backend = path._backend
            return

        self.path_str = str(path)
        self._protocol = self.path_str.split("://")[0] if "://" in self.path_str else "local"
        self._backend: PathBackend = (
            LocalBackend() if self._protocol == "local" else FsspecBackend(self._protocol)
        )

    @property
    def is_remote(self) -> bool:
        return self._protocol != "local"

    @property
    def protocol(self) -> str:
        return self._protocol

    @property
    def name(self) -> str:
        return self.path_str.rstrip("/").rsplit("/", 1)[-1] if self.is_remote else Path(self.path_str).name

    @property
    def suffix(self) -> str:
        return Path(self.name).suffix

    @property
    def parent(self) -> UniversalPath:
        if self.is_remote:
            return UniversalPath(self.path_str.rstrip("/").rsplit("/", 1)[0])
        return UniversalPath(Path(self.path_str).parent)

    def exists(self) -> bool:
        return self._backend.exists(self.path_str)

    def is_file(self) -> bool:
        return self._backend.is_file(self.path_str)

    def size(self) -> int:
        """Length of the file in bytes."""
        return self._backend.size(self.path_str)

    def open(self, mode: str = "rb", buffer_size: int = -1) -> BinaryIO:
        """Open the file; ``buffer_size`` sets the read-ahead buffer for sequential scans."""
        return self._backend.open(self.path_str, mode, buffer_size)

    def read_bytes(self) -> bytes:
        with self.open("rb") as f:
            return f.read()

    def write_bytes(self, data: bytes) -> None:
        with self.open("wb") as f:
            f.write(data)

    def mkdir(self, parents: bool = True, exist_ok: bool = True) -> None:
        self._backend.mkdir(self.path_str, parents=parents, exist_ok=exist_ok)

    def __str__(self) -> str:
        return self.path_str

    def __repr__(self) -> str:
        return f"UniversalPath({self.path_str!r})"

    def __fspath__(self) -> str:
        if self.is_remote:
            raise TypeError(f"Remote path {self.path_str} has no local filesystem path")
        return self.path_str

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UniversalPath):
            return self.path_str == other.path_str
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.path_str)
