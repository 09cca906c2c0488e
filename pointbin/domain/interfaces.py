"""
Loader contract for point cloud file formats.

Every format-specific loader derives from ``PointCloudLoader`` and reports
outcomes through ``LoadResult``. Failures are values, not exceptions: a
loader catches its own errors and returns them on the result so callers
never have to guard ``load()`` with try/except.
"""

from __future__ import annotations

import asyncio
import os
from abc import ABC, abstractmethod
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pointbin.domain.collection import PointCollection
from pointbin.shared.exceptions import LoadError, LoadErrorKind


class DecodeMode(str, Enum):
    """Record decoding strategies.

    ``AUTO`` is resolved once, when a loader is constructed.
    """

    STREAMED = "streamed"
    BULK = "bulk"
    AUTO = "auto"


@dataclass(frozen=True)
class LoadWarning:
    """Non-fatal problem encountered while loading."""

    kind: LoadErrorKind
    message: str
    expected_size: int | None = None
    actual_size: int | None = None

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


@dataclass(frozen=True)
class LoadResult:
    """Outcome of a single load.

    Exactly one of ``collection`` and ``error`` is set.
    """

    path: str
    collection: PointCollection | None = None
    error: LoadError | None = None
    warnings: tuple[LoadWarning, ...] = ()
    strategy: DecodeMode | None = None
    stage_timings: dict[str, float] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None and self.collection is not None

    @property
    def error_kind(self) -> LoadErrorKind | None:
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> PointCollection:
        """Return the collection or raise the stored error."""
        if self.error is not None:
            raise self.error
        if self.collection is None:
            raise LoadError("Load produced no collection", self.path)
        return self.collection

    @classmethod
    def failure(
        cls,
        path: str,
        error: LoadError,
        *,
        strategy: DecodeMode | None = None,
        warnings: tuple[LoadWarning, ...] = (),
    ) -> LoadResult:
        return cls(path=path, error=error, strategy=strategy, warnings=warnings)


@dataclass(frozen=True)
class LoaderMetadata:
    """Descriptive information about a loader implementation.

    Attributes
    ----------
    name : str
        Display name (e.g., "Binary")
    description : str
        Brief description of the format
    file_extensions : frozenset[str]
        Lower-case extensions including the dot (e.g., ".bin")
    version : str
        Loader version string
    """

    name: str
    description: str
    file_extensions: frozenset[str] = frozenset()
    version: str = "1.0.0"


class PointCloudLoader(ABC):
    """Base class for point cloud loaders.

    Subclasses provide ``metadata()``, ``load()`` and ``load_async()``.
    ``name``, ``supported_extensions`` and ``can_load()`` are derived from the
    metadata.

    Example
    -------
    >>> loader = BinaryPointCloudLoader()
    >>> if loader.can_load("scan.bin"):
    ...     result = loader.load("scan.bin")
    ...     if result.ok:
    ...         print(result.collection)
    """

    @classmethod
    @abstractmethod
    def metadata(cls) -> LoaderMetadata:
        ...

    @property
    def name(self) -> str:
        return self.metadata().name

    @property
    def supported_extensions(self) -> frozenset[str]:
        return self.metadata().file_extensions

    def can_load(self, path: str | os.PathLike[str] | None) -> bool:
        """True if ``path`` is non-empty and has a supported extension."""
        if not path:
            return False
        extension = Path(str(path)).suffix.lower()
        return extension in self.supported_extensions

    @abstractmethod
    def load(self, path: str | os.PathLike[str]) -> LoadResult:
        """Load synchronously on the calling thread."""
        ...

    @abstractmethod
    def load_async(self, path: str | os.PathLike[str]) -> Future[LoadResult]:
        """Load on a worker thread; the returned future never raises."""
        ...

    async def aload(self, path: str | os.PathLike[str]) -> LoadResult:
        """Await ``load_async`` from asyncio code."""
        return await asyncio.wrap_future(self.load_async(path))
