"""
Loader for binary point cloud files.

Format: [uint32 count][16-byte record * count], see ``codec``. The loader
validates the file, runs the configured decode strategy and wraps the records
in a ``PointCollection``. Every failure is returned on the ``LoadResult``;
nothing raises out of ``load()`` or out of the future from ``load_async()``.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import Future

from pointbin.config import LoaderConfig
from pointbin.domain.collection import PointCollection
from pointbin.domain.interfaces import (
    DecodeMode,
    LoaderMetadata,
    LoadResult,
    PointCloudLoader,
)
from pointbin.infrastructure.formats.binary.codec import RecordDecoder, create_decoder
from pointbin.infrastructure.io.path_io import UniversalPath
from pointbin.infrastructure.resources.executor_manager import ManagedExecutor
from pointbin.shared.exceptions import (
    ExecutorShutdownError,
    IoFailureError,
    LoadError,
    PointFileNotFoundError,
)
from pointbin.shared.perf import PerfMonitor


logger = logging.getLogger(__name__)

_METADATA = LoaderMetadata(
    name="Binary",
    description="Raw little-endian point records: uint32 count + 16-byte xyz/rgba records",
    file_extensions=frozenset({".bin"}),
)


class BinaryPointCloudLoader(PointCloudLoader):
    """
    Loads ``.bin`` point clouds with a streamed or bulk decoder.

    The decode strategy is fixed when the loader is built. ``DecodeMode.AUTO``
    resolves to bulk when the host record layout matches the file layout and
    to streamed otherwise. An explicit ``DecodeMode.BULK`` on an incompatible
    host is kept as requested and every load fails with
    ``layout_assumption_violated`` instead of degrading silently.

    Parameters
    ----------
    config : LoaderConfig | None
        Loader settings; defaults to ``LoaderConfig()``
    decode_mode : DecodeMode | str | None
        Overrides ``config.decode_mode``
    executor : ManagedExecutor | None
        Shared pool for ``load_async``. When omitted the loader creates and
        owns one, released by ``close()``.
    """

    def __init__(
        self,
        config: LoaderConfig | None = None,
        *,
        decode_mode: DecodeMode | str | None = None,
        executor: ManagedExecutor | None = None,
    ) -> None:
        self.config = config or LoaderConfig()
        mode = DecodeMode(decode_mode) if decode_mode is not None else self.config.decode_mode
        self._decoder: RecordDecoder = create_decoder(mode, buffer_size=self.config.buffer_size)

        self._owns_executor = executor is None
        self._executor = executor or ManagedExecutor(
            max_workers=self.config.max_workers,
            name="BinaryLoader",
        )
        logger.debug("[BinaryLoader] Using %s decoder", self._decoder.mode.value)

    @classmethod
    def metadata(cls) -> LoaderMetadata:
        return _METADATA

    @property
    def decode_mode(self) -> DecodeMode:
        """The resolved strategy (never AUTO)."""
        return self._decoder.mode

    def load(self, path: str | os.PathLike[str]) -> LoadResult:
        path_str = str(path)
        monitor = PerfMonitor(path_str)
        mode = self._decoder.mode

        try:
            file_path = UniversalPath(path_str)
            self._validate_file_exists(file_path)
            decoded = self._decoder.decode(
                file_path,
                max_point_count=self.config.max_point_count,
                monitor=monitor,
            )
            with monitor.track("bounds"):
                collection = PointCollection(decoded.points)
        except LoadError as exc:
            return self._failure(path_str, exc, mode)
        except (OSError, ImportError, ValueError, MemoryError) as exc:
            error = IoFailureError("I/O failure while reading point cloud", path_str, cause=exc)
            return self._failure(path_str, error, mode)

        timings, total_ms = monitor.stop()
        logger.info("[BinaryLoader] Loaded %s (%s, %.1f ms)", collection, mode.value, total_ms)
        logger.debug("[BinaryLoader] Stage timings for %s: %s", path_str, timings)
        return LoadResult(
            path=path_str,
            collection=collection,
            warnings=tuple(decoded.warnings),
            strategy=mode,
            stage_timings=timings,
        )

    def load_async(self, path: str | os.PathLike[str]) -> Future[LoadResult]:
        """Run ``load`` on the worker pool.

        Read and decode run as one task, so decoding always sees the complete
        file. Use ``aload`` to await from asyncio code.
        """
        try:
            return self._executor.submit(self.load, path)
        except ExecutorShutdownError as exc:
            future: Future[LoadResult] = Future()
            error = IoFailureError("Loader executor is shut down", str(path), cause=exc)
            future.set_result(self._failure(str(path), error, self._decoder.mode))
            return future

    def close(self, timeout: float = 5.0) -> None:
        """Shut down the executor if this loader created it."""
        if self._owns_executor:
            self._executor.shutdown(timeout=timeout)

    def __enter__(self) -> BinaryPointCloudLoader:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @staticmethod
    def _validate_file_exists(file_path: UniversalPath) -> None:
        if not file_path.path_str or not file_path.is_file():
            raise PointFileNotFoundError("Point cloud file not found", file_path.path_str)

    @staticmethod
    def _failure(path: str, error: LoadError, mode: DecodeMode) -> LoadResult:
        logger.error("[BinaryLoader] Failed to load point cloud: %s", error)
        return LoadResult.failure(path, error, strategy=mode)
