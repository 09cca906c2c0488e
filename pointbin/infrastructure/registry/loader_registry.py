"""Registry of point cloud loaders.

Maps loader names to instances and dispatches paths to the first loader whose
``can_load()`` accepts them. New formats are added by registering another
``PointCloudLoader``, either directly or through the ``pointbin.loaders``
entry-point group, without touching existing decode code.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import Future
from importlib.metadata import entry_points

from pointbin.domain.interfaces import LoaderMetadata, LoadResult, PointCloudLoader
from pointbin.shared.exceptions import UnsupportedFormatError


logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "pointbin.loaders"


class LoaderRegistry:
    """Name-keyed collection of loaders with path-based dispatch.

    Example
    -------
    >>> registry = LoaderRegistry()
    >>> registry.register(BinaryPointCloudLoader())
    >>> result = registry.load("scans/room.bin")
    """

    def __init__(self, *, discover_entry_points: bool = False) -> None:
        self._loaders: dict[str, PointCloudLoader] = {}
        self._entry_points_loaded = not discover_entry_points

    def register(self, loader: PointCloudLoader, *, name: str | None = None) -> None:
        """Register a loader under ``name`` (defaults to ``loader.name``)."""
        missing = [
            attr for attr in ("metadata", "can_load", "load", "load_async") if not hasattr(loader, attr)
        ]
        if missing:
            raise TypeError(
                f"Loader {loader!r} missing required methods: {missing}. "
                f"Must implement PointCloudLoader."
            )

        key = name or loader.name
        if key in self._loaders:
            logger.warning("[Registry] Replacing loader registered as %s", key)
        self._loaders[key] = loader
        logger.debug(
            "[Registry] Registered loader: %s - extensions: %s",
            key,
            sorted(loader.supported_extensions),
        )

    def unregister(self, name: str) -> PointCloudLoader | None:
        return self._loaders.pop(name, None)

    def get(self, name: str) -> PointCloudLoader | None:
        self._load_entry_points()
        return self._loaders.get(name)

    def names(self) -> list[str]:
        self._load_entry_points()
        return sorted(self._loaders)

    def list_all(self) -> list[LoaderMetadata]:
        self._load_entry_points()
        return [loader.metadata() for loader in self._loaders.values()]

    def find_for_path(self, path: str | os.PathLike[str]) -> PointCloudLoader | None:
        """Return the first registered loader that accepts ``path``."""
        self._load_entry_points()
        for loader in self._loaders.values():
            if loader.can_load(path):
                return loader
        return None

    def load(self, path: str | os.PathLike[str]) -> LoadResult:
        """Load ``path`` with the matching loader."""
        loader = self.find_for_path(path)
        if loader is None:
            return self._unsupported(path)
        return loader.load(path)

    def load_async(self, path: str | os.PathLike[str]) -> Future[LoadResult]:
        loader = self.find_for_path(path)
        if loader is None:
            future: Future[LoadResult] = Future()
            future.set_result(self._unsupported(path))
            return future
        return loader.load_async(path)

    def close(self) -> None:
        """Close every registered loader that holds resources."""
        for loader in self._loaders.values():
            close = getattr(loader, "close", None)
            if close is not None:
                close()

    def _unsupported(self, path: str | os.PathLike[str]) -> LoadResult:
        error = UnsupportedFormatError(
            f"No loader registered for this file type. Available: {', '.join(self.names())}",
            str(path),
        )
        logger.error("[Registry] %s", error)
        return LoadResult.failure(str(path), error)

    def _load_entry_points(self) -> None:
        """Load loaders from entry points (lazy, called once)."""
        if self._entry_points_loaded:
            return
        self._entry_points_loaded = True

        for ep in entry_points(group=ENTRY_POINT_GROUP):
            if ep.name in self._loaders:
                continue
            try:
                factory = ep.load()
                self.register(factory(), name=ep.name)
                logger.debug("[Registry] Loaded loader from entry_point: %s", ep.name)
            except Exception as e:
                logger.warning("[Registry] Failed to load loader entry_point '%s': %s", ep.name, e)

    def __enter__(self) -> LoaderRegistry:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def default_registry(*, discover_entry_points: bool = True) -> LoaderRegistry:
    """Registry with the binary loader plus any entry-point loaders."""
    from pointbin.infrastructure.formats.binary.loader import BinaryPointCloudLoader

    registry = LoaderRegistry(discover_entry_points=discover_entry_points)
    registry.register(BinaryPointCloudLoader())
    return registry
