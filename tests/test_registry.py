"""Tests for LoaderRegistry dispatch."""

from concurrent.futures import Future

import pytest

from pointbin.domain.collection import PointCollection
from pointbin.domain.interfaces import LoaderMetadata, LoadResult, PointCloudLoader
from pointbin.infrastructure.formats.binary.loader import BinaryPointCloudLoader
from pointbin.infrastructure.registry import LoaderRegistry, default_registry
from pointbin.shared.exceptions import LoadErrorKind, UnsupportedFormatError


class XyzStubLoader(PointCloudLoader):
    """Loader for a fake format that records the paths it was asked to load."""

    def __init__(self):
        self.calls = []
        self.closed = False

    @classmethod
    def metadata(cls):
        return LoaderMetadata(
            name="Xyz",
            description="Test-only text format",
            file_extensions=frozenset({".xyz"}),
        )

    def load(self, path):
        self.calls.append(str(path))
        return LoadResult(path=str(path), collection=PointCollection())

    def load_async(self, path):
        future = Future()
        future.set_result(self.load(path))
        return future

    def close(self):
        self.closed = True


@pytest.fixture
def registry():
    with default_registry(discover_entry_points=False) as instance:
        yield instance


class TestLoaderRegistry:
    """Registration and lookup."""

    def test_default_registry_has_binary_loader(self, registry):
        assert registry.names() == ["Binary"]
        assert isinstance(registry.get("Binary"), BinaryPointCloudLoader)
        assert [meta.name for meta in registry.list_all()] == ["Binary"]

    def test_find_for_path(self, registry):
        stub = XyzStubLoader()
        registry.register(stub)

        assert isinstance(registry.find_for_path("a/b/scan.BIN"), BinaryPointCloudLoader)
        assert registry.find_for_path("scan.xyz") is stub
        assert registry.find_for_path("scan.ply") is None

    def test_dispatches_to_matching_loader(self, registry):
        stub = XyzStubLoader()
        registry.register(stub)

        result = registry.load("points.xyz")

        assert stub.calls == ["points.xyz"]
        assert result.ok

    def test_binary_dispatch(self, registry, write_point_file):
        path = write_point_file(records=[(1.0, 2.0, 3.0, 4)])

        result = registry.load(path)

        assert result.ok
        assert result.collection.point_count == 1
        assert registry.load_async(path).result(timeout=30).ok

    def test_unsupported_extension(self, registry):
        result = registry.load("scan.ply")

        assert not result.ok
        assert result.error_kind == LoadErrorKind.UNSUPPORTED_FORMAT
        assert isinstance(result.error, UnsupportedFormatError)
        assert "Binary" in str(result.error)

    def test_unsupported_extension_async(self, registry):
        future = registry.load_async("scan.ply")
        assert future.done()
        assert future.result().error_kind == LoadErrorKind.UNSUPPORTED_FORMAT

    def test_register_custom_name_and_unregister(self):
        registry = LoaderRegistry()
        stub = XyzStubLoader()

        registry.register(stub, name="text")

        assert registry.get("text") is stub
        assert registry.unregister("text") is stub
        assert registry.get("text") is None
        assert registry.unregister("text") is None

    def test_register_rejects_non_loader(self):
        with pytest.raises(TypeError):
            LoaderRegistry().register(object())

    def test_replacing_logs_warning(self, caplog):
        registry = LoaderRegistry()
        registry.register(XyzStubLoader())
        with caplog.at_level("WARNING"):
            registry.register(XyzStubLoader())
        assert "Replacing loader" in caplog.text

    def test_close_closes_loaders(self):
        stub = XyzStubLoader()
        with LoaderRegistry() as registry:
            registry.register(stub)
        assert stub.closed
