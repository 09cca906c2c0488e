"""
Custom exceptions for pointbin.

This module provides domain-specific exceptions for better error handling
and clearer error messages throughout the package.

Clean Architecture Note:
- This file belongs to the Shared layer (cross-cutting concerns)
- Can be imported by any layer (domain, infrastructure, cli)
"""

from __future__ import annotations

from enum import Enum


class LoadErrorKind(str, Enum):
    """Failure categories surfaced by point cloud loaders."""

    FILE_NOT_FOUND = "file_not_found"
    COUNT_EXCEEDS_LIMIT = "count_exceeds_limit"
    SIZE_MISMATCH = "size_mismatch"
    IO_FAILURE = "io_failure"
    DECODE_FAILURE = "decode_failure"
    LAYOUT_ASSUMPTION_VIOLATED = "layout_assumption_violated"
    UNSUPPORTED_FORMAT = "unsupported_format"


class PointBinError(Exception):
    """Base exception for all pointbin errors."""

    pass


class LoadError(PointBinError):
    """Raised when a point cloud file cannot be turned into a collection.

    Loaders never let this escape ``load()``; it is carried on the
    ``LoadResult`` instead.
    """

    kind: LoadErrorKind = LoadErrorKind.IO_FAILURE

    def __init__(
        self,
        message: str,
        path: str | None = None,
        *,
        cause: Exception | None = None,
    ):
        """
        Initialize LoadError.

        Parameters
        ----------
        message : str
            Error message
        path : str | None
            Path to the file that failed to load
        cause : Exception | None
            Original exception that caused this error
        """
        self.message = message
        self.path = path
        self.cause = cause

        full_message = message
        if path:
            full_message = f"{full_message} (path: {path})"
        if cause:
            full_message = f"{full_message} (caused by: {cause})"

        super().__init__(full_message)


class PointFileNotFoundError(LoadError):
    """Raised when the input path does not exist or is not a readable file."""

    kind = LoadErrorKind.FILE_NOT_FOUND


class CountExceedsLimitError(LoadError):
    """Raised when a header declares more points than the configured ceiling."""

    kind = LoadErrorKind.COUNT_EXCEEDS_LIMIT

    def __init__(
        self,
        message: str,
        path: str | None = None,
        *,
        point_count: int | None = None,
        limit: int | None = None,
    ):
        self.point_count = point_count
        self.limit = limit

        full_message = message
        if point_count is not None and limit is not None:
            full_message = f"{full_message} (count: {point_count:,}, limit: {limit:,})"

        super().__init__(full_message, path)


class IoFailureError(LoadError):
    """Raised when the underlying storage fails during a read."""

    kind = LoadErrorKind.IO_FAILURE


class DecodeFailureError(LoadError):
    """Raised when the byte stream ends in the middle of a header or record."""

    kind = LoadErrorKind.DECODE_FAILURE

    def __init__(
        self,
        message: str,
        path: str | None = None,
        *,
        offset: int | None = None,
        cause: Exception | None = None,
    ):
        self.offset = offset

        full_message = message
        if offset is not None:
            full_message = f"{full_message} (offset: {offset})"

        super().__init__(full_message, path, cause=cause)


class LayoutAssumptionError(LoadError):
    """Raised by the bulk path when native memory layout differs from the wire layout."""

    kind = LoadErrorKind.LAYOUT_ASSUMPTION_VIOLATED


class UnsupportedFormatError(LoadError):
    """Raised when no registered loader claims a path."""

    kind = LoadErrorKind.UNSUPPORTED_FORMAT


class ConfigError(PointBinError):
    """Raised when configuration is invalid or missing."""

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        value: object = None,
    ):
        """
        Initialize ConfigError.

        Parameters
        ----------
        message : str
            Error message
        field_name : str | None
            Name of the invalid config field
        value : object
            Offending value
        """
        self.field_name = field_name
        self.value = value

        full_message = message
        if field_name:
            full_message = f"{full_message} (field: {field_name}, value: {value!r})"

        super().__init__(full_message)


class ExecutorShutdownError(PointBinError):
    """Raised when work is submitted to an executor that has been shut down."""

    def __init__(self, message: str, executor_name: str | None = None):
        self.executor_name = executor_name

        full_message = message
        if executor_name:
            full_message = f"[{executor_name}] {full_message}"

        super().__init__(full_message)
