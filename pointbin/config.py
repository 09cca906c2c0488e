"""
Configuration dataclasses for point cloud loading.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any

from pointbin.domain.interfaces import DecodeMode
from pointbin.shared.exceptions import ConfigError


logger = logging.getLogger(__name__)

# Header counts above this are treated as corrupt or hostile.
MAX_POINT_COUNT = 50_000_000
DEFAULT_BUFFER_SIZE = 64 * 1024


@dataclass
class LoaderConfig:
    """Configuration for binary point cloud loading.

    Attributes
    ----------
    decode_mode : DecodeMode
        Record decoding strategy; AUTO picks bulk when the host layout allows it
    max_point_count : int
        Largest point count a header may declare
    buffer_size : int
        Read-ahead buffer for the streamed path, in bytes
    max_workers : int
        Worker threads for ``load_async`` when the loader owns its executor
    """

    decode_mode: DecodeMode = DecodeMode.AUTO
    max_point_count: int = MAX_POINT_COUNT
    buffer_size: int = DEFAULT_BUFFER_SIZE
    max_workers: int = 4

    def __post_init__(self) -> None:
        if not isinstance(self.decode_mode, DecodeMode):
            try:
                self.decode_mode = DecodeMode(str(self.decode_mode).lower())
            except ValueError as e:
                raise ConfigError(
                    "Unknown decode mode", field_name="decode_mode", value=self.decode_mode
                ) from e
        self.validate()

    def validate(self) -> None:
        """Raise ConfigError for the first invalid field."""
        if self.max_point_count < 0:
            raise ConfigError(
                "max_point_count must be non-negative",
                field_name="max_point_count",
                value=self.max_point_count,
            )
        if self.buffer_size <= 0:
            raise ConfigError(
                "buffer_size must be positive", field_name="buffer_size", value=self.buffer_size
            )
        if self.max_workers < 1:
            raise ConfigError(
                "max_workers must be at least 1", field_name="max_workers", value=self.max_workers
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for easy serialization."""
        data = asdict(self)
        data["decode_mode"] = self.decode_mode.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LoaderConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.debug("Ignoring unknown loader config keys: %s", sorted(unknown))
        return cls(**{key: value for key, value in data.items() if key in known})
