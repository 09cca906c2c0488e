"""Resource management infrastructure for loaders."""

from pointbin.infrastructure.resources.executor_manager import ManagedExecutor


__all__ = ["ManagedExecutor"]
