"""Managed ThreadPoolExecutor for background point cloud loads.

Wraps ThreadPoolExecutor with lazy creation, pending-task tracking and a
shutdown that cannot hang on a blocked read.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, ParamSpec, TypeVar

from pointbin.shared.exceptions import ExecutorShutdownError


logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


class ManagedExecutor:
    """ThreadPoolExecutor wrapper with managed lifecycle.

    The pool is created on first submit. Loads are I/O bound (file reads
    release the GIL, numpy copies too), so threads give real overlap.

    Example
    -------
    >>> executor = ManagedExecutor(max_workers=4, name="PointLoader")
    >>> future = executor.submit(loader.load, "scan.bin")
    >>> result = future.result()
    >>> executor.shutdown(timeout=2.0)
    """

    def __init__(
        self,
        max_workers: int = 4,
        name: str = "ManagedExecutor",
        *,
        thread_name_prefix: str | None = None,
    ) -> None:
        """Initialize managed executor.

        Parameters
        ----------
        max_workers : int
            Maximum number of worker threads
        name : str
            Name for logging and diagnostics
        thread_name_prefix : str | None
            Prefix for worker thread names (defaults to name)
        """
        self.name = name
        self.max_workers = max_workers
        self._prefix = thread_name_prefix or name

        self._executor: ThreadPoolExecutor | None = None
        self._lock = threading.Lock()
        self._is_shutdown = False
        self._pending_futures: set[Future[Any]] = set()

    def _ensure_executor(self) -> ThreadPoolExecutor:
        """Lazily create executor on first use. Caller must hold ``_lock``."""
        if self._is_shutdown:
            raise ExecutorShutdownError("Executor has been shut down", self.name)
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix=self._prefix,
            )
            logger.debug(
                "[%s] Created executor with %d workers",
                self.name,
                self.max_workers,
            )
        return self._executor

    @property
    def is_shutdown(self) -> bool:
        """Whether the executor has been shut down."""
        return self._is_shutdown

    def submit(
        self,
        fn: Callable[P, T],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> Future[T]:
        """Submit a task for execution.

        Raises
        ------
        ExecutorShutdownError
            If the executor has been shut down
        """
        # Submitting under the lock keeps shutdown() from closing the pool in between.
        with self._lock:
            future = self._ensure_executor().submit(fn, *args, **kwargs)
            self._pending_futures.add(future)

        def _cleanup(f: Future[Any]) -> None:
            with self._lock:
                self._pending_futures.discard(f)

        future.add_done_callback(_cleanup)
        return future

    def shutdown(self, timeout: float = 5.0, *, cancel_pending: bool = False) -> bool:
        """Shut down the executor with timeout protection.

        Parameters
        ----------
        timeout : float
            Maximum seconds to wait for running loads
        cancel_pending : bool
            Cancel loads that have not started yet

        Returns
        -------
        bool
            True if shutdown completed cleanly, False if it timed out
        """
        with self._lock:
            if self._is_shutdown:
                return True
            self._is_shutdown = True
            executor = self._executor
            pending = list(self._pending_futures)

        if executor is None:
            return True

        if cancel_pending:
            for future in pending:
                future.cancel()

        logger.debug("[%s] Shutting down executor (timeout=%.1fs)", self.name, timeout)

        shutdown_complete = threading.Event()

        def _do_shutdown() -> None:
            try:
                executor.shutdown(wait=True)
            finally:
                shutdown_complete.set()

        threading.Thread(target=_do_shutdown, daemon=True).start()

        if shutdown_complete.wait(timeout=timeout):
            logger.debug("[%s] Executor shutdown complete", self.name)
            return True

        logger.warning(
            "[%s] Executor shutdown timed out after %.1fs with %d task(s) still running",
            self.name,
            timeout,
            len(self._pending_futures),
        )
        return False

    def get_diagnostics(self) -> dict[str, Any]:
        """Get diagnostic information about the executor."""
        with self._lock:
            return {
                "name": self.name,
                "max_workers": self.max_workers,
                "is_shutdown": self._is_shutdown,
                "pending_tasks": len(self._pending_futures),
                "executor_created": self._executor is not None,
            }

    def __enter__(self) -> ManagedExecutor:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.shutdown()
