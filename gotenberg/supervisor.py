"""Supervision of a long-running process that handles tasks one at a time."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

from .filter import DeadlineExceededError

T = TypeVar("T")


class ProcessAlreadyRestartingError(RuntimeError):
    """Raised when a restart is asked for while one is already going on."""

    def __init__(self, message: str = "process already restarting") -> None:
        super().__init__(message)


class MaximumQueueSizeExceededError(RuntimeError):
    """Raised when ``run`` is called while the request queue is full."""

    def __init__(self, message: str = "maximum queue size exceeded") -> None:
        super().__init__(message)


class LockTimeoutError(DeadlineExceededError):
    """Raised when the process lock cannot be acquired before the deadline."""

    def __init__(self, message: str = "acquire process lock: context deadline exceeded") -> None:
        super().__init__(message)


@runtime_checkable
class Process(Protocol):
    """A process that can be started, stopped and checked for health."""

    def start(self, logger: logging.Logger) -> None:
        """Start the process; raise if it cannot be started."""

    def stop(self, logger: logging.Logger) -> None:
        """Stop the process; raise if it cannot be stopped."""

    def healthy(self, logger: logging.Logger) -> bool:
        """Tell whether the process is healthy."""


class ProcessSupervisor:
    """Runs tasks against a process one at a time, restarting it when needed.

    The process is started on first use, restarted before a task if it is
    unhealthy, and restarted eagerly once ``max_req_limit`` tasks have run.
    At most ``max_queue_size`` callers may wait for the process (0: no limit).
    """

    def __init__(
        self,
        logger: logging.Logger,
        process: Process,
        max_req_limit: int = 0,
        max_queue_size: int = 0,
    ) -> None:
        self._logger = logger
        self._process = process
        self._max_req_limit = max_req_limit
        self._max_queue_size = max_queue_size
        self._process_lock = threading.Lock()
        self._state = threading.Lock()
        self._first_start = False
        self._is_restarting = False
        self._req_counter = 0
        self._req_queue_size = 0
        self._restarts = 0

    def launch(self) -> None:
        """Start the managed process."""
        self._logger.debug("start process")
        try:
            self._process.start(self._logger)
        except Exception as exc:
            raise RuntimeError(f"start process: {exc}") from exc
        self._first_start = True
        self._logger.debug("process successfully started")

    def shutdown(self) -> None:
        """Stop the managed process."""
        self._logger.debug("shutdown process")
        try:
            self._process.stop(self._logger)
        except Exception as exc:
            raise RuntimeError(f"shutdown process: {exc}") from exc
        self._logger.debug("process successfully shutdown")

    def _restart(self) -> None:
        with self._state:
            if self._is_restarting:
                self._logger.debug("process already restarting, skip restart")
                raise ProcessAlreadyRestartingError()
            self._is_restarting = True

        self._logger.debug("restart process")
        try:
            try:
                self.shutdown()
            except Exception as exc:
                # Chances are the process is already stopped.
                self._logger.debug(f"stop process before restart: {exc}")

            try:
                self.launch()
            except Exception as exc:
                raise RuntimeError(f"restart process: {exc}") from exc

            with self._state:
                self._req_counter = 0
                self._restarts += 1
            self._logger.debug("process successfully restarted")
        finally:
            with self._state:
                self._is_restarting = False

    def healthy(self) -> bool:
        """Return the process health; a non-started or restarting process is healthy."""
        if not self._first_start:
            return True
        if self._is_restarting:
            return True
        return self._process.healthy(self._logger)

    def run(
        self,
        logger: logging.Logger,
        task: Callable[[], T],
        timeout: float | None = None,
    ) -> T:
        """Run ``task`` with exclusive use of the process and return its result.

        ``timeout`` is the number of seconds allowed for waiting and running;
        ``None`` means no limit.
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        with self._state:
            if self._max_queue_size > 0 and self._req_queue_size >= self._max_queue_size:
                raise MaximumQueueSizeExceededError()
            self._req_queue_size += 1

        while True:
            try:
                return self._run_locked(logger, task, deadline)
            except ProcessAlreadyRestartingError:
                logger.debug("process is already restarting, trying to acquire process lock again...")
                self._add_to_queue(1)

    def _add_to_queue(self, delta: int) -> None:
        with self._state:
            self._req_queue_size += delta

    def _acquire(self, deadline: float | None) -> bool:
        if deadline is None:
            return self._process_lock.acquire()
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return self._process_lock.acquire(blocking=False)
        return self._process_lock.acquire(timeout=remaining)

    def _run_locked(self, logger: logging.Logger, task: Callable[[], T], deadline: float | None) -> T:
        if not self._acquire(deadline):
            logger.debug("failed to acquire process lock before deadline")
            self._add_to_queue(-1)
            raise LockTimeoutError()

        logger.debug("process lock acquired")
        with self._state:
            self._req_queue_size -= 1
            self._req_counter += 1
        release = True

        try:
            if not self._first_start:
                self._run_with_deadline(self.launch, deadline)

            if not self.healthy():
                self._logger.debug("process is unhealthy, cannot handle task, restarting...")
                self._run_with_deadline(self._restart, deadline)

            error: BaseException | None = None
            result: Any = None
            try:
                result = self._run_with_deadline(task, deadline)
            except Exception as exc:
                error = exc

            with self._state:
                limit_reached = self._max_req_limit > 0 and self._req_counter >= self._max_req_limit
            if limit_reached:
                self._logger.debug("max request limit reached, restarting eagerly...")
                release = False
                threading.Thread(target=self._restart_and_release, args=(logger,), daemon=True).start()

            if error is not None:
                raise error
            return result
        finally:
            if release:
                logger.debug("process lock released")
                self._process_lock.release()

    def _restart_and_release(self, logger: logging.Logger) -> None:
        try:
            self._restart()
        except Exception as exc:
            self._logger.error(f"process restart after task: {exc}")
        finally:
            logger.debug("process lock released")
            self._process_lock.release()

    @staticmethod
    def _run_with_deadline(task: Callable[[], T], deadline: float | None) -> T:
        outcome: dict[str, Any] = {}
        done = threading.Event()

        def target() -> None:
            try:
                outcome["value"] = task()
            except BaseException as exc:
                outcome["error"] = exc
            finally:
                done.set()

        threading.Thread(target=target, daemon=True).start()

        if deadline is None:
            done.wait()
        else:
            remaining = deadline - time.monotonic()
            if remaining <= 0 or not done.wait(remaining):
                raise DeadlineExceededError("context deadline exceeded")

        if "error" in outcome:
            raise outcome["error"]
        return outcome.get("value")

    def _wait_idle(self, timeout: float) -> bool:
        """Wait until no task or eager restart holds the process lock."""
        if not self._process_lock.acquire(timeout=timeout):
            return False
        self._process_lock.release()
        return True

    def req_queue_size(self) -> int:
        """Return the number of callers waiting for the process."""
        with self._state:
            return self._req_queue_size

    def restarts_count(self) -> int:
        """Return how many times the process was restarted."""
        with self._state:
            return self._restarts