"""Running external programs in their own process group so they can be killed whole."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
import time
from typing import IO, Iterable


class CommandError(RuntimeError):
    """Raised when a command cannot run or ends badly; ``exit_code`` tells how."""

    def __init__(self, message: str, exit_code: int | None = None) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def _exit_code(returncode: int) -> int:
    return returncode if returncode >= 0 else -1


def _describe(returncode: int) -> str:
    if returncode >= 0:
        return f"exit status {returncode}"
    try:
        name = signal.Signals(-returncode).name
    except ValueError:
        name = str(-returncode)
    return f"signal: {name}"


def _log_output(logger: logging.Logger, stream: IO[bytes]) -> None:
    try:
        with stream:
            for raw in iter(stream.readline, b""):
                line = raw.rstrip(b"\r\n")
                if line:
                    logger.debug(line.decode(errors="replace"))
    except (OSError, ValueError) as exc:
        if "closed" not in str(exc):
            logger.error(f"pipe unix process output error: {exc}")


class Cmd:
    """A command started in a new session, optionally bounded by a timeout in seconds."""

    def __init__(
        self,
        logger: logging.Logger,
        bin_path: str,
        args: Iterable[str] = (),
        timeout: float | None = None,
    ) -> None:
        self._logger = logger.getChild(bin_path.replace("/", ""))
        self._args = [bin_path, *args]
        self._deadline = None if timeout is None else time.monotonic() + timeout
        self._process: subprocess.Popen[bytes] | None = None
        self._readers: list[threading.Thread] = []

    @property
    def args(self) -> list[str]:
        return list(self._args)

    def start(self) -> None:
        """Start the command without waiting for it."""
        piped = self._logger.isEnabledFor(logging.DEBUG)
        stream = subprocess.PIPE if piped else subprocess.DEVNULL

        self._logger.debug(f"start unix process: {' '.join(self._args)}")
        try:
            self._process = subprocess.Popen(
                self._args,
                stdin=subprocess.DEVNULL,
                stdout=stream,
                stderr=stream,
                start_new_session=True,
            )
        except OSError as exc:
            raise CommandError(f"start unix process: {exc}") from exc

        if piped:
            for name, pipe in (("stdout", self._process.stdout), ("stderr", self._process.stderr)):
                reader = threading.Thread(
                    target=_log_output, args=(self._logger.getChild(name), pipe), daemon=True
                )
                reader.start()
                self._readers.append(reader)

    def _join_readers(self, timeout: float = 1.0) -> None:
        for reader in self._readers:
            reader.join(timeout)

    def wait(self) -> None:
        """Wait for the started command to end; raise if it did not exit with 0."""
        if self._process is None:
            raise CommandError("wait for unix process: process not started")
        returncode = self._process.wait()
        self._join_readers()
        if returncode != 0:
            raise CommandError(
                f"wait for unix process: {_describe(returncode)}", exit_code=_exit_code(returncode)
            )

    def _kill_logged(self) -> None:
        try:
            self.kill()
        except CommandError as exc:
            self._logger.error(str(exc))

    def exec(self) -> int:
        """Run the command to completion or until the timeout, then kill its process group.

        Return 0 on success; otherwise raise ``CommandError`` whose ``exit_code``
        is 10 without a timeout, 131 if the command could not start, 62 if the
        timeout expired, or the process exit code.
        """
        if self._deadline is None:
            raise CommandError("nil context", exit_code=10)

        try:
            self.start()
        except CommandError as exc:
            raise CommandError(f"start command: {exc}", exit_code=131) from exc

        assert self._process is not None
        remaining = max(self._deadline - time.monotonic(), 0.0)
        try:
            self._process.wait(timeout=remaining)
        except subprocess.TimeoutExpired:
            self._kill_logged()
            self._process.wait()
            self._join_readers()
            raise CommandError("context done: context deadline exceeded", exit_code=62) from None

        self._kill_logged()
        try:
            self.wait()
        except CommandError as exc:
            raise CommandError(f"unix process error: {exc}", exit_code=exc.exit_code) from exc
        return 0

    def kill(self) -> None:
        """Kill the process and all its children; a gone process is not an error."""
        if self._process is None:
            return
        try:
            os.killpg(self._process.pid, signal.SIGKILL)
        except ProcessLookupError:
            self._logger.debug("unix process already killed")
            return
        except OSError as exc:
            raise CommandError(f"kill unix process: {exc}") from exc
        self._logger.debug("unix process killed")


def command(logger: logging.Logger, bin_path: str, *args: str) -> Cmd:
    """Create a command without a timeout; it can be started but not ``exec``-ed."""
    return Cmd(logger, bin_path, args, None)


def command_context(timeout: float | None, logger: logging.Logger, bin_path: str, *args: str) -> Cmd:
    """Create a command bounded by ``timeout`` seconds."""
    if timeout is None:
        raise CommandError("nil context")
    return Cmd(logger, bin_path, args, timeout)