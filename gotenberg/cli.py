"""The application command: gather module flags, start the apps, stop them on a signal."""

from __future__ import annotations

import os
import signal
import sys
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from datetime import timedelta
from typing import Any, Iterable, Mapping

from . import modules
from .context import Context, ModuleLoadError
from .debug import build_debug
from .flags import FlagError, FlagKind, FlagSet, ParsedFlags, format_duration
from .modules import App, CancelGracefulShutdown, ModuleDescriptor, SystemLogger, get_module_descriptors

_BANNER = (
    "\nGotenberg\n\n"
    "A containerized API for seamless PDF conversion.\n"
    "Version: {version}\n" + "-" * 55 + "\n"
)

_SHUTDOWN_FLAG = "gotenberg-graceful-shutdown-duration"
_DEBUG_FLAG = "gotenberg-build-debug-data"


def build_flag_set(descriptors: Iterable[ModuleDescriptor]) -> FlagSet:
    """Create the root flag set with the flags of every module added to it."""
    flag_set = FlagSet("gotenberg")
    flag_set.add_duration(_SHUTDOWN_FLAG, timedelta(seconds=30), "Set the graceful shutdown duration")
    flag_set.add_bool(_DEBUG_FLAG, True, "Set if build data is needed")
    for desc in descriptors:
        flag_set.add_flag_set(desc.flag_set)
    return flag_set


def apply_env_overrides(flag_set: FlagSet, environ: Mapping[str, str] | None = None) -> None:
    """Override flags from environment variables named like ``FLAG_NAME``.

    A string slice flag is replaced by the comma-separated items, not extended.
    """
    env = os.environ if environ is None else environ
    for flag in flag_set:
        env_name = flag.name.replace("-", "_").upper()
        value = env.get(env_name)
        if value is None:
            continue
        try:
            if flag.kind is FlagKind.STRING_SLICE:
                flag.replace(value.split(","))
            else:
                flag.set(value)
        except FlagError as exc:
            raise FlagError(f"invalid overriding value '{value}' from {env_name}: {exc}") from exc


def _start_app(app: Any, quit_event: threading.Event, failed: threading.Event) -> None:
    module_id = app.descriptor().id
    try:
        app.start()
    except Exception as exc:
        print(f"[FATAL] starting {module_id}: {exc}", flush=True)
        failed.set()
        quit_event.set()
        return

    message = app.startup_message()
    if not message:
        print(f"[SYSTEM] {module_id}: application started", flush=True)
    else:
        print(f"[SYSTEM] {module_id}: {message}", flush=True)


def _print_system_messages(logger: Any) -> None:
    module_id = logger.descriptor().id
    for message in logger.system_messages():
        print(f"[SYSTEM] {module_id}: {message}", flush=True)


def _stop_apps(apps: list, duration: timedelta, cancelled: threading.Event) -> Exception | None:
    deadline = time.monotonic() + duration.total_seconds()

    def stop(app: Any) -> None:
        module_id = app.descriptor().id
        try:
            app.stop(max(deadline - time.monotonic(), 0.0))
        except CancelGracefulShutdown:
            cancelled.set()
        except Exception as exc:
            raise RuntimeError(f"stopping {module_id}: {exc}") from exc
        print(f"[SYSTEM] {module_id}: application stopped", flush=True)

    if not apps:
        return None

    pool = ThreadPoolExecutor(max_workers=len(apps))
    futures = [pool.submit(stop, app) for app in apps]
    pending = set(futures)
    try:
        while pending and not cancelled.is_set():
            _, pending = wait(pending, timeout=0.1, return_when=FIRST_EXCEPTION)
    finally:
        pool.shutdown(wait=False)

    for future in futures:
        if future.done() and future.exception() is not None:
            return future.exception()
    return None


def main(argv: list[str] | None = None) -> int:
    """Run the application until SIGINT or SIGTERM; return the exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    print(_BANNER.format(version=modules.VERSION), end="", flush=True)

    descriptors = get_module_descriptors()
    flag_set = build_flag_set(descriptors)
    print(f"[SYSTEM] modules: {''.join(desc.id + ' ' for desc in descriptors)}", flush=True)

    try:
        flag_set.parse(args)
    except FlagError as exc:
        print(exc, flush=True)
        return 1

    try:
        apply_env_overrides(flag_set, os.environ)
    except FlagError as exc:
        print(f"[FATAL] {exc}", flush=True)
        return 1

    parsed = ParsedFlags(flag_set)
    duration = parsed.must_duration(_SHUTDOWN_FLAG)
    ctx = Context(parsed, descriptors)

    try:
        apps = ctx.modules(App)
    except ModuleLoadError as exc:
        print(f"[FATAL] {exc}", flush=True)
        return 1

    quit_event = threading.Event()
    failed = threading.Event()
    cancelled = threading.Event()

    watched = (signal.SIGINT, signal.SIGTERM)
    previous = {sig: signal.getsignal(sig) for sig in watched}

    def on_quit(signum: int, frame: Any) -> None:
        quit_event.set()

    for sig in watched:
        signal.signal(sig, on_quit)

    try:
        for app in apps:
            threading.Thread(target=_start_app, args=(app, quit_event, failed), daemon=True).start()

        try:
            system_loggers = ctx.modules(SystemLogger)
        except ModuleLoadError as exc:
            print(f"[FATAL] {exc}", flush=True)
            return 1

        for logger in system_loggers:
            threading.Thread(target=_print_system_messages, args=(logger,), daemon=True).start()

        if parsed.must_bool(_DEBUG_FLAG):
            build_debug(ctx)

        while not quit_event.wait(0.1):
            pass

        if failed.is_set():
            return 1

        signal.signal(signal.SIGINT, lambda signum, frame: cancelled.set())
        print(f"[SYSTEM] graceful shutdown of {format_duration(duration)}", flush=True)

        error = _stop_apps(apps, duration, cancelled)
        if error is not None:
            print(f"[FATAL] {error}", flush=True)
            return 1
        return 0
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)