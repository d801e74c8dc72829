# gotenberg

The core of a containerized document conversion service: a small module
system, typed command-line flags with environment overrides, a supervisor
for long-running processes, and helpers for the modules that plug into it.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## What this package does not include

The package holds the framework only. It registers no modules of its own:
there is no HTTP API, no PDF engine, no browser or office-suite process
behind the interfaces described below. `PdfEngine`, `PdfEngineProvider`,
`MetricsProvider` and `LoggerProvider` are interfaces to implement; running
the `gotenberg` command on its own starts no application and only waits for
a signal.

## Running the application

```
gotenberg
```

`gotenberg.cli.main(argv=None)` prints a banner (with `gotenberg.modules.VERSION`,
`"snapshot"` by default) and the IDs of the registered modules, parses the
flags, applies environment overrides, then provisions and starts every module
that is an `App`, each in its own thread. It prints the messages of every
`SystemLogger`, builds the debug data when `--gotenberg-build-debug-data` is
true, and waits for `SIGINT` or `SIGTERM`. It then stops every application
with the remaining part of the graceful shutdown duration as its timeout; a
second `SIGINT`, or an app raising `CancelGracefulShutdown` from `stop`, ends
the wait early. `main` returns 0, or 1 when flags are invalid, a module fails
to load or start, or an app fails to stop.

Built-in flags:

| Flag | Default | Meaning |
| --- | --- | --- |
| `--gotenberg-graceful-shutdown-duration` | `30s` | How long applications get to stop |
| `--gotenberg-build-debug-data` | `true` | Gather debug data once modules are loaded |

Every flag can also be set from the environment: upper-case the name and
replace dashes with underscores, e.g. `GOTENBERG_GRACEFUL_SHUTDOWN_DURATION=10s`.
A list flag set from the environment takes a comma-separated value, which
replaces its value instead of adding to it. `build_flag_set(descriptors)` and
`apply_env_overrides(flag_set, environ)` do these two steps on their own.

## Modules

A module describes itself with a `ModuleDescriptor`: a unique ID, an optional
`FlagSet`, and a `new` factory returning a fresh instance. The interfaces in
`gotenberg.modules` (`Module`, `Provisioner`, `Validator`, `App`,
`SystemLogger`, `Debuggable`) are checked structurally, so a class only needs
the right methods.

```python
from gotenberg.cli import main
from gotenberg.flags import FlagSet
from gotenberg.modules import ModuleDescriptor, must_register_module


class Greeter:
    def descriptor(self):
        fs = FlagSet("greeter")
        fs.add_string("greeter-name", "world", "Who to greet")
        return ModuleDescriptor(id="greeter", flag_set=fs, new=Greeter)

    def provision(self, ctx):
        self.name = ctx.parsed_flags().must_string("greeter-name")

    def start(self):
        pass

    def startup_message(self):
        return f"hello {self.name}"

    def stop(self, timeout):
        pass


must_register_module(Greeter())
raise SystemExit(main())
```

`must_register_module` raises `RegistrationError` for an empty ID, a missing
or `None`-returning factory, or an ID already registered.
`get_module_descriptors` returns the descriptors sorted by ID; a separate
`ModuleRegistry` can be used instead of the application-wide one.

A `Context` hands out modules by the class or protocol they satisfy:
`Context.modules(kind)` returns all of them and `Context.module(kind)` exactly
one. A module is provisioned (if a `Provisioner`) and validated (if a
`Validator`) the first time it is asked for, then cached;
`Context.module_instances()` returns the cache. Failures raise
`ModuleLoadError`.

## Flags

```python
from gotenberg.flags import FlagSet, ParsedFlags, parse_bytes

fs = FlagSet("example")
fs.add_string("api-root", "/", "Root path of the API")
fs.add_string("api-body-limit", "", "Maximum request body size")
fs.add_string("api-root-path", "/", "Deprecated alias")

flags = ParsedFlags(fs)
flags.parse(["--api-body-limit=1MB"])

flags.must_string("api-root")                      # "/"
flags.must_human_readable_bytes("api-body-limit")  # 1000000
flags.must_deprecated_string("api-root-path", "api-root")  # "/"
parse_bytes("1MiB")                                 # 1048576
```

`FlagSet` supports string, string list, bool, int, float and duration flags
(`add_string`, `add_string_slice`, `add_bool`, `add_int`, `add_float`,
`add_duration`) and parses `--name=value` and `--name value`. Durations use
the `1h2m3.5s` form (`parse_duration`, `format_duration`). The
`must_deprecated_*` accessors return the deprecated flag's value when it was
set explicitly, and its replacement's value otherwise. An unknown flag, a
wrong type, or an invalid size or regular expression raises `FlagError`.

## Sorting file names

```python
from gotenberg.alphanumeric import alphanumeric_sorted

alphanumeric_sorted(["sample1_10.pdf", "sample1_2.pdf", "sample1_1.pdf"])
# ["sample1_1.pdf", "sample1_2.pdf", "sample1_10.pdf"]
```

Names are ordered by a numeric prefix, else by the number just before the
extension, else by a trailing number; names without a number come last in
plain lexical order. `extract_number` and `alphanumeric_less` expose the
underlying rules.

## Supervising a process

```python
import logging

from gotenberg.supervisor import ProcessSupervisor

logger = logging.getLogger("example")


class Worker:
    def start(self, logger):
        pass

    def stop(self, logger):
        pass

    def healthy(self, logger):
        return True


supervisor = ProcessSupervisor(logger, Worker(), 100, 10)
result = supervisor.run(logger, lambda: 42, 30.0)  # 42
```

`run` starts the process on first use, restarts it before a task when it is
unhealthy and in the background once `max_req_limit` tasks have run, runs one
task at a time, and returns the task's result. It raises
`MaximumQueueSizeExceededError` when `max_queue_size` callers are already
waiting, `LockTimeoutError` when the process cannot be had within the
timeout, and `DeadlineExceededError` when a step outlasts it. A limit of 0
means no limit. `launch`, `shutdown`, `healthy`, `req_queue_size` and
`restarts_count` are available too.

## Other helpers

- `gotenberg.env`: `string_env` and `int_env` read required environment
  variables and raise `EnvError` when missing, empty or not an integer.
- `gotenberg.filter`: `filter_deadline(allowed, denied, s, deadline)` checks a
  value against allow and deny expressions (empty ones are ignored) before a
  `datetime` deadline, raising `FilteredError` or `DeadlineExceededError`.
- `gotenberg.fs`: `FileSystem` hands out unique directories inside a per-run
  working directory under the system temporary directory.
- `gotenberg.gc`: `garbage_collect(logger, root_path, include_substr, expiration_time)`
  removes top-level entries older than the expiration time whose name contains
  one of the substrings or whose path equals one of them.
- `gotenberg.command`: `command` and `command_context` build a `Cmd` that runs
  a program in its own process group, logs its output at debug level, and can
  kill it with all its children. `Cmd.exec` raises `CommandError` with an
  `exit_code` (62 on timeout, 131 when it cannot start, 10 without a timeout,
  otherwise the process's own).
- `gotenberg.debug`: `build_debug(ctx)` and `debug()` gather version,
  architecture, loaded modules, their debug data and flag values in a
  `DebugInfo`.
- `gotenberg.metrics`: `Metric` and the `MetricsProvider` interface.
- `gotenberg.pdfengine`: the `PdfEngine` and `PdfEngineProvider` interfaces,
  `SplitMode`, `PdfFormats`, the PDF/A format names and the engine errors.
- `gotenberg.leveled`: `LeveledLogger` wraps a `logging.Logger` and logs a
  message followed by its key/value arguments; `LoggerProvider` is the
  interface of modules that create loggers.
- `gotenberg.mocks`: configurable stand-ins for every module interface, for tests.