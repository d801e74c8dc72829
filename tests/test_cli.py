import os
import signal
import threading
from datetime import timedelta

import pytest

from gotenberg.cli import apply_env_overrides, build_flag_set, main
from gotenberg.flags import FlagError, FlagSet, ParsedFlags
from gotenberg.modules import ModuleDescriptor


def test_build_flag_set_defaults():
    parsed = ParsedFlags(build_flag_set([]))
    assert parsed.must_duration("gotenberg-graceful-shutdown-duration") == timedelta(seconds=30)
    assert parsed.must_bool("gotenberg-build-debug-data") is True


def test_build_flag_set_adds_module_flags():
    module_flags = FlagSet("foo")
    module_flags.add_string("foo-property", "default value", "")
    flag_set = build_flag_set([ModuleDescriptor(id="foo", flag_set=module_flags), ModuleDescriptor(id="bar")])
    assert ParsedFlags(flag_set).must_string("foo-property") == "default value"


def test_env_override_sets_value_without_marking_changed():
    flag_set = build_flag_set([])
    apply_env_overrides(flag_set, {"GOTENBERG_GRACEFUL_SHUTDOWN_DURATION": "10s"})
    parsed = ParsedFlags(flag_set)
    assert parsed.must_duration("gotenberg-graceful-shutdown-duration") == timedelta(seconds=10)
    assert parsed.changed("gotenberg-graceful-shutdown-duration") is False


def test_env_override_replaces_slices():
    flag_set = FlagSet("tests")
    flag_set.add_string_slice("foo-list", ["x"], "")
    apply_env_overrides(flag_set, {"FOO_LIST": "a,b"})
    assert ParsedFlags(flag_set).must_string_slice("foo-list") == ["a", "b"]


def test_env_override_ignores_unset_variables():
    flag_set = build_flag_set([])
    apply_env_overrides(flag_set, {"UNRELATED": "1"})
    assert ParsedFlags(flag_set).must_bool("gotenberg-build-debug-data") is True


def test_env_override_invalid_value():
    flag_set = build_flag_set([])
    with pytest.raises(FlagError, match="invalid overriding value 'nope' from GOTENBERG_BUILD_DEBUG_DATA"):
        apply_env_overrides(flag_set, {"GOTENBERG_BUILD_DEBUG_DATA": "nope"})


def test_main_unknown_flag(capsys):
    assert main(["--definitely-unknown-flag=1"]) == 1
    out = capsys.readouterr().out
    assert "[SYSTEM] modules:" in out


def test_main_invalid_env_override(monkeypatch, capsys):
    monkeypatch.setenv("GOTENBERG_GRACEFUL_SHUTDOWN_DURATION", "bad")
    assert main([]) == 1
    assert "[FATAL] invalid overriding value 'bad'" in capsys.readouterr().out


def test_main_graceful_shutdown_on_sigterm(monkeypatch, capsys):
    monkeypatch.delenv("GOTENBERG_GRACEFUL_SHUTDOWN_DURATION", raising=False)
    monkeypatch.delenv("GOTENBERG_BUILD_DEBUG_DATA", raising=False)
    timer = threading.Timer(0.5, os.kill, args=(os.getpid(), signal.SIGTERM))
    timer.start()
    try:
        code = main(["--gotenberg-graceful-shutdown-duration=1s", "--gotenberg-build-debug-data=false"])
    finally:
        timer.cancel()
    assert code == 0
    assert "[SYSTEM] graceful shutdown of 1s" in capsys.readouterr().out