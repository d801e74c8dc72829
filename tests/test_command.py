import logging
import sys

import pytest

from gotenberg.command import CommandError, command, command_context


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(logging.DEBUG)
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


def _logger(name, level):
    logger = logging.getLogger(f"tests.command.{name}")
    logger.setLevel(level)
    handler = _ListHandler()
    logger.addHandler(handler)
    return logger, handler


def test_exec_success_returns_zero():
    logger, _ = _logger("ok", logging.WARNING)
    assert command_context(10, logger, sys.executable, "-c", "pass").exec() == 0


def test_exec_reports_exit_code():
    logger, _ = _logger("exit", logging.WARNING)
    cmd = command_context(10, logger, sys.executable, "-c", "import sys; sys.exit(3)")
    with pytest.raises(CommandError) as info:
        cmd.exec()
    assert info.value.exit_code == 3
    assert "unix process error" in str(info.value)


def test_exec_without_context():
    logger, _ = _logger("nil", logging.WARNING)
    with pytest.raises(CommandError) as info:
        command(logger, sys.executable, "-c", "pass").exec()
    assert info.value.exit_code == 10


def test_command_context_requires_timeout():
    logger, _ = _logger("nilctx", logging.WARNING)
    with pytest.raises(CommandError, match="nil context"):
        command_context(None, logger, sys.executable)


def test_exec_start_failure():
    logger, _ = _logger("missing", logging.WARNING)
    with pytest.raises(CommandError) as info:
        command_context(10, logger, "/nonexistent/binary-for-tests").exec()
    assert info.value.exit_code == 131


def test_exec_timeout_kills_process():
    logger, _ = _logger("timeout", logging.WARNING)
    cmd = command_context(0.2, logger, sys.executable, "-c", "import time; time.sleep(10)")
    with pytest.raises(CommandError) as info:
        cmd.exec()
    assert info.value.exit_code == 62
    assert "context done" in str(info.value)


def test_debug_output_is_logged():
    logger, handler = _logger("debug", logging.DEBUG)
    cmd = command_context(10, logger, sys.executable, "-c", "print('hello from child')")
    assert cmd.exec() == 0
    assert "hello from child" in handler.messages
    assert any(message.startswith("start unix process: ") for message in handler.messages)


def test_kill_started_process_makes_wait_fail():
    logger, _ = _logger("kill", logging.WARNING)
    cmd = command(logger, sys.executable, "-c", "import time; time.sleep(10)")
    cmd.start()
    cmd.kill()
    with pytest.raises(CommandError, match="wait for unix process"):
        cmd.wait()


def test_wait_before_start_raises():
    logger, _ = _logger("nostart", logging.WARNING)
    with pytest.raises(CommandError):
        command(logger, sys.executable).wait()