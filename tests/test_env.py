import pytest

from gotenberg.env import EnvError, int_env, string_env


def test_string_env_missing(monkeypatch):
    monkeypatch.delenv("NON_EXISTING", raising=False)
    with pytest.raises(EnvError, match="does not exist"):
        string_env("NON_EXISTING")


def test_string_env_empty(monkeypatch):
    monkeypatch.setenv("EMPTY_STRING", "")
    with pytest.raises(EnvError, match="is empty"):
        string_env("EMPTY_STRING")


def test_string_env_success(monkeypatch):
    monkeypatch.setenv("EXISTING_STRING_VALUE", "foo")
    assert string_env("EXISTING_STRING_VALUE") == "foo"


def test_int_env_empty(monkeypatch):
    monkeypatch.setenv("EMPTY_INT", "")
    with pytest.raises(EnvError):
        int_env("EMPTY_INT")


def test_int_env_non_integer(monkeypatch):
    monkeypatch.setenv("NON_INTEGER", "foo")
    with pytest.raises(EnvError):
        int_env("NON_INTEGER")


def test_int_env_success(monkeypatch):
    monkeypatch.setenv("EXISTING_INT_VALUE", "123")
    assert int_env("EXISTING_INT_VALUE") == 123


def test_int_env_signed(monkeypatch):
    monkeypatch.setenv("SIGNED_INT_VALUE", "-42")
    assert int_env("SIGNED_INT_VALUE") == -42


def test_int_env_rejects_spaces(monkeypatch):
    monkeypatch.setenv("SPACED_INT_VALUE", " 1")
    with pytest.raises(EnvError):
        int_env("SPACED_INT_VALUE")