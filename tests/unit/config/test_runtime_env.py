import signal

import pytest

from graceful_shutdown.config import ConfigurationError, env_bool, env_float, env_parsed, env_seconds, env_str
from graceful_shutdown.signals import parse_signal


def test_env_str_returns_fallback_for_blank(monkeypatch):
    monkeypatch.setenv("GRACEFUL_SHUTDOWN_TEST", "   ")

    assert env_str("GRACEFUL_SHUTDOWN_TEST", or_value="fallback") == "fallback"


def test_env_str_required_raises(monkeypatch):
    monkeypatch.delenv("GRACEFUL_SHUTDOWN_TEST", raising=False)

    with pytest.raises(ConfigurationError, match="not set"):
        env_str("GRACEFUL_SHUTDOWN_TEST", required=True)


@pytest.mark.parametrize("raw,expected", [("yes", True), ("0", False), ("ON", True), ("off", False)])
def test_env_bool_parses_words(monkeypatch, raw, expected):
    monkeypatch.setenv("GRACEFUL_SHUTDOWN_TEST", raw)

    assert env_bool("GRACEFUL_SHUTDOWN_TEST") is expected


def test_env_bool_rejects_garbage(monkeypatch):
    monkeypatch.setenv("GRACEFUL_SHUTDOWN_TEST", "maybe")

    with pytest.raises(ConfigurationError, match="boolean"):
        env_bool("GRACEFUL_SHUTDOWN_TEST")


def test_env_float_rejects_non_numbers(monkeypatch):
    monkeypatch.setenv("GRACEFUL_SHUTDOWN_TEST", "soon")

    with pytest.raises(ConfigurationError, match="float"):
        env_float("GRACEFUL_SHUTDOWN_TEST")


def test_env_seconds_accepts_fractions_and_rejects_negative(monkeypatch):
    monkeypatch.setenv("GRACEFUL_SHUTDOWN_TEST", "2.5")
    assert env_seconds("GRACEFUL_SHUTDOWN_TEST") == 2.5

    monkeypatch.setenv("GRACEFUL_SHUTDOWN_TEST", "-1")
    with pytest.raises(ConfigurationError, match="non-negative"):
        env_seconds("GRACEFUL_SHUTDOWN_TEST")


def test_env_parsed_uses_cast_and_wraps_errors(monkeypatch):
    monkeypatch.setenv("GRACEFUL_SHUTDOWN_TEST", "hup")
    assert env_parsed("GRACEFUL_SHUTDOWN_TEST", cast=parse_signal) is signal.SIGHUP

    monkeypatch.setenv("GRACEFUL_SHUTDOWN_TEST", "nope")
    with pytest.raises(ConfigurationError, match="GRACEFUL_SHUTDOWN_TEST"):
        env_parsed("GRACEFUL_SHUTDOWN_TEST", cast=parse_signal)


def test_env_parsed_returns_fallback_when_unset():
    assert env_parsed("GRACEFUL_SHUTDOWN_TEST", or_value=signal.SIGTERM, cast=parse_signal) is signal.SIGTERM


def test_invalid_value_factory():
    assert str(ConfigurationError.invalid_value("level", "LOUD", "Try DEBUG")) == "Invalid value for level: 'LOUD'. Try DEBUG"
