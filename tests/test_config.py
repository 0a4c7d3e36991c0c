import json
import os
from unittest.mock import patch

import pytest

from opentelemetry.instrumentation.awssdk import config
from opentelemetry.instrumentation.awssdk.semconv import (
    AwsSdkEnvironmentVariables,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("true", True),
        ("TRUE", True),
        ("1", True),
        ("yes", True),
        ("on", True),
        ("false", False),
        ("0", False),
        ("off", False),
        ("maybe", None),
        ("", None),
    ],
)
def test_get_bool_env(value, expected):
    with patch.dict(os.environ, {"AWSSDK_TEST_FLAG": value}):
        assert config.get_bool_env("AWSSDK_TEST_FLAG", True) is (
            True if expected is None else expected
        )
        assert config.get_bool_env("AWSSDK_TEST_FLAG", False) is (
            False if expected is None else expected
        )


@patch.dict(os.environ, {}, clear=True)
def test_defaults():
    assert config.is_decorators_enabled() is True
    assert config.is_capture_response_enabled() is True
    assert config.load_decorators_config() is None


def test_switches_read_environment():
    with patch.dict(
        os.environ,
        {
            AwsSdkEnvironmentVariables.DECORATORS_ENABLED: "false",
            AwsSdkEnvironmentVariables.CAPTURE_RESPONSE: "0",
        },
    ):
        assert config.is_decorators_enabled() is False
        assert config.is_capture_response_enabled() is False


def _write(tmp_path, content):
    path = tmp_path / "decorators.json"
    path.write_text(content, encoding="utf-8")
    return str(path)


def test_load_decorators_config(tmp_path):
    entries = [{"type": "ErrorFlag"}, {"type": "Status404Decorator"}]
    path = _write(tmp_path, json.dumps({"decorators": entries}))

    assert config.load_decorators_config(path) == entries


def test_load_decorators_config_from_environment(tmp_path):
    path = _write(tmp_path, json.dumps({"decorators": []}))
    with patch.dict(
        os.environ, {AwsSdkEnvironmentVariables.DECORATORS_CONFIG: path}
    ):
        assert config.load_decorators_config() == []


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        "[]",
        json.dumps({"rules": []}),
        json.dumps({"decorators": {"type": "ErrorFlag"}}),
    ],
)
def test_load_unusable_decorators_config(tmp_path, caplog, content):
    path = _write(tmp_path, content)

    with caplog.at_level("WARNING", logger=config.__name__):
        assert config.load_decorators_config(path) is None

    assert path in caplog.text


def test_load_missing_decorators_config(tmp_path, caplog):
    path = str(tmp_path / "missing.json")

    with caplog.at_level("WARNING", logger=config.__name__):
        assert config.load_decorators_config(path) is None

    assert "Cannot load decorators configuration" in caplog.text
