from types import SimpleNamespace

from opentelemetry.instrumentation.awssdk.internal._util import (
    resolve_path,
    safe_get,
)


class _Exploding:
    @property
    def broken(self):
        raise RuntimeError("boom")


def test_safe_get_mapping_and_attributes():
    obj = {"config": SimpleNamespace(url="http://localhost:8000")}
    assert safe_get(obj, "config", "url") == "http://localhost:8000"
    assert safe_get(obj, "config", "host") is None
    assert safe_get(obj, "missing", "url") is None
    assert safe_get(None, "anything") is None


def test_safe_get_property_raising_is_absent():
    assert safe_get(_Exploding(), "broken") is None


def test_resolve_path_nested():
    request = {
        "ProvisionedThroughput": {
            "ReadCapacityUnits": 5,
            "WriteCapacityUnits": 10,
        }
    }
    assert resolve_path(request, "ProvisionedThroughput.ReadCapacityUnits") == 5
    assert (
        resolve_path(request, "ProvisionedThroughput.WriteCapacityUnits") == 10
    )
    assert resolve_path(request, "ProvisionedThroughput.Missing") is None
    assert resolve_path(request, "") is None


def test_resolve_path_keeps_falsy_values_and_lists():
    request = {"ConsistentRead": False, "Limit": 0, "AttributesToGet": ["a"]}
    assert resolve_path(request, "ConsistentRead") is False
    assert resolve_path(request, "Limit") == 0
    assert resolve_path(request, "AttributesToGet") == ["a"]


def test_resolve_path_is_pure():
    request = SimpleNamespace(Select=SimpleNamespace(Value="ALL_ATTRIBUTES"))
    first = resolve_path(request, "Select.Value")
    second = resolve_path(request, "Select.Value")
    assert first == second == "ALL_ATTRIBUTES"


def test_resolve_path_on_non_container_segment():
    assert resolve_path({"Limit": 10}, "Limit.Value") is None
