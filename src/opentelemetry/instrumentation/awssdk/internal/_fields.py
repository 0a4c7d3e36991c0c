"""
Field mappings: which value of a request or response becomes which span
attribute, and how it is converted.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from opentelemetry.instrumentation.awssdk.internal._util import resolve_path
from opentelemetry.util.types import AttributeValue

logger = logging.getLogger(__name__)

_PRIMITIVE_TYPES = (bool, str, int, float)


class Direction(Enum):
    REQUEST = "request"
    RESPONSE = "response"


class FieldFormat(Enum):
    """
    How a resolved value is turned into an attribute value.

    - VALUE: primitives as-is, sequences of primitives as a list (of strings
      when the item types are mixed), anything else as compact JSON
    - COUNT: length of a collection
    - KEYS: keys of a mapping
    - JSON: compact JSON, whatever the value is
    """

    VALUE = "value"
    COUNT = "count"
    KEYS = "keys"
    JSON = "json"


def _to_json(value: Any) -> Optional[str]:
    try:
        return json.dumps(value, separators=(",", ":"), default=str)
    except (TypeError, ValueError) as e:
        logger.debug("Failed to serialize field value to JSON: %s", e)
        return None


def _to_value(value: Any) -> Optional[AttributeValue]:
    if isinstance(value, _PRIMITIVE_TYPES):
        return value
    if isinstance(value, (list, tuple)):
        if all(isinstance(item, _PRIMITIVE_TYPES) for item in value):
            # attribute sequences must be homogeneous
            if len({type(item) for item in value}) <= 1:
                return list(value)
            return [str(item) for item in value]
        return _to_json(value)
    return _to_json(value)


def _to_count(value: Any) -> Optional[AttributeValue]:
    if isinstance(value, (str, bytes)):
        return None
    try:
        return len(value)
    except TypeError:
        return None


def _to_keys(value: Any) -> Optional[AttributeValue]:
    if not isinstance(value, Mapping):
        return None
    return [str(key) for key in value.keys()]


_CONVERTERS = {
    FieldFormat.VALUE: _to_value,
    FieldFormat.COUNT: _to_count,
    FieldFormat.KEYS: _to_keys,
    FieldFormat.JSON: _to_json,
}


@dataclass(frozen=True)
class FieldSpec:
    attribute: str
    path: str
    direction: Direction
    format: FieldFormat = FieldFormat.VALUE

    def resolve(self, root: Any) -> Optional[AttributeValue]:
        """Resolve against ``root``; None means the attribute is absent."""
        value = resolve_path(root, self.path)
        if value is None:
            return None
        return _CONVERTERS[self.format](value)


def request(
    attribute: str, path: str, fmt: FieldFormat = FieldFormat.VALUE
) -> FieldSpec:
    return FieldSpec(attribute, path, Direction.REQUEST, fmt)


def response(
    attribute: str, path: str, fmt: FieldFormat = FieldFormat.VALUE
) -> FieldSpec:
    return FieldSpec(attribute, path, Direction.RESPONSE, fmt)


def group_by_direction(
    fields: Iterable[FieldSpec],
) -> Dict[Direction, Tuple[FieldSpec, ...]]:
    grouped: Dict[Direction, list] = {direction: [] for direction in Direction}
    for field in fields:
        grouped[field.direction].append(field)
    return {direction: tuple(items) for direction, items in grouped.items()}
