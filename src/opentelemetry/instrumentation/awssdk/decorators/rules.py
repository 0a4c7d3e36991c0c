"""
Decoration rules: tag/value predicates that rewrite or add span attributes.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from opentelemetry.util.types import AttributeValue

logger = logging.getLogger(__name__)

AttributeMap = Dict[str, AttributeValue]

# (rule, attributes, matched value) -> tags to write, or None to write nothing
ComputeFunc = Callable[
    ["DecorationRule", AttributeMap, Any],
    Optional[Mapping[str, AttributeValue]],
]

VALUE_PLACEHOLDER = "%s"


def values_equal(expected: Any, actual: Any) -> bool:
    """Compare on the string form so that a configured "404" matches 404."""
    if isinstance(expected, bool) or isinstance(actual, bool):
        return str(expected).lower() == str(actual).lower()
    return str(expected) == str(actual)


@dataclass(frozen=True)
class DecorationRule:
    """
    A single decorator.

    When ``matching_tag`` is present in the attributes (and equals
    ``matching_value`` if one is set), ``set_tag`` is written. A missing
    ``set_value`` copies the matched value; a ``set_value`` containing
    ``%s`` is formatted with it. ``compute`` replaces that default and may
    write several tags.
    """

    kind: str
    matching_tag: str
    matching_value: Optional[Any] = None
    set_tag: Optional[str] = None
    set_value: Optional[Any] = None
    compute: Optional[ComputeFunc] = None

    def matches(self, attributes: Mapping[str, Any]) -> bool:
        if self.matching_tag not in attributes:
            return False
        if self.matching_value is None:
            return True
        return values_equal(
            self.matching_value, attributes[self.matching_tag]
        )

    def target_value(self, value: Any) -> Any:
        if self.set_value is None:
            return value
        if (
            isinstance(self.set_value, str)
            and VALUE_PLACEHOLDER in self.set_value
        ):
            return self.set_value.replace(VALUE_PLACEHOLDER, str(value))
        return self.set_value

    def apply(self, attributes: AttributeMap) -> None:
        if not self.matches(attributes):
            return
        value = attributes[self.matching_tag]
        if self.compute is not None:
            updates = self.compute(self, attributes, value)
            if updates:
                attributes.update(updates)
            return
        if self.set_tag:
            attributes[self.set_tag] = self.target_value(value)


def apply_decorators(
    rules: Iterable[DecorationRule], attributes: AttributeMap
) -> AttributeMap:
    """Apply ``rules`` in order to ``attributes``, in place, and return it."""
    for rule in rules:
        try:
            rule.apply(attributes)
        except Exception as e:
            logger.debug("Decorator %s failed: %s", rule.kind, e)
    return attributes
