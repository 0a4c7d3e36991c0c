"""
Create decorators from configuration.
"""

import logging
import threading
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from opentelemetry.instrumentation.awssdk.config import load_decorators_config
from opentelemetry.instrumentation.awssdk.decorators.builtin import (
    DECORATOR_KINDS,
    DecoratorKind,
)
from opentelemetry.instrumentation.awssdk.decorators.rules import (
    DecorationRule,
)
from opentelemetry.instrumentation.awssdk.semconv import DecoratorTags

logger = logging.getLogger(__name__)

CONFIG_TYPE = "type"
CONFIG_MATCHING_TAG = "matching_tag"
CONFIG_MATCHING_VALUE = "matching_value"
CONFIG_SET_TAG = "set_tag"
CONFIG_SET_VALUE = "set_value"

_decorators: Optional[Tuple[DecorationRule, ...]] = None
_decorators_lock = threading.Lock()


class DecoratorFactory:
    """
    Builds decoration rules from configuration entries.

    Each entry names a decorator kind under ``type`` and may override
    ``matching_tag``, ``matching_value``, ``set_tag`` and ``set_value``.
    Entries that cannot be turned into a rule are logged and skipped.
    """

    def __init__(self, kinds: Optional[Mapping[str, DecoratorKind]] = None):
        self._kinds = DECORATOR_KINDS if kinds is None else kinds

    def create(
        self, decorators_config: Iterable[Mapping[str, Any]]
    ) -> List[DecorationRule]:
        decorators: List[DecorationRule] = []
        for decorator_config in decorators_config:
            decorator = self._create_one(decorator_config)
            if decorator is not None:
                decorators.append(decorator)
        return decorators

    def _create_one(
        self, decorator_config: Mapping[str, Any]
    ) -> Optional[DecorationRule]:
        if not isinstance(decorator_config, Mapping):
            logger.warning(
                "Cannot create decorator from configuration %r",
                decorator_config,
            )
            return None

        kind_name = decorator_config.get(CONFIG_TYPE)
        if not kind_name:
            logger.warning(
                "Cannot create decorator without type from configuration %s",
                decorator_config,
            )
            return None

        kind = self._kinds.get(kind_name)
        if kind is None:
            logger.warning(
                "Cannot create decorator as the type %s is not defined. "
                "Provided configuration %s",
                kind_name,
                decorator_config,
            )
            return None

        try:
            return kind.create(
                matching_tag=decorator_config.get(CONFIG_MATCHING_TAG),
                matching_value=decorator_config.get(CONFIG_MATCHING_VALUE),
                set_tag=decorator_config.get(CONFIG_SET_TAG),
                set_value=decorator_config.get(CONFIG_SET_VALUE),
            )
        except Exception as e:
            logger.warning(
                "Cannot create decorator %s: %s. Provided configuration %s",
                kind_name,
                e,
                decorator_config,
            )
            return None

    def create_builtin_decorators(self) -> List[DecorationRule]:
        kinds = self._kinds
        return [
            kinds["HTTPComponent"].create(
                matching_tag=DecoratorTags.COMPONENT, matching_value="okhttp"
            ),
            kinds["HTTPComponent"].create(
                matching_tag=DecoratorTags.COMPONENT,
                matching_value="java-aws-sdk",
            ),
            kinds["ErrorFlag"].create(),
            kinds["DBTypeDecorator"].create(),
            kinds["DBStatementAsResourceName"].create(),
            kinds["OperationDecorator"].create(),
            kinds["Status404Decorator"].create(),
            kinds["URLAsResourceName"].create(),
        ]

    def create_from_config(
        self, path: Optional[str] = None
    ) -> List[DecorationRule]:
        """Decorators from the configuration file, built-in ones without it."""
        decorators_config = load_decorators_config(path)
        if decorators_config is None:
            return self.create_builtin_decorators()
        return self.create(decorators_config)


def get_decorators() -> Tuple[DecorationRule, ...]:
    """
    Process wide decorators, created from configuration on first use.
    """
    global _decorators
    if _decorators is not None:
        return _decorators
    with _decorators_lock:
        if _decorators is None:
            _decorators = tuple(DecoratorFactory().create_from_config())
    return _decorators


def _reset_decorators() -> None:
    global _decorators
    with _decorators_lock:
        _decorators = None
