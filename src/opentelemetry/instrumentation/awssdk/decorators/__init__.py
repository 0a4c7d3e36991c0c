from opentelemetry.instrumentation.awssdk.decorators.builtin import (
    DECORATOR_KINDS,
    DecoratorKind,
    InvalidDecoratorError,
)
from opentelemetry.instrumentation.awssdk.decorators.factory import (
    DecoratorFactory,
    get_decorators,
)
from opentelemetry.instrumentation.awssdk.decorators.rules import (
    AttributeMap,
    DecorationRule,
    apply_decorators,
)

__all__ = [
    "DECORATOR_KINDS",
    "AttributeMap",
    "DecorationRule",
    "DecoratorFactory",
    "DecoratorKind",
    "InvalidDecoratorError",
    "apply_decorators",
    "get_decorators",
]
