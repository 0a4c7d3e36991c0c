"""
Decorator kinds known by name.

Configuration refers to decorators by kind name; each kind carries the
default matching tag and target tag, which configuration may override.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit

from opentelemetry.instrumentation.awssdk.decorators.rules import (
    AttributeMap,
    ComputeFunc,
    DecorationRule,
    values_equal,
)
from opentelemetry.instrumentation.awssdk.semconv import (
    DecoratorTags,
    SpanTypes,
)
from opentelemetry.util.types import AttributeValue

_MONGO_COMPONENT = "java-mongo"

# component name -> operation name; db components are named by DBTypeDecorator
COMPONENT_OPERATION_NAMES: Dict[str, str] = {
    "apache-httpclient": "apache.http",
    "java-aws-sdk": "aws.http",
    "java-jms": "jms",
    "okhttp": "okhttp.http",
}

DB_SPAN_TYPES: Dict[str, str] = {
    "mongo": SpanTypes.MONGO,
    "cassandra": SpanTypes.CASSANDRA,
    "memcached": SpanTypes.MEMCACHED,
}

PATH_MIXED_ALPHANUMERICS = re.compile(
    r"(?<=/)(?![vV]\d{1,2}/)(?:[^/\d?]*\d+[^/?]*)"
)


class InvalidDecoratorError(ValueError):
    """Raised when a decorator cannot be built from its configuration."""


@dataclass(frozen=True)
class DecoratorKind:
    name: str
    matching_tag: Optional[str] = None
    matching_value: Optional[Any] = None
    set_tag: Optional[str] = None
    set_value: Optional[Any] = None
    compute: Optional[ComputeFunc] = None

    def create(
        self,
        matching_tag: Optional[str] = None,
        matching_value: Optional[Any] = None,
        set_tag: Optional[str] = None,
        set_value: Optional[Any] = None,
    ) -> DecorationRule:
        """Build a rule; configuration values override the kind defaults."""
        matching_tag = matching_tag or self.matching_tag
        if not matching_tag:
            raise InvalidDecoratorError(
                f"Decorator {self.name} has no matching tag"
            )
        set_tag = set_tag or self.set_tag
        if not set_tag:
            raise InvalidDecoratorError(
                f"Decorator {self.name} has no tag to set"
            )
        return DecorationRule(
            kind=self.name,
            matching_tag=matching_tag,
            matching_value=_first(matching_value, self.matching_value),
            set_tag=set_tag,
            set_value=_first(set_value, self.set_value),
            compute=self.compute,
        )


def _first(value: Any, default: Any) -> Any:
    return default if value is None else value


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def normalize_path(path: str) -> str:
    """
    Replace path segments that contain digits with ``?``.

    >>> normalize_path("/users/123/orders/a1b2")
    '/users/?/orders/?'
    >>> normalize_path("/api/v1/items")
    '/api/v1/items'
    """
    if not path or path == "/":
        return "/"
    return PATH_MIXED_ALPHANUMERICS.sub("?", path)


def _url_path(url: str) -> str:
    parts = urlsplit(url)
    if parts.scheme or parts.netloc:
        return parts.path
    # not an absolute url, keep everything before the query string
    return url.split("?", 1)[0].split("#", 1)[0]


def _error_flag(
    rule: DecorationRule, attributes: AttributeMap, value: Any
) -> Mapping[str, AttributeValue]:
    return {rule.set_tag or DecoratorTags.ERROR: parse_bool(value)}


def _db_type(
    rule: DecorationRule, attributes: AttributeMap, value: Any
) -> Mapping[str, AttributeValue]:
    db_type = str(value)
    return {
        rule.set_tag or DecoratorTags.SERVICE_NAME: rule.target_value(db_type),
        DecoratorTags.SPAN_TYPE: DB_SPAN_TYPES.get(db_type, SpanTypes.SQL),
        DecoratorTags.OPERATION_NAME: f"{db_type}.query",
    }


def _db_statement(
    rule: DecorationRule, attributes: AttributeMap, value: Any
) -> Optional[Mapping[str, AttributeValue]]:
    # mongo statements are handled by the mongo integration
    if attributes.get(DecoratorTags.COMPONENT) == _MONGO_COMPONENT:
        return None
    return {rule.set_tag: rule.target_value(value)}


def _operation_name(
    rule: DecorationRule, attributes: AttributeMap, value: Any
) -> Optional[Mapping[str, AttributeValue]]:
    operation_name = COMPONENT_OPERATION_NAMES.get(str(value))
    if operation_name is None:
        return None
    return {rule.set_tag: operation_name}


def _status_5xx(
    rule: DecorationRule, attributes: AttributeMap, value: Any
) -> Optional[Mapping[str, AttributeValue]]:
    try:
        status = int(value)
    except (TypeError, ValueError):
        return None
    if 500 <= status < 600:
        return {rule.set_tag: True}
    return None


def _url_as_resource_name(
    rule: DecorationRule, attributes: AttributeMap, value: Any
) -> Optional[Mapping[str, AttributeValue]]:
    if not isinstance(value, str) or not value:
        return None
    # 404 responses keep the resource name set by Status404Decorator
    status = attributes.get(DecoratorTags.HTTP_STATUS_CODE)
    if status is not None and values_equal(404, status):
        return None
    resource_name = normalize_path(_url_path(value))
    method = attributes.get(DecoratorTags.HTTP_METHOD)
    if method:
        resource_name = f"{str(method).upper()} {resource_name}"
    return {rule.set_tag: resource_name}


_KINDS = (
    DecoratorKind(
        "HTTPComponent",
        matching_tag=DecoratorTags.COMPONENT,
        set_tag=DecoratorTags.SPAN_TYPE,
        set_value=SpanTypes.HTTP_CLIENT,
    ),
    DecoratorKind(
        "ErrorFlag",
        matching_tag=DecoratorTags.ERROR,
        set_tag=DecoratorTags.ERROR,
        compute=_error_flag,
    ),
    DecoratorKind(
        "DBTypeDecorator",
        matching_tag=DecoratorTags.DB_TYPE,
        set_tag=DecoratorTags.SERVICE_NAME,
        compute=_db_type,
    ),
    DecoratorKind(
        "DBStatementAsResourceName",
        matching_tag=DecoratorTags.DB_STATEMENT,
        set_tag=DecoratorTags.RESOURCE_NAME,
        compute=_db_statement,
    ),
    DecoratorKind(
        "OperationDecorator",
        matching_tag=DecoratorTags.COMPONENT,
        set_tag=DecoratorTags.OPERATION_NAME,
        compute=_operation_name,
    ),
    DecoratorKind(
        "Status404Decorator",
        matching_tag=DecoratorTags.HTTP_STATUS_CODE,
        matching_value="404",
        set_tag=DecoratorTags.RESOURCE_NAME,
        set_value="404",
    ),
    DecoratorKind(
        "Status5XXDecorator",
        matching_tag=DecoratorTags.HTTP_STATUS_CODE,
        set_tag=DecoratorTags.ERROR,
        compute=_status_5xx,
    ),
    DecoratorKind(
        "URLAsResourceName",
        matching_tag=DecoratorTags.HTTP_URL,
        set_tag=DecoratorTags.RESOURCE_NAME,
        compute=_url_as_resource_name,
    ),
    DecoratorKind(
        "ServiceNameDecorator",
        matching_tag=DecoratorTags.SERVICE,
        set_tag=DecoratorTags.SERVICE_NAME,
    ),
    DecoratorKind(
        "PeerServiceDecorator",
        matching_tag=DecoratorTags.PEER_SERVICE,
        set_tag=DecoratorTags.SERVICE_NAME,
    ),
    DecoratorKind(
        "ResourceNameDecorator",
        matching_tag=DecoratorTags.RESOURCE_NAME,
        set_tag=DecoratorTags.RESOURCE_NAME,
    ),
    DecoratorKind(
        "SpanTypeDecorator",
        matching_tag=DecoratorTags.SPAN_TYPE,
        set_tag=DecoratorTags.SPAN_TYPE,
    ),
    # matching and target tags come from configuration
    DecoratorKind("TagDecorator"),
)

DECORATOR_KINDS: Dict[str, DecoratorKind] = {
    kind.name: kind for kind in _KINDS
}
