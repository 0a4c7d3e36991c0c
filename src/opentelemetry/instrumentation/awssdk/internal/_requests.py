"""
Known AWS SDK request kinds and the classifier that maps a request object
onto one of them.

Only DynamoDB operations carry operation specific mappings for now. Every
other operation of a known service falls back to the generic request of its
family, which still yields the family level attributes (bucket, queue,
stream, table).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from opentelemetry.instrumentation.awssdk.internal._fields import (
    Direction,
    FieldFormat,
    FieldSpec,
    group_by_direction,
    request,
    response,
)
from opentelemetry.instrumentation.awssdk.semconv import AwsSdkAttributes

logger = logging.getLogger(__name__)

GENERIC_REQUEST_ATTRIBUTE = "__aws_generic_request__"
REQUEST_TYPE_SUFFIX = "Request"


class RequestFamily(Enum):
    DYNAMODB = "DynamoDB"
    S3 = "S3"
    SQS = "SQS"
    KINESIS = "Kinesis"


# Fields every request of a family carries, whatever the operation
FAMILY_FIELDS: Dict[RequestFamily, Tuple[FieldSpec, ...]] = {
    RequestFamily.DYNAMODB: (
        request(AwsSdkAttributes.AWS_DYNAMODB_TABLE_NAME, "TableName"),
    ),
    RequestFamily.S3: (request(AwsSdkAttributes.AWS_S3_BUCKET, "Bucket"),),
    RequestFamily.SQS: (
        request(AwsSdkAttributes.AWS_QUEUE_URL, "QueueUrl"),
        request(AwsSdkAttributes.AWS_QUEUE_NAME, "QueueName"),
    ),
    RequestFamily.KINESIS: (
        request(AwsSdkAttributes.AWS_STREAM_NAME, "StreamName"),
    ),
}

# botocore service name -> type name of the generic request of that service
SERVICE_GENERIC_REQUESTS: Dict[str, str] = {
    "dynamodb": "DynamoDbRequest",
    "s3": "S3Request",
    "sqs": "SqsRequest",
    "kinesis": "KinesisRequest",
}


@dataclass(frozen=True)
class RequestKindSpec:
    name: str
    family: RequestFamily
    type_name: str
    fields: Tuple[FieldSpec, ...] = ()
    generic: bool = False


@dataclass(frozen=True)
class SdkRequest:
    """
    A botocore call as seen by the instrumentation: the service, the
    operation and the api parameters.

    botocore has no request classes, so the concrete type name is derived
    from the operation name (``GetItem`` -> ``GetItemRequest``) and the
    generic type name from the service.
    """

    service_name: str
    operation_name: str
    params: Mapping[str, Any] = field(default_factory=dict)

    @property
    def type_name(self) -> str:
        return f"{self.operation_name}{REQUEST_TYPE_SUFFIX}"

    @property
    def generic_type_name(self) -> Optional[str]:
        return SERVICE_GENERIC_REQUESTS.get((self.service_name or "").lower())


def _generic(family: RequestFamily, type_name: str) -> RequestKindSpec:
    return RequestKindSpec(type_name, family, type_name, generic=True)


def _operation(
    name: str, family: RequestFamily, *fields: FieldSpec
) -> RequestKindSpec:
    return RequestKindSpec(
        name, family, f"{name}{REQUEST_TYPE_SUFFIX}", tuple(fields)
    )


_DYNAMODB = RequestFamily.DYNAMODB
_attrs = AwsSdkAttributes

REQUEST_KINDS: Tuple[RequestKindSpec, ...] = (
    # generic requests
    _generic(RequestFamily.DYNAMODB, "DynamoDbRequest"),
    _generic(RequestFamily.S3, "S3Request"),
    _generic(RequestFamily.SQS, "SqsRequest"),
    _generic(RequestFamily.KINESIS, "KinesisRequest"),
    # specific requests
    _operation(
        "BatchGetItem",
        _DYNAMODB,
        request(
            _attrs.AWS_DYNAMODB_TABLE_NAMES, "RequestItems", FieldFormat.KEYS
        ),
        response(
            _attrs.AWS_DYNAMODB_CONSUMED_CAPACITY,
            "ConsumedCapacity",
            FieldFormat.JSON,
        ),
    ),
    _operation(
        "BatchWriteItem",
        _DYNAMODB,
        request(
            _attrs.AWS_DYNAMODB_TABLE_NAMES, "RequestItems", FieldFormat.KEYS
        ),
        response(
            _attrs.AWS_DYNAMODB_CONSUMED_CAPACITY,
            "ConsumedCapacity",
            FieldFormat.JSON,
        ),
        response(
            _attrs.AWS_DYNAMODB_ITEM_COLLECTION_METRICS,
            "ItemCollectionMetrics",
            FieldFormat.JSON,
        ),
    ),
    _operation(
        "CreateTable",
        _DYNAMODB,
        request(
            _attrs.AWS_DYNAMODB_GLOBAL_SECONDARY_INDEXES,
            "GlobalSecondaryIndexes",
            FieldFormat.JSON,
        ),
        request(
            _attrs.AWS_DYNAMODB_LOCAL_SECONDARY_INDEXES,
            "LocalSecondaryIndexes",
            FieldFormat.JSON,
        ),
        request(
            _attrs.AWS_DYNAMODB_PROVISIONED_READ_CAPACITY,
            "ProvisionedThroughput.ReadCapacityUnits",
        ),
        request(
            _attrs.AWS_DYNAMODB_PROVISIONED_WRITE_CAPACITY,
            "ProvisionedThroughput.WriteCapacityUnits",
        ),
    ),
    _operation(
        "DeleteItem",
        _DYNAMODB,
        response(
            _attrs.AWS_DYNAMODB_CONSUMED_CAPACITY,
            "ConsumedCapacity",
            FieldFormat.JSON,
        ),
        response(
            _attrs.AWS_DYNAMODB_ITEM_COLLECTION_METRICS,
            "ItemCollectionMetrics",
            FieldFormat.JSON,
        ),
    ),
    _operation(
        "GetItem",
        _DYNAMODB,
        request(
            _attrs.AWS_DYNAMODB_PROJECTION_EXPRESSION, "ProjectionExpression"
        ),
        response(
            _attrs.AWS_DYNAMODB_CONSUMED_CAPACITY,
            "ConsumedCapacity",
            FieldFormat.JSON,
        ),
        request(_attrs.AWS_DYNAMODB_CONSISTENT_READ, "ConsistentRead"),
    ),
    _operation(
        "ListTables",
        _DYNAMODB,
        request(
            _attrs.AWS_DYNAMODB_EXCLUSIVE_START_TABLE_NAME,
            "ExclusiveStartTableName",
        ),
        response(
            _attrs.AWS_DYNAMODB_TABLE_COUNT, "TableNames", FieldFormat.COUNT
        ),
        request(_attrs.AWS_DYNAMODB_LIMIT, "Limit"),
    ),
    _operation(
        "PutItem",
        _DYNAMODB,
        response(
            _attrs.AWS_DYNAMODB_CONSUMED_CAPACITY,
            "ConsumedCapacity",
            FieldFormat.JSON,
        ),
        response(
            _attrs.AWS_DYNAMODB_ITEM_COLLECTION_METRICS,
            "ItemCollectionMetrics",
            FieldFormat.JSON,
        ),
    ),
    _operation(
        "Query",
        _DYNAMODB,
        request(_attrs.AWS_DYNAMODB_ATTRIBUTES_TO_GET, "AttributesToGet"),
        request(_attrs.AWS_DYNAMODB_CONSISTENT_READ, "ConsistentRead"),
        request(_attrs.AWS_DYNAMODB_INDEX_NAME, "IndexName"),
        request(_attrs.AWS_DYNAMODB_LIMIT, "Limit"),
        request(
            _attrs.AWS_DYNAMODB_PROJECTION_EXPRESSION, "ProjectionExpression"
        ),
        request(_attrs.AWS_DYNAMODB_SCAN_INDEX_FORWARD, "ScanIndexForward"),
        request(_attrs.AWS_DYNAMODB_SELECT, "Select"),
        response(
            _attrs.AWS_DYNAMODB_CONSUMED_CAPACITY,
            "ConsumedCapacity",
            FieldFormat.JSON,
        ),
    ),
    _operation(
        "Scan",
        _DYNAMODB,
        request(_attrs.AWS_DYNAMODB_ATTRIBUTES_TO_GET, "AttributesToGet"),
        request(_attrs.AWS_DYNAMODB_CONSISTENT_READ, "ConsistentRead"),
        request(_attrs.AWS_DYNAMODB_INDEX_NAME, "IndexName"),
        request(_attrs.AWS_DYNAMODB_LIMIT, "Limit"),
        request(
            _attrs.AWS_DYNAMODB_PROJECTION_EXPRESSION, "ProjectionExpression"
        ),
        request(_attrs.AWS_DYNAMODB_SEGMENT, "Segment"),
        request(_attrs.AWS_DYNAMODB_SELECT, "Select"),
        request(_attrs.AWS_DYNAMODB_TOTAL_SEGMENTS, "TotalSegments"),
        response(
            _attrs.AWS_DYNAMODB_CONSUMED_CAPACITY,
            "ConsumedCapacity",
            FieldFormat.JSON,
        ),
        response(_attrs.AWS_DYNAMODB_COUNT, "Count"),
        response(_attrs.AWS_DYNAMODB_SCANNED_COUNT, "ScannedCount"),
    ),
    _operation(
        "UpdateItem",
        _DYNAMODB,
        response(
            _attrs.AWS_DYNAMODB_CONSUMED_CAPACITY,
            "ConsumedCapacity",
            FieldFormat.JSON,
        ),
        response(
            _attrs.AWS_DYNAMODB_ITEM_COLLECTION_METRICS,
            "ItemCollectionMetrics",
            FieldFormat.JSON,
        ),
    ),
    _operation(
        "UpdateTable",
        _DYNAMODB,
        request(
            _attrs.AWS_DYNAMODB_ATTRIBUTE_DEFINITIONS,
            "AttributeDefinitions",
            FieldFormat.JSON,
        ),
        request(
            _attrs.AWS_DYNAMODB_GLOBAL_SECONDARY_INDEX_UPDATES,
            "GlobalSecondaryIndexUpdates",
            FieldFormat.JSON,
        ),
        request(
            _attrs.AWS_DYNAMODB_PROVISIONED_READ_CAPACITY,
            "ProvisionedThroughput.ReadCapacityUnits",
        ),
        request(
            _attrs.AWS_DYNAMODB_PROVISIONED_WRITE_CAPACITY,
            "ProvisionedThroughput.WriteCapacityUnits",
        ),
    ),
)


def _check_kinds(kinds: Iterable[RequestKindSpec]) -> None:
    type_names = set()
    generic_families = set()
    for kind in kinds:
        if kind.type_name in type_names:
            raise ValueError(f"Duplicate request type name: {kind.type_name}")
        type_names.add(kind.type_name)
        if kind.generic:
            if kind.family in generic_families:
                raise ValueError(
                    f"More than one generic request for {kind.family.value}"
                )
            generic_families.add(kind.family)


class FieldMappingTable:
    """Field specs of every request kind, grouped by direction once."""

    def __init__(self, kinds: Iterable[RequestKindSpec]):
        self._kinds: Dict[str, RequestKindSpec] = {}
        self._fields: Dict[Tuple[str, Direction], Tuple[FieldSpec, ...]] = {}
        for kind in kinds:
            self._kinds[kind.name] = kind
            grouped = group_by_direction(
                FAMILY_FIELDS.get(kind.family, ()) + kind.fields
            )
            for direction, specs in grouped.items():
                self._fields[(kind.name, direction)] = specs

    def get(self, name: str) -> Optional[RequestKindSpec]:
        return self._kinds.get(name)

    def fields_for(
        self, kind: RequestKindSpec, direction: Direction
    ) -> Tuple[FieldSpec, ...]:
        return self._fields.get((kind.name, direction), ())


class RequestClassifier:
    """
    Maps a request object onto a RequestKindSpec.

    The concrete type name is tried first; when it is unknown the generic
    type name of the request is tried, so that operations without a
    specific mapping still get their family attributes.
    """

    def __init__(self, kinds: Iterable[RequestKindSpec]):
        kinds = tuple(kinds)
        _check_kinds(kinds)
        self._operations: Dict[str, RequestKindSpec] = {
            kind.type_name: kind for kind in kinds if not kind.generic
        }
        self._generics: Dict[str, RequestKindSpec] = {
            kind.type_name: kind for kind in kinds if kind.generic
        }

    def classify(self, request: Any) -> Optional[RequestKindSpec]:
        if request is None:
            return None
        # try request type
        result = self._of_type(_type_name(request))
        # try parent - generic
        if result is None:
            result = self._of_type(_generic_type_name(request))
        return result

    def _of_type(self, type_name: Optional[str]) -> Optional[RequestKindSpec]:
        if not type_name:
            return None
        return self._operations.get(type_name) or self._generics.get(
            type_name
        )


def _type_name(request: Any) -> str:
    if isinstance(request, SdkRequest):
        return request.type_name
    return type(request).__name__


def _generic_type_name(request: Any) -> Optional[str]:
    if isinstance(request, SdkRequest):
        return request.generic_type_name
    request_class = type(request)
    declared = getattr(request_class, GENERIC_REQUEST_ATTRIBUTE, None)
    if isinstance(declared, str):
        return declared
    mro = request_class.__mro__
    if len(mro) > 1:
        return mro[1].__name__
    return None


FIELD_MAPPING_TABLE = FieldMappingTable(REQUEST_KINDS)
REQUEST_CLASSIFIER = RequestClassifier(REQUEST_KINDS)
