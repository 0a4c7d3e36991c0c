"""
AWS SDK semantic conventions used by the request field mappings and the
span decorators.
"""


class AwsSdkAttributes:
    """Attribute names extracted from AWS SDK requests and responses"""

    # family level
    AWS_S3_BUCKET = "aws.s3.bucket"
    AWS_QUEUE_URL = "aws.queue.url"
    AWS_QUEUE_NAME = "aws.queue.name"
    AWS_STREAM_NAME = "aws.stream.name"
    AWS_DYNAMODB_TABLE_NAME = "aws.dynamodb.table_name"

    # DynamoDB operations
    AWS_DYNAMODB_ATTRIBUTE_DEFINITIONS = "aws.dynamodb.attribute_definitions"
    AWS_DYNAMODB_ATTRIBUTES_TO_GET = "aws.dynamodb.attributes_to_get"
    AWS_DYNAMODB_CONSISTENT_READ = "aws.dynamodb.consistent_read"
    AWS_DYNAMODB_CONSUMED_CAPACITY = "aws.dynamodb.consumed_capacity"
    AWS_DYNAMODB_COUNT = "aws.dynamodb.count"
    AWS_DYNAMODB_EXCLUSIVE_START_TABLE_NAME = (
        "aws.dynamodb.exclusive_start_table_name"
    )
    AWS_DYNAMODB_GLOBAL_SECONDARY_INDEXES = (
        "aws.dynamodb.global_secondary_indexes"
    )
    AWS_DYNAMODB_GLOBAL_SECONDARY_INDEX_UPDATES = (
        "aws.dynamodb.global_secondary_index_updates"
    )
    AWS_DYNAMODB_INDEX_NAME = "aws.dynamodb.index_name"
    AWS_DYNAMODB_ITEM_COLLECTION_METRICS = (
        "aws.dynamodb.item_collection_metrics"
    )
    AWS_DYNAMODB_LIMIT = "aws.dynamodb.limit"
    AWS_DYNAMODB_LOCAL_SECONDARY_INDEXES = (
        "aws.dynamodb.local_secondary_indexes"
    )
    AWS_DYNAMODB_PROJECTION_EXPRESSION = "aws.dynamodb.projection_expression"
    AWS_DYNAMODB_PROVISIONED_READ_CAPACITY = (
        "aws.dynamodb.provisioned_throughput.read_capacity_units"
    )
    AWS_DYNAMODB_PROVISIONED_WRITE_CAPACITY = (
        "aws.dynamodb.provisioned_throughput.write_capacity_units"
    )
    AWS_DYNAMODB_SCAN_INDEX_FORWARD = "aws.dynamodb.scan_index_forward"
    AWS_DYNAMODB_SCANNED_COUNT = "aws.dynamodb.scanned_count"
    AWS_DYNAMODB_SEGMENT = "aws.dynamodb.segment"
    AWS_DYNAMODB_SELECT = "aws.dynamodb.select"
    AWS_DYNAMODB_TABLE_COUNT = "aws.dynamodb.table_count"
    AWS_DYNAMODB_TABLE_NAMES = "aws.dynamodb.table_names"
    AWS_DYNAMODB_TOTAL_SEGMENTS = "aws.dynamodb.total_segments"

    AWS_REQUEST_KIND = "aws.request.kind"


class DecoratorTags:
    """Tag names read and written by the span decorators"""

    COMPONENT = "component"
    ERROR = "error"
    DB_TYPE = "db.type"
    DB_STATEMENT = "db.statement"
    HTTP_STATUS_CODE = "http.status_code"
    HTTP_URL = "http.url"
    HTTP_METHOD = "http.method"
    PEER_SERVICE = "peer.service"
    SERVICE = "service"
    SERVICE_NAME = "service.name"
    RESOURCE_NAME = "resource.name"
    SPAN_TYPE = "span.type"
    OPERATION_NAME = "operation.name"


class SpanTypes:
    HTTP_CLIENT = "http"
    SQL = "sql"
    MONGO = "mongodb"
    CASSANDRA = "cassandra"
    MEMCACHED = "memcached"


class AwsSdkEnvironmentVariables:
    DECORATORS_CONFIG = "OTEL_INSTRUMENTATION_AWSSDK_DECORATORS_CONFIG"
    DECORATORS_ENABLED = "OTEL_INSTRUMENTATION_AWSSDK_DECORATORS_ENABLED"
    CAPTURE_RESPONSE = "OTEL_INSTRUMENTATION_AWSSDK_CAPTURE_RESPONSE"
