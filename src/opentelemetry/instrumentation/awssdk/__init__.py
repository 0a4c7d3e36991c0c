"""
OpenTelemetry AWS SDK (botocore) instrumentation.

Every api call gets a CLIENT span. Known request kinds (DynamoDB
operations, and the generic S3/SQS/Kinesis/DynamoDB requests) contribute
attributes read from the api parameters and the response, and the
resulting attributes go through the span decorators before they are set.

Usage
-----

.. code-block:: python

    import boto3
    from opentelemetry.instrumentation.awssdk import AwsSdkInstrumentor

    AwsSdkInstrumentor().instrument()

    boto3.client("dynamodb").get_item(
        TableName="users", Key={"id": {"S": "1"}}, ConsistentRead=True
    )

API
---
"""

import logging
from typing import Any, Collection

from wrapt import wrap_function_wrapper

from opentelemetry import trace as trace_api
from opentelemetry.instrumentation.awssdk.decorators import (
    DecorationRule,
    DecoratorFactory,
    apply_decorators,
    get_decorators,
)
from opentelemetry.instrumentation.awssdk.internal._extractors import (
    AttributeExtractor,
)
from opentelemetry.instrumentation.awssdk.internal._requests import (
    RequestKindSpec,
    SdkRequest,
)
from opentelemetry.instrumentation.awssdk.internal._wrapper import (
    ApiCallWrapper,
)
from opentelemetry.instrumentation.awssdk.package import _instruments
from opentelemetry.instrumentation.awssdk.version import __version__
from opentelemetry.instrumentation.instrumentor import BaseInstrumentor
from opentelemetry.instrumentation.utils import unwrap

logger = logging.getLogger(__name__)

_BOTOCORE_CLIENT_MODULE = "botocore.client"
_MAKE_API_CALL = "BaseClient._make_api_call"

__all__ = [
    "AttributeExtractor",
    "AwsSdkInstrumentor",
    "DecorationRule",
    "DecoratorFactory",
    "RequestKindSpec",
    "SdkRequest",
    "apply_decorators",
    "get_decorators",
]


class AwsSdkInstrumentor(BaseInstrumentor):
    """
    An instrumentor for botocore api calls
    """

    def instrumentation_dependencies(self) -> Collection[str]:
        return _instruments

    def _instrument(self, **kwargs: Any) -> None:
        if not (tracer_provider := kwargs.get("tracer_provider")):
            tracer_provider = trace_api.get_tracer_provider()
        tracer = trace_api.get_tracer(
            __name__, __version__, tracer_provider=tracer_provider
        )

        # build the decorators now rather than on the first call
        get_decorators()

        wrap_function_wrapper(
            module=_BOTOCORE_CLIENT_MODULE,
            name=_MAKE_API_CALL,
            wrapper=ApiCallWrapper(tracer),
        )

    def _uninstrument(self, **kwargs: Any) -> None:
        import botocore.client  # pylint: disable=import-outside-toplevel

        unwrap(botocore.client.BaseClient, "_make_api_call")
