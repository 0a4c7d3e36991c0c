"""
Wrapper for ``botocore.client.BaseClient._make_api_call``.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from opentelemetry import trace as trace_api
from opentelemetry.instrumentation.awssdk import config as awssdk_config
from opentelemetry.instrumentation.awssdk.decorators.factory import (
    get_decorators,
)
from opentelemetry.instrumentation.awssdk.decorators.rules import (
    apply_decorators,
)
from opentelemetry.instrumentation.awssdk.internal._extractors import (
    AttributeExtractor,
)
from opentelemetry.instrumentation.awssdk.internal._requests import (
    RequestKindSpec,
    SdkRequest,
)
from opentelemetry.instrumentation.awssdk.internal._util import safe_get
from opentelemetry.instrumentation.awssdk.semconv import (
    AwsSdkAttributes,
    DecoratorTags,
)
from opentelemetry.instrumentation.utils import is_instrumentation_enabled
from opentelemetry.semconv._incubating.attributes.aws_attributes import (
    AWS_REQUEST_ID,
)
from opentelemetry.semconv._incubating.attributes.rpc_attributes import (
    RPC_METHOD,
    RPC_SERVICE,
    RPC_SYSTEM,
)
from opentelemetry.semconv.attributes.error_attributes import ERROR_TYPE
from opentelemetry.trace import SpanKind, Status, StatusCode
from opentelemetry.util.types import AttributeValue

logger = logging.getLogger(__name__)

AWS_RPC_SYSTEM = "aws-api"


def _get_call_arguments(
    args: Tuple[Any, ...], kwargs: Mapping[str, Any]
) -> Tuple[Optional[str], Mapping[str, Any]]:
    operation_name = args[0] if args else kwargs.get("operation_name")
    api_params = args[1] if len(args) > 1 else kwargs.get("api_params")
    if not isinstance(api_params, Mapping):
        api_params = {}
    return operation_name, api_params


def _get_response_metadata(result: Any) -> Dict[str, AttributeValue]:
    attributes: Dict[str, AttributeValue] = {}
    request_id = safe_get(result, "ResponseMetadata", "RequestId")
    if request_id:
        attributes[AWS_REQUEST_ID] = str(request_id)
    status_code = safe_get(result, "ResponseMetadata", "HTTPStatusCode")
    if isinstance(status_code, int):
        attributes[DecoratorTags.HTTP_STATUS_CODE] = status_code
    return attributes


class ApiCallWrapper:
    """
    Traces a botocore api call: one CLIENT span per call carrying the
    attributes extracted from the api parameters and the response, passed
    through the configured decorators.
    """

    def __init__(
        self,
        tracer: trace_api.Tracer,
        extractor: Optional[AttributeExtractor] = None,
    ):
        self._tracer = tracer
        self._extractor = extractor or AttributeExtractor()

    def __call__(
        self,
        wrapped: Callable[..., Any],
        instance: Any,
        args: Tuple[Any, ...],
        kwargs: Mapping[str, Any],
    ) -> Any:
        if not is_instrumentation_enabled():
            return wrapped(*args, **kwargs)

        operation_name, api_params = _get_call_arguments(args, kwargs)
        service_name = safe_get(
            instance, "meta", "service_model", "service_name"
        )
        service_id = (
            safe_get(instance, "meta", "service_model", "service_id")
            or service_name
        )
        request = SdkRequest(
            str(service_name or ""), str(operation_name or ""), api_params
        )

        kind = self._extractor.classify(request)
        attributes = self._get_request_attributes(request, kind, service_id)
        with self._tracer.start_as_current_span(
            name=f"{service_id}.{operation_name}",
            kind=SpanKind.CLIENT,
            attributes=attributes,
        ) as span:
            try:
                result = wrapped(*args, **kwargs)
            except Exception as e:
                try:
                    if span.is_recording():
                        span.set_status(Status(StatusCode.ERROR, str(e)))
                        attributes[ERROR_TYPE] = type(e).__qualname__
                        attributes.update(
                            _get_response_metadata(
                                getattr(e, "response", None)
                            )
                        )
                        span.set_attributes(self._decorate(attributes))
                except Exception:
                    logger.debug(
                        "Failed to set span attributes for the error",
                        exc_info=True,
                    )
                raise

            try:
                if span.is_recording():
                    attributes.update(
                        self._get_response_attributes(request, kind, result)
                    )
                    span.set_attributes(self._decorate(attributes))
            except Exception:
                logger.debug(
                    "Failed to set span attributes from the response",
                    exc_info=True,
                )
            return result

    def _get_request_attributes(
        self,
        request: SdkRequest,
        kind: Optional[RequestKindSpec],
        service_id: Any,
    ) -> Dict[str, AttributeValue]:
        attributes: Dict[str, AttributeValue] = {
            RPC_SYSTEM: AWS_RPC_SYSTEM,
            RPC_METHOD: request.operation_name,
        }
        if service_id:
            attributes[RPC_SERVICE] = str(service_id)
        if kind is None:
            return attributes
        attributes[AwsSdkAttributes.AWS_REQUEST_KIND] = kind.name
        try:
            attributes.update(self._extractor.extract_request(request, kind))
        except Exception:
            logger.debug("Failed to extract request attributes", exc_info=True)
        return attributes

    def _get_response_attributes(
        self, request: SdkRequest, kind: Optional[RequestKindSpec], result: Any
    ) -> Dict[str, AttributeValue]:
        attributes = _get_response_metadata(result)
        if kind is not None and awssdk_config.is_capture_response_enabled():
            attributes.update(
                self._extractor.extract_response(request, result, kind)
            )
        return attributes

    @staticmethod
    def _decorate(
        attributes: Dict[str, AttributeValue],
    ) -> Dict[str, AttributeValue]:
        if not awssdk_config.is_decorators_enabled():
            return attributes
        return apply_decorators(get_decorators(), dict(attributes))
