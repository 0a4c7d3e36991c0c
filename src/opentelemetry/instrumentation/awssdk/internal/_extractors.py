"""
Attribute extraction for AWS SDK requests and responses.
"""

import logging
from typing import Any, Dict, Optional

from opentelemetry.instrumentation.awssdk.internal._fields import Direction
from opentelemetry.instrumentation.awssdk.internal._requests import (
    FIELD_MAPPING_TABLE,
    REQUEST_CLASSIFIER,
    FieldMappingTable,
    RequestClassifier,
    RequestKindSpec,
    SdkRequest,
)
from opentelemetry.util.types import AttributeValue

logger = logging.getLogger(__name__)


def _payload(request: Any) -> Any:
    # botocore requests are looked up in their api parameters
    if isinstance(request, SdkRequest):
        return request.params
    return request


class AttributeExtractor:
    """Request/response attribute extractor."""

    def __init__(
        self,
        classifier: RequestClassifier = REQUEST_CLASSIFIER,
        table: FieldMappingTable = FIELD_MAPPING_TABLE,
    ):
        self._classifier = classifier
        self._table = table

    def classify(self, request: Any) -> Optional[RequestKindSpec]:
        try:
            return self._classifier.classify(request)
        except Exception as e:
            logger.debug("Failed to classify request: %s", e)
            return None

    def extract(
        self, request: Any, response: Any = None
    ) -> Dict[str, AttributeValue]:
        """
        Extract request attributes and, when a response is given, response
        attributes.

        Returns an empty dict when the request kind is unknown.
        """
        kind = self.classify(request)
        if kind is None:
            return {}
        attributes = self._extract_fields(
            kind, Direction.REQUEST, _payload(request)
        )
        if response is not None:
            attributes.update(
                self._extract_fields(kind, Direction.RESPONSE, response)
            )
        return attributes

    def extract_request(
        self, request: Any, kind: Optional[RequestKindSpec] = None
    ) -> Dict[str, AttributeValue]:
        """Extract the request direction attributes only."""
        if kind is None:
            kind = self.classify(request)
        if kind is None:
            return {}
        return self._extract_fields(kind, Direction.REQUEST, _payload(request))

    def extract_response(
        self,
        request: Any,
        response: Any,
        kind: Optional[RequestKindSpec] = None,
    ) -> Dict[str, AttributeValue]:
        """
        Extract the response direction attributes only.

        ``kind`` skips classification when the caller already classified
        ``request``.
        """
        if response is None:
            return {}
        if kind is None:
            kind = self.classify(request)
        if kind is None:
            return {}
        return self._extract_fields(kind, Direction.RESPONSE, response)

    def _extract_fields(
        self, kind: RequestKindSpec, direction: Direction, root: Any
    ) -> Dict[str, AttributeValue]:
        attributes: Dict[str, AttributeValue] = {}
        for field in self._table.fields_for(kind, direction):
            try:
                value = field.resolve(root)
            except Exception as e:
                logger.debug(
                    "Failed to extract %s from %s: %s",
                    field.attribute,
                    field.path,
                    e,
                )
                continue
            if value is not None:
                attributes[field.attribute] = value
        return attributes
