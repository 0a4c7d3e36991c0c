# -*- coding: utf-8 -*-
"""
Tests for AWS SDK attribute extraction.
"""

import json
import unittest
from types import SimpleNamespace
from unittest.mock import Mock

from opentelemetry.instrumentation.awssdk.internal._extractors import (
    AttributeExtractor,
)
from opentelemetry.instrumentation.awssdk.internal._requests import SdkRequest
from opentelemetry.instrumentation.awssdk.semconv import AwsSdkAttributes


class GetItemRequest:
    def __init__(self, **params):
        self.__dict__.update(params)


class TestAttributeExtractor(unittest.TestCase):
    """Tests AttributeExtractor"""

    def setUp(self):
        self.extractor = AttributeExtractor()

    def test_get_item_consistent_read(self):
        request = SdkRequest("dynamodb", "GetItem", {"ConsistentRead": True})

        attributes = self.extractor.extract(request)

        self.assertEqual(
            attributes, {AwsSdkAttributes.AWS_DYNAMODB_CONSISTENT_READ: True}
        )
        self.assertNotIn(
            AwsSdkAttributes.AWS_DYNAMODB_CONSUMED_CAPACITY, attributes
        )

    def test_get_item_with_response(self):
        request = SdkRequest(
            "dynamodb",
            "GetItem",
            {
                "TableName": "users",
                "Key": {"id": {"S": "1"}},
                "ConsistentRead": False,
                "ProjectionExpression": "id, email",
            },
        )
        response = {
            "Item": {"id": {"S": "1"}},
            "ConsumedCapacity": {"TableName": "users", "CapacityUnits": 0.5},
        }

        attributes = self.extractor.extract(request, response)

        self.assertEqual(
            attributes[AwsSdkAttributes.AWS_DYNAMODB_TABLE_NAME], "users"
        )
        self.assertIs(
            attributes[AwsSdkAttributes.AWS_DYNAMODB_CONSISTENT_READ], False
        )
        self.assertEqual(
            attributes[AwsSdkAttributes.AWS_DYNAMODB_PROJECTION_EXPRESSION],
            "id, email",
        )
        self.assertEqual(
            json.loads(
                attributes[AwsSdkAttributes.AWS_DYNAMODB_CONSUMED_CAPACITY]
            ),
            {"TableName": "users", "CapacityUnits": 0.5},
        )

    def test_list_tables_counts_table_names(self):
        request = SdkRequest(
            "dynamodb",
            "ListTables",
            {"Limit": 10, "ExclusiveStartTableName": "orders"},
        )
        response = {"TableNames": ["users", "orders", "items"]}

        attributes = self.extractor.extract(request, response)

        self.assertEqual(
            attributes,
            {
                AwsSdkAttributes.AWS_DYNAMODB_LIMIT: 10,
                AwsSdkAttributes.AWS_DYNAMODB_EXCLUSIVE_START_TABLE_NAME: "orders",
                AwsSdkAttributes.AWS_DYNAMODB_TABLE_COUNT: 3,
            },
        )

    def test_batch_get_item_table_names(self):
        request = SdkRequest(
            "dynamodb",
            "BatchGetItem",
            {"RequestItems": {"users": {"Keys": []}, "orders": {"Keys": []}}},
        )

        attributes = self.extractor.extract(request)

        self.assertEqual(
            attributes[AwsSdkAttributes.AWS_DYNAMODB_TABLE_NAMES],
            ["users", "orders"],
        )

    def test_create_table_nested_paths(self):
        request = SdkRequest(
            "dynamodb",
            "CreateTable",
            {
                "TableName": "users",
                "ProvisionedThroughput": {
                    "ReadCapacityUnits": 5,
                    "WriteCapacityUnits": 10,
                },
            },
        )

        attributes = self.extractor.extract(request)

        self.assertEqual(
            attributes,
            {
                AwsSdkAttributes.AWS_DYNAMODB_TABLE_NAME: "users",
                AwsSdkAttributes.AWS_DYNAMODB_PROVISIONED_READ_CAPACITY: 5,
                AwsSdkAttributes.AWS_DYNAMODB_PROVISIONED_WRITE_CAPACITY: 10,
            },
        )

    def test_scan_request_and_response(self):
        request = SdkRequest(
            "dynamodb",
            "Scan",
            {
                "TableName": "users",
                "AttributesToGet": ["id", "email"],
                "Segment": 1,
                "TotalSegments": 4,
                "Select": "SPECIFIC_ATTRIBUTES",
            },
        )
        response = {"Count": 7, "ScannedCount": 42}

        attributes = self.extractor.extract(request, response)

        self.assertEqual(
            attributes[AwsSdkAttributes.AWS_DYNAMODB_ATTRIBUTES_TO_GET],
            ["id", "email"],
        )
        self.assertEqual(attributes[AwsSdkAttributes.AWS_DYNAMODB_SEGMENT], 1)
        self.assertEqual(
            attributes[AwsSdkAttributes.AWS_DYNAMODB_TOTAL_SEGMENTS], 4
        )
        self.assertEqual(attributes[AwsSdkAttributes.AWS_DYNAMODB_COUNT], 7)
        self.assertEqual(
            attributes[AwsSdkAttributes.AWS_DYNAMODB_SCANNED_COUNT], 42
        )
        self.assertNotIn(
            AwsSdkAttributes.AWS_DYNAMODB_CONSUMED_CAPACITY, attributes
        )

    def test_family_fallback_keeps_family_attributes(self):
        """Table-driven family attributes for operations without mappings."""
        for service, operation, params, expected in (
            (
                "dynamodb",
                "DescribeTable",
                {"TableName": "users"},
                {AwsSdkAttributes.AWS_DYNAMODB_TABLE_NAME: "users"},
            ),
            (
                "s3",
                "PutObject",
                {"Bucket": "logs", "Key": "a.txt"},
                {AwsSdkAttributes.AWS_S3_BUCKET: "logs"},
            ),
            (
                "sqs",
                "SendMessage",
                {"QueueUrl": "https://sqs/1/q", "MessageBody": "hi"},
                {AwsSdkAttributes.AWS_QUEUE_URL: "https://sqs/1/q"},
            ),
            (
                "sqs",
                "GetQueueUrl",
                {"QueueName": "q"},
                {AwsSdkAttributes.AWS_QUEUE_NAME: "q"},
            ),
            (
                "kinesis",
                "PutRecord",
                {"StreamName": "events", "Data": b"x"},
                {AwsSdkAttributes.AWS_STREAM_NAME: "events"},
            ),
        ):
            with self.subTest(service=service, operation=operation):
                attributes = self.extractor.extract(
                    SdkRequest(service, operation, params), {"ok": True}
                )
                self.assertEqual(attributes, expected)

    def test_unknown_request_yields_no_attributes(self):
        self.assertEqual(
            self.extractor.extract(SdkRequest("lambda", "Invoke", {}), {}),
            {},
        )
        self.assertEqual(self.extractor.extract(object(), {"Count": 1}), {})

    def test_plain_request_objects(self):
        request = GetItemRequest(TableName="users", ConsistentRead=True)
        response = SimpleNamespace(
            ConsumedCapacity={"TableName": "users", "CapacityUnits": 1}
        )

        attributes = self.extractor.extract(request, response)

        self.assertEqual(
            attributes[AwsSdkAttributes.AWS_DYNAMODB_TABLE_NAME], "users"
        )
        self.assertTrue(
            attributes[AwsSdkAttributes.AWS_DYNAMODB_CONSISTENT_READ]
        )
        self.assertIn(
            AwsSdkAttributes.AWS_DYNAMODB_CONSUMED_CAPACITY, attributes
        )

    def test_extract_response_only(self):
        request = SdkRequest(
            "dynamodb", "Query", {"TableName": "users", "Limit": 5}
        )
        response = {"ConsumedCapacity": {"CapacityUnits": 2}}

        self.assertEqual(
            self.extractor.extract_response(request, response),
            {
                AwsSdkAttributes.AWS_DYNAMODB_CONSUMED_CAPACITY: '{"CapacityUnits":2}'
            },
        )
        self.assertEqual(self.extractor.extract_response(request, None), {})
        self.assertEqual(
            self.extractor.extract_request(request),
            {
                AwsSdkAttributes.AWS_DYNAMODB_TABLE_NAME: "users",
                AwsSdkAttributes.AWS_DYNAMODB_LIMIT: 5,
            },
        )

    def test_classifier_failure_degrades_to_empty(self):
        classifier = Mock()
        classifier.classify.side_effect = RuntimeError("boom")
        extractor = AttributeExtractor(classifier=classifier)

        self.assertEqual(
            extractor.extract(SdkRequest("dynamodb", "GetItem", {})), {}
        )

    def test_known_kind_skips_classification(self):
        classifier = Mock()
        extractor = AttributeExtractor(classifier=classifier)
        kind = self.extractor.classify(SdkRequest("dynamodb", "Scan"))
        request = SdkRequest("dynamodb", "Scan", {"Segment": 2})

        self.assertEqual(
            extractor.extract_request(request, kind),
            {AwsSdkAttributes.AWS_DYNAMODB_SEGMENT: 2},
        )
        self.assertEqual(
            extractor.extract_response(request, {"Count": 4}, kind),
            {AwsSdkAttributes.AWS_DYNAMODB_COUNT: 4},
        )
        classifier.classify.assert_not_called()

    def test_extraction_is_repeatable(self):
        request = SdkRequest(
            "dynamodb", "Query", {"TableName": "users", "IndexName": "by_email"}
        )
        self.assertEqual(
            self.extractor.extract(request), self.extractor.extract(request)
        )


if __name__ == "__main__":
    unittest.main()
