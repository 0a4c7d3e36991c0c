"""
Configuration for AWS SDK instrumentation.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

from opentelemetry.instrumentation.awssdk.semconv import (
    AwsSdkEnvironmentVariables,
)

logger = logging.getLogger(__name__)

DECORATORS_CONFIG_KEY = "decorators"


def get_bool_env(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes", "on"):
        return True
    elif value in ("false", "0", "no", "off"):
        return False
    return default


def is_decorators_enabled() -> bool:
    return get_bool_env(AwsSdkEnvironmentVariables.DECORATORS_ENABLED, True)


def is_capture_response_enabled() -> bool:
    return get_bool_env(AwsSdkEnvironmentVariables.CAPTURE_RESPONSE, True)


def load_decorators_config(
    path: Optional[str] = None,
) -> Optional[List[Dict[str, Any]]]:
    """
    Load decorator configuration entries from a JSON document.

    The document has the shape ``{"decorators": [{"type": ..., ...}]}``.
    When ``path`` is not given, it is read from
    ``OTEL_INSTRUMENTATION_AWSSDK_DECORATORS_CONFIG``.

    Returns None when there is no usable configuration, in which case the
    caller falls back to the built-in decorators.
    """
    if path is None:
        path = os.getenv(AwsSdkEnvironmentVariables.DECORATORS_CONFIG)
    if not path:
        return None

    try:
        with open(path, encoding="utf-8") as config_file:
            document = json.load(config_file)
    except (OSError, ValueError) as e:
        logger.warning(
            "Cannot load decorators configuration from %s: %s", path, e
        )
        return None

    if not isinstance(document, dict):
        logger.warning(
            "Decorators configuration %s is not a JSON object, ignoring it",
            path,
        )
        return None

    entries = document.get(DECORATORS_CONFIG_KEY)
    if not isinstance(entries, list):
        logger.warning(
            "Decorators configuration %s has no '%s' list, ignoring it",
            path,
            DECORATORS_CONFIG_KEY,
        )
        return None
    return entries
