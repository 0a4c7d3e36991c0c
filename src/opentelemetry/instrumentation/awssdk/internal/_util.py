"""
Lookup helpers shared by the AWS SDK extractors.
"""

import logging
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "."


def safe_get(obj: Any, *keys: str) -> Optional[Any]:
    """
    Walk ``keys`` down from ``obj``.

    Mappings are looked up by key, any other object by attribute name.
    Returns None as soon as a segment is missing or an intermediate value
    is None.

    Examples:
        >>> safe_get({"ProvisionedThroughput": {"ReadCapacityUnits": 5}},
        ...          "ProvisionedThroughput", "ReadCapacityUnits")
        5
        >>> safe_get({"Limit": 10}, "Select") is None
        True
    """
    current = obj
    for key in keys:
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(key)
            continue
        try:
            current = getattr(current, key, None)
        except Exception as e:
            # properties may raise on access
            logger.debug("Failed to read attribute %s: %s", key, e)
            return None
    return current


def resolve_path(root: Any, path: str) -> Optional[Any]:
    """Resolve a dotted path such as ``ProvisionedThroughput.ReadCapacityUnits``."""
    if not path:
        return None
    return safe_get(root, *path.split(PATH_SEPARATOR))
