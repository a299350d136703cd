"""Serializer subpackage: the default ``NormalizationAdapter``.

``DEFAULT_SERIALIZER`` is built once at import time and never mutated; a
``Payload`` uses it unless another adapter is injected.

Example::

    from http_payload.serializer import DEFAULT_SERIALIZER

    DEFAULT_SERIALIZER.encode({"a": [1, None]}, "json", {})   # '{"a":[1,null]}'
    DEFAULT_SERIALIZER.decode("a: 1", "yaml", {})              # {"a": 1}
"""

from http_payload.serializer.adapter import DEFAULT_SERIALIZER, Serializer
from http_payload.serializer.normalizer import ObjectNormalizer

__all__ = ["DEFAULT_SERIALIZER", "ObjectNormalizer", "Serializer"]
