"""Wire-format encoders for the default serializer.

All encoders satisfy the ``Encoder`` Protocol structurally.  ``json``, ``xml``
and ``csv`` rely on the standard library; ``yaml`` uses PyYAML.
"""

from http_payload.serializer.encoders.csv import CsvEncoder
from http_payload.serializer.encoders.json import JsonEncoder
from http_payload.serializer.encoders.xml import XmlEncoder
from http_payload.serializer.encoders.yaml import YamlEncoder

__all__ = ["CsvEncoder", "JsonEncoder", "XmlEncoder", "YamlEncoder", "default_encoders"]


def default_encoders() -> list[JsonEncoder | XmlEncoder | YamlEncoder | CsvEncoder]:
    """Fresh instances of the four built-in encoders."""
    return [JsonEncoder(), XmlEncoder(), YamlEncoder(), CsvEncoder()]
