"""XmlEncoder: element-tree XML with a fixed document element.

Mapping rules (both directions)::

    {"a": 1}                  <response><a>1</a></response>
    {"a": [1, 2]}             <response><a>1</a><a>2</a></response>
    {"a": None}               <response><a /></response>
    {"a": True}               <response><a>1</a></response>
    {"0": "x"} / {"a b": "x"} <response><item key="0">x</item></response>
    {"@id": 7, "#": "text"}   <response id="7">text</response>
    [1, 2] (list root)        <response><item key="0">1</item>...</response>

Decoding keeps every text as a string, folds repeated sibling elements into
a list, and returns the content of the document element (its name is not
part of the result).  An element without children or attributes decodes to
its text (``""`` when empty).
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import Any

from http_payload.config import (
    XML_ENCODING_KEY,
    XML_FORMAT_OUTPUT_KEY,
    XML_ROOT_NODE_NAME_KEY,
    Format,
)

__all__ = ["XmlEncoder"]

_ELEMENT_NAME = re.compile(r"[A-Za-z_][\w.\-]*")
_ITEM = "item"


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


class XmlEncoder:
    """``Encoder`` for the ``xml`` format."""

    format: str = Format.XML

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def encode(self, data: Any, context: Mapping[str, Any]) -> str:
        root = ET.Element(context.get(XML_ROOT_NODE_NAME_KEY, "response"))
        self._fill(root, data)
        if context.get(XML_FORMAT_OUTPUT_KEY, False):
            ET.indent(root)
        encoding = context.get(XML_ENCODING_KEY)
        declaration = (
            f'<?xml version="1.0" encoding="{encoding}"?>'
            if encoding
            else '<?xml version="1.0"?>'
        )
        return f"{declaration}\n{ET.tostring(root, encoding='unicode')}\n"

    def _fill(self, element: ET.Element, value: Any) -> None:
        if isinstance(value, Mapping):
            for key, child in value.items():
                self._append(element, str(key), child)
        elif isinstance(value, list):
            for index, child in enumerate(value):
                self._append(element, str(index), child)
        else:
            element.text = _text(value) or None

    def _append(self, parent: ET.Element, key: str, value: Any) -> None:
        if key.startswith("@") and len(key) > 1:
            parent.set(key[1:], _text(value))
            return
        if key == "#":
            parent.text = _text(value)
            return
        if isinstance(value, list) and _ELEMENT_NAME.fullmatch(key):
            for child in value:
                self._append(parent, key, child)
            return

        if _ELEMENT_NAME.fullmatch(key) and not key.lower().startswith("xml"):
            element = ET.SubElement(parent, key)
        else:
            element = ET.SubElement(parent, _ITEM, {"key": key})
        self._fill(element, value)

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def decode(self, data: str, context: Mapping[str, Any]) -> Any:
        return self._parse(ET.fromstring(data))

    def _parse(self, element: ET.Element) -> Any:
        attributes: dict[str, Any] = {f"@{k}": v for k, v in element.attrib.items()}
        children = list(element)
        text = element.text or ""
        if not children:
            if not attributes:
                return text
            if text.strip():
                attributes["#"] = text
            return attributes

        result: dict[str, Any] = attributes
        repeated: set[str] = set()
        for child in children:
            key = child.tag
            value = self._parse(child)
            if key == _ITEM and "key" in child.attrib:
                key = child.attrib["key"]
                if isinstance(value, dict):
                    value.pop("@key", None)
                    if not value:
                        value = child.text or ""
                    elif list(value) == ["#"]:
                        value = value["#"]
            if key not in result:
                result[key] = value
            elif key in repeated:
                result[key].append(value)
            else:
                result[key] = [result[key], value]
                repeated.add(key)
        return result
