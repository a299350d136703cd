"""YamlEncoder: YAML through PyYAML's safe dumper and loader.

Only the safe subset is used in both directions, so decoding never builds
arbitrary Python objects.  Key order is preserved on output.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import yaml

from http_payload.config import YAML_FLOW_STYLE_KEY, YAML_INDENT_KEY, Format

__all__ = ["YamlEncoder"]


class YamlEncoder:
    """``Encoder`` for the ``yaml`` format."""

    format: str = Format.YAML

    def encode(self, data: Any, context: Mapping[str, Any]) -> str:
        return yaml.safe_dump(
            data,
            indent=context.get(YAML_INDENT_KEY, 2),
            default_flow_style=context.get(YAML_FLOW_STYLE_KEY, False),
            sort_keys=False,
            allow_unicode=True,
        )

    def decode(self, data: str, context: Mapping[str, Any]) -> Any:
        return yaml.safe_load(data)
