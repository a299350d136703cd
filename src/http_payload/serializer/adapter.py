"""Serializer: normalizer plus a format -> encoder registry.

``Serializer`` satisfies the ``NormalizationAdapter`` Protocol.  The encoder
registry is fixed at construction time; pass ``encoders=`` to serve a
different set of formats.  Errors raised by the encoders propagate unchanged
except for unsupported formats, which raise ``UnsupportedFormat`` before any
encoder is called; ``Payload`` wraps the rest into ``EncodeFailure`` /
``DecodeFailure``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from http_payload.exceptions import UnsupportedFormat
from http_payload.protocols import Encoder
from http_payload.serializer.encoders import default_encoders
from http_payload.serializer.normalizer import ObjectNormalizer

__all__ = ["DEFAULT_SERIALIZER", "Serializer"]

logger = logging.getLogger(__name__)


class Serializer:
    """Normalization and wire-format adapter.

    Args:
        normalizer: Field normalizer.  Defaults to ``ObjectNormalizer()``.
        encoders: Encoders to register, one per format.  Defaults to the four
            built-in encoders (json, xml, yaml, csv).
    """

    def __init__(
        self,
        normalizer: ObjectNormalizer | None = None,
        encoders: Iterable[Encoder] | None = None,
    ) -> None:
        self._normalizer = normalizer if normalizer is not None else ObjectNormalizer()
        registry = {
            str(encoder.format): encoder
            for encoder in (encoders if encoders is not None else default_encoders())
        }
        self._encoders: Mapping[str, Encoder] = MappingProxyType(registry)

    @property
    def formats(self) -> frozenset[str]:
        """Names of the registered formats."""
        return frozenset(self._encoders)

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------

    def supports_normalization(self, value: Any) -> bool:
        return self._normalizer.supports_normalization(value)

    def normalize(self, value: Any) -> dict[str, Any]:
        return self._normalizer.normalize(value)

    def to_plain(self, value: Any) -> Any:
        return self._normalizer.to_plain(value)

    # ------------------------------------------------------------------
    # Wire formats
    # ------------------------------------------------------------------

    def supports_format(self, fmt: str) -> bool:
        return isinstance(fmt, str) and fmt in self._encoders

    def encode(
        self, data: Any, fmt: str, context: Mapping[str, Any] | None = None
    ) -> str:
        """Deep-normalize ``data`` and encode it to ``fmt``."""
        encoder = self._encoder(fmt)
        logger.debug("Encoding %s to %s", type(data).__name__, fmt)
        return encoder.encode(self.to_plain(data), context or {})

    def decode(
        self, data: str | bytes, fmt: str, context: Mapping[str, Any] | None = None
    ) -> Any:
        """Decode ``fmt`` content into dicts, lists and scalars."""
        encoder = self._encoder(fmt)
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("utf-8")
        logger.debug("Decoding %d character(s) of %s", len(data), fmt)
        return encoder.decode(data, context or {})

    def _encoder(self, fmt: str) -> Encoder:
        if not self.supports_format(fmt):
            raise UnsupportedFormat(str(fmt))
        return self._encoders[fmt]


DEFAULT_SERIALIZER = Serializer()
