"""Shared fixtures for the http-payload test-suite."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from http_payload import Payload

from tests.records import make_data


@pytest.fixture
def data() -> dict[str, Any]:
    return make_data()


@pytest.fixture
def array_payload(data: dict[str, Any]) -> Payload:
    """Payload over a dict root, addressed with ``[key]`` segments."""
    return Payload.create(data)


@pytest.fixture
def object_payload() -> Payload:
    """Payload over a record root, addressed with ``name`` segments."""
    return Payload.create(SimpleNamespace(**make_data()))
