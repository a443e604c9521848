from __future__ import annotations

import pytest

from arequester import RequestSpec
from tests.helpers import TEST_HOST, FakeTransport


@pytest.fixture
def transport() -> FakeTransport:
    """Create an in-memory transport answering 200 with an empty JSON
    object."""
    return FakeTransport()


@pytest.fixture
def spec() -> RequestSpec:
    """Create a GET request configuration for ``https://api.example.com/data``."""
    return RequestSpec(base_url=TEST_HOST, endpoint="data", protocol="https")
