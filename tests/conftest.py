"""
Shared fixtures for the advisory pipeline. No test talks to the real Gemini API.
"""

from unittest.mock import AsyncMock

import pytest

from agriwise.services.request_builder import RequestBuilder
from tests.helpers import FakeUpstream


@pytest.fixture
def builder() -> RequestBuilder:
    return RequestBuilder(text_model="text-model", speech_model="speech-model")


@pytest.fixture
def sleep() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()
