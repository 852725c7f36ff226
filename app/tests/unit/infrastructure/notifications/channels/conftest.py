"""Fixtures for channel adapter tests."""

from unittest.mock import MagicMock

import pytest


@pytest.fixture
def http_response():
    """Build a mock ``requests.Response``."""

    def _build(status_code=200, json_body=None, text="", headers=None):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = json_body or {}
        response.text = text
        response.headers = headers or {}
        return response

    return _build


@pytest.fixture
def mock_session(http_response):
    """Mock ``requests.Session`` whose POST succeeds by default."""
    session = MagicMock()
    session.post.return_value = http_response(201, {"sid": "SM123", "status": "queued"})
    return session
