"""Shared pytest fixtures."""

from unittest.mock import AsyncMock, Mock

import pytest

from florentine_mcp.logging import configure_logging
from florentine_mcp.models import AskResponse, FlorentineConfig, ListCollectionsResponse


@pytest.fixture(autouse=True)
def reset_logging():
    """Leave the package logger disabled after every test."""
    yield
    configure_logging(debug=False)


@pytest.fixture
def make_config():
    """Build a static config with a token, overriding any field by wire name."""

    def _make(**overrides) -> FlorentineConfig:
        data = {"mode": "dynamic", "florentineToken": "token-123", **overrides}
        return FlorentineConfig.model_validate(data)

    return _make


@pytest.fixture
def sample_collections_data():
    """Sample /collections response body."""
    return {
        "summaries": [
            {
                "dbName": "shop",
                "instanceType": "atlas",
                "collections": [
                    {
                        "collectionName": "users",
                        "summary": "Registered users",
                        "mappings": [{"keyPath": "orders", "collectionName": "orders"}],
                        "structure": [
                            {"keyPath": "name", "typeOfValues": "string"},
                            {
                                "keyPath": "address",
                                "typeOfValues": "object",
                                "children": [{"keyPath": "address.city", "typeOfValues": "string"}],
                            },
                        ],
                    }
                ],
            }
        ]
    }


@pytest.fixture
def mock_client(sample_collections_data):
    """Create a mock Florentine client answering every question with "42"."""
    client = Mock()
    client.ask = AsyncMock(return_value=AskResponse(answer="42"))
    client.aclose = AsyncMock()
    client.list_collections = AsyncMock(
        return_value=ListCollectionsResponse.model_validate(sample_collections_data)
    )
    return client
