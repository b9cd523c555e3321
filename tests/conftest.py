"""Shared pytest fixtures for jira-mcp-server tests."""

from unittest.mock import MagicMock

import pytest

from jira_mcp_server.config import Config

BASE_URL = "https://example.atlassian.net"


@pytest.fixture
def mock_config():
    """Create a Config instance for testing."""
    return Config(
        jira_url=BASE_URL,
        username="tester@example.com",
        api_token="token-123",
        default_project="PROJ",
    )


@pytest.fixture
def mock_client(mock_config):
    """A MagicMock standing in for JiraClient, with real config and base_url."""
    client = MagicMock()
    client.config = mock_config
    client.base_url = BASE_URL
    return client
