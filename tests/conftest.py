"""Pytest fixtures shared by the store, service and API tests."""

import pytest

from catalog_lookup.notion_client import NotionStore

from .helpers import RecordingTransport


@pytest.fixture
def make_store():
    def factory(**transport_kwargs):
        transport = RecordingTransport(**transport_kwargs)
        store = NotionStore("secret-token", "db123", transport=transport)
        return store, transport

    return factory
