"""Shared fixtures for the Study Buddy tests."""

from unittest.mock import MagicMock

import pytest

from studybuddy.persistence import PersistenceManager


class InMemoryAttributesManager:
    """
    A fake AttributesManager backed by a dict.

    Mimics the persistent attribute part of the ASK SDK's
    AttributesManager. `store` plays the role of the DynamoDB item.
    """

    def __init__(self, store: dict | None = None):
        self.store = store if store is not None else {}
        self.session_attributes: dict = {}
        self._persistent_attributes: dict | None = None
        self.save_count = 0

    @property
    def persistent_attributes(self) -> dict:
        if self._persistent_attributes is None:
            self._persistent_attributes = dict(self.store)
        return self._persistent_attributes

    @persistent_attributes.setter
    def persistent_attributes(self, value: dict) -> None:
        self._persistent_attributes = value

    def save_persistent_attributes(self) -> None:
        self.save_count += 1
        self.store.clear()
        self.store.update(self._persistent_attributes or {})


class FakeHandlerInput:
    """A fake HandlerInput carrying a user id and an attributes manager."""

    def __init__(self, attributes_manager, user_id: str = "test-user-123"):
        self.attributes_manager = attributes_manager
        self.request_envelope = MagicMock()
        self.request_envelope.context.system.user.user_id = user_id
        self.request_envelope.session.session_id = "session-1"


@pytest.fixture
def attributes_manager():
    return InMemoryAttributesManager()


@pytest.fixture
def storage(attributes_manager):
    """A PersistenceManager over in-memory attributes."""
    return PersistenceManager(FakeHandlerInput(attributes_manager))


def reload(storage: PersistenceManager) -> PersistenceManager:
    """A fresh PersistenceManager reading what `storage` has saved."""
    saved = storage._attributes_manager.store
    return PersistenceManager(FakeHandlerInput(InMemoryAttributesManager(dict(saved))))


@pytest.fixture
def mock_handler_input():
    """Create a mock handler input with all required attributes."""
    handler_input = MagicMock()

    # Session attributes (mutable dict)
    session_attrs = {}
    handler_input.attributes_manager.session_attributes = session_attrs

    # Response builder
    response_builder = MagicMock()
    response_builder.speak.return_value = response_builder
    response_builder.ask.return_value = response_builder
    response_builder.set_should_end_session.return_value = response_builder
    response_builder.response = MagicMock()
    handler_input.response_builder = response_builder

    # Request envelope
    handler_input.request_envelope = MagicMock()
    handler_input.request_envelope.request = MagicMock()
    handler_input.request_envelope.request.intent.slots = {}
    handler_input.request_envelope.context.system.user.user_id = "test-user-123"
    handler_input.request_envelope.session.session_id = "session-1"

    # Device settings service
    ups_service = handler_input.service_client_factory.get_ups_service.return_value
    ups_service.get_system_time_zone.return_value = "Asia/Kolkata"

    return handler_input


def spoken(handler_input) -> str:
    """The text passed to the last speak() call."""
    return handler_input.response_builder.speak.call_args[0][0]
