"""
Shared pytest fixtures.
"""
import pytest
from rest_framework.test import APIClient, APIRequestFactory

from contact.exceptions import TransportError


class RecordingSender:
    """Notification sender double that records calls and can be told to fail."""

    def __init__(self, channel, error=None):
        self.channel = channel
        self.error = error
        self.calls = []

    def send(self, destination, name, external_id, server_ip):
        self.calls.append((destination, name, external_id, server_ip))
        if self.error:
            raise TransportError(self.error, channel=self.channel, external_id=external_id)


class StaticResolver:
    """Address resolver double returning a fixed value."""

    def __init__(self, address='10.0.0.7'):
        self.address = address

    def resolve(self):
        return self.address


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


@pytest.fixture
def request_factory():
    return APIRequestFactory()


@pytest.fixture
def email_sender():
    return RecordingSender('email')


@pytest.fixture
def sms_sender():
    return RecordingSender('sms')


@pytest.fixture
def resolver():
    return StaticResolver()


@pytest.fixture
def handler(make_handler):
    """Submission handler backed by the real store and recording senders."""
    return make_handler()


@pytest.fixture
def payload():
    return {
        'contacto': {
            'uuid': 'abc-123',
            'nombre': 'Ana',
            'correo': 'ana@example.com',
            'telefono': '+15551234567',
        }
    }


@pytest.fixture
def make_sender():
    """Factory for recording senders; pass `error` to make the send fail."""
    return RecordingSender


@pytest.fixture
def make_handler(email_sender, sms_sender, resolver):
    """Factory for submission handlers; keyword arguments replace the default collaborators."""
    from contact.services import ContactRecordStore, SubmissionHandler

    def factory(**overrides):
        collaborators = {
            'store': ContactRecordStore(),
            'address_resolver': resolver,
            'email_sender': email_sender,
            'sms_sender': sms_sender,
        }
        collaborators.update(overrides)
        return SubmissionHandler(**collaborators)

    return factory
