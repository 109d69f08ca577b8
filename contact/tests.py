"""
Tests for the contact submission flow.
"""
import logging
import smtplib
import socket
from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from django.core import mail
from django.db import DatabaseError
from django.utils import timezone
from rest_framework import status

from contact.exceptions import PersistenceError, TransportError
from contact.models import ContactRecord
from contact.network import HostAddressResolver, UNKNOWN_ADDRESS
from contact.notifications import EmailSender, SmsSender, build_message
from contact.services import ContactRecordStore
from contact.views import ContactDataView
from core.sms_service import TwilioSMSService


def post_to_view(request_factory, handler, payload):
    """POST /api/data through a view wired to the given handler."""
    view = ContactDataView.as_view(handler=handler)
    request = request_factory.post('/api/data', payload, format='json')
    response = view(request)
    response.render()
    return response


@pytest.mark.django_db
class TestContactSubmission:
    """End-to-end submission through the view."""

    def test_successful_submission(self, request_factory, handler, payload, email_sender, sms_sender):
        """Stores one row and echoes uuid and server IP."""
        before = timezone.now()

        response = post_to_view(request_factory, handler, payload)

        after = timezone.now()
        assert response.status_code == status.HTTP_200_OK
        assert response.data == {
            'message': 'Datos procesados exitosamente',
            'uuid': 'abc-123',
            'serverIp': '10.0.0.7',
        }

        assert ContactRecord.objects.count() == 1
        record = ContactRecord.objects.get()
        assert record.external_id == 'abc-123'
        assert record.name == 'Ana'
        assert record.email == 'ana@example.com'
        assert record.phone == '+15551234567'
        assert before <= record.created_at <= after

        assert email_sender.calls == [('ana@example.com', 'Ana', 'abc-123', '10.0.0.7')]
        assert sms_sender.calls == [('+15551234567', 'Ana', 'abc-123', '10.0.0.7')]

    def test_email_failure_skips_sms_and_keeps_record(self, request_factory, payload, make_handler, make_sender, sms_sender):
        """A failed email aborts the flow; the stored record is not rolled back."""
        handler = make_handler(email_sender=make_sender('email', error='SMTP server unavailable'))

        response = post_to_view(request_factory, handler, payload)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response['Content-Type'] == 'application/problem+json'
        assert response.data['detail'] == 'Error: SMTP server unavailable'
        assert response.data['code'] == 'transport_error'
        assert response.data['channel'] == 'email'
        assert response.data['persisted'] is True
        assert response.data['uuid'] == 'abc-123'

        assert sms_sender.calls == []
        assert ContactRecord.objects.filter(external_id='abc-123').count() == 1

    def test_sms_failure_reports_error_after_email(self, request_factory, payload, make_handler, make_sender, email_sender):
        handler = make_handler(sms_sender=make_sender('sms', error='Invalid To phone number'))

        response = post_to_view(request_factory, handler, payload)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['channel'] == 'sms'
        assert response.data['detail'] == 'Error: Invalid To phone number'
        assert len(email_sender.calls) == 1
        assert ContactRecord.objects.count() == 1

    def test_unknown_server_ip_still_notifies(self, request_factory, payload, handler, resolver, email_sender, sms_sender):
        """No IPv4 address means serverIp is 'Unknown' and both sends still happen."""
        resolver.address = UNKNOWN_ADDRESS

        response = post_to_view(request_factory, handler, payload)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['serverIp'] == 'Unknown'
        assert email_sender.calls[0][3] == 'Unknown'
        assert sms_sender.calls[0][3] == 'Unknown'

    def test_duplicate_uuid_creates_two_rows(self, request_factory, handler, payload):
        """Submissions are not deduplicated by uuid."""
        first = post_to_view(request_factory, handler, payload)
        second = post_to_view(request_factory, handler, payload)

        assert first.status_code == status.HTTP_200_OK
        assert second.status_code == status.HTTP_200_OK
        rows = ContactRecord.objects.filter(external_id='abc-123')
        assert rows.count() == 2
        assert len({row.pk for row in rows}) == 2

    def test_store_failure_sends_nothing(self, request_factory, handler, payload, email_sender, sms_sender):
        """A failed insert reports a server error with no rows and no notifications."""
        with patch.object(
            ContactRecord.objects, 'create', side_effect=DatabaseError('connection lost')
        ):
            response = post_to_view(request_factory, handler, payload)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['detail'] == 'Error: connection lost'
        assert response.data['code'] == 'persistence_error'
        assert response.data['persisted'] is False
        assert 'channel' not in response.data

        assert ContactRecord.objects.count() == 0
        assert email_sender.calls == []
        assert sms_sender.calls == []

    def test_unexpected_error_reports_generic_failure(self, request_factory, payload, make_handler, email_sender):
        class BrokenResolver:
            def resolve(self):
                raise RuntimeError('resolver exploded')

        handler = make_handler(address_resolver=BrokenResolver())

        response = post_to_view(request_factory, handler, payload)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['detail'] == 'Error: resolver exploded'
        assert response.data['code'] == 'unexpected_error'
        assert response.data['persisted'] is True
        assert email_sender.calls == []
        assert ContactRecord.objects.count() == 1

    def test_unexpected_error_before_insert_reports_not_persisted(self, request_factory, payload, make_handler, email_sender):
        class BrokenStore:
            def save(self, **fields):
                raise RuntimeError('store misconfigured')

        handler = make_handler(store=BrokenStore())

        response = post_to_view(request_factory, handler, payload)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['code'] == 'unexpected_error'
        assert response.data['persisted'] is False
        assert email_sender.calls == []

    def test_unreadable_sms_reply_reports_transport_error(self, request_factory, payload, make_handler, email_sender):
        """A 201 reply that is not JSON is an SMS transport failure."""
        reply = MagicMock(status_code=201, content=b'OK', text='OK')
        reply.json.side_effect = ValueError('not json')
        sms_service = TwilioSMSService('ACtest', 'test-token', '+15550000000', enabled=True)
        handler = make_handler(sms_sender=SmsSender(sms_service))

        with patch('core.sms_service.requests.post', return_value=reply):
            response = post_to_view(request_factory, handler, payload)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['code'] == 'transport_error'
        assert response.data['channel'] == 'sms'
        assert response.data['persisted'] is True
        assert len(email_sender.calls) == 1


@pytest.mark.django_db
class TestSubmissionValidation:
    """Request body validation."""

    def test_missing_fields(self, request_factory, handler, email_sender):
        response = post_to_view(request_factory, handler, {'contacto': {'uuid': 'abc-123'}})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['status'] == 400
        assert set(response.data['errors']['contacto']) == {'nombre', 'correo', 'telefono'}
        assert ContactRecord.objects.count() == 0
        assert email_sender.calls == []

    def test_malformed_json_body(self, request_factory, handler, email_sender):
        view = ContactDataView.as_view(handler=handler)
        request = request_factory.post('/api/data', data='{"contacto": ', content_type='application/json')

        response = view(request)
        response.render()

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response['Content-Type'] == 'application/problem+json'
        assert response.data['title'] == 'The request body is not valid JSON.'
        assert response.data['status'] == 400
        assert ContactRecord.objects.count() == 0
        assert email_sender.calls == []

    def test_missing_wrapper(self, request_factory, handler):
        response = post_to_view(request_factory, handler, {'uuid': 'abc-123'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'contacto' in response.data['errors']

    def test_phone_longer_than_column(self, request_factory, handler, payload):
        payload['contacto']['telefono'] = '+1' + '5' * 19

        response = post_to_view(request_factory, handler, payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'telefono' in response.data['errors']['contacto']
        assert ContactRecord.objects.count() == 0

    def test_invalid_email(self, request_factory, handler, payload):
        payload['contacto']['correo'] = 'not-an-email'

        response = post_to_view(request_factory, handler, payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'correo' in response.data['errors']['contacto']


@pytest.mark.django_db
class TestContactDataEndpoint:
    """POST /api/data through the URL configuration and real senders."""

    def test_submit_through_url(self, api_client, payload):
        addrinfo = [(socket.AF_INET, socket.SOCK_STREAM, 6, '', ('192.168.10.20', 0))]
        with patch('contact.network.socket.getaddrinfo', return_value=addrinfo):
            response = api_client.post('/api/data', payload, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            'message': 'Datos procesados exitosamente',
            'uuid': 'abc-123',
            'serverIp': '192.168.10.20',
        }
        assert ContactRecord.objects.count() == 1

        # SMS is simulated in test settings; the email lands in the outbox
        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ['ana@example.com']
        assert mail.outbox[0].body == 'Nombre: Ana\nUUID: abc-123\nIP: 192.168.10.20'

    def test_get_not_allowed(self, api_client):
        response = api_client.get('/api/data')
        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED


@pytest.mark.django_db
class TestContactRecordStore:

    def test_save_assigns_id(self):
        created_at = timezone.now() - timedelta(seconds=5)

        record = ContactRecordStore().save(
            external_id='abc-123',
            name='Ana',
            email='ana@example.com',
            phone='+15551234567',
            created_at=created_at
        )

        assert record.pk is not None
        assert ContactRecord.objects.get(pk=record.pk).created_at == created_at

    def test_database_error_raises_persistence_error(self):
        with patch.object(ContactRecord.objects, 'create', side_effect=DatabaseError('value too long')):
            with pytest.raises(PersistenceError) as exc_info:
                ContactRecordStore().save('abc-123', 'Ana', 'ana@example.com', '+1555', timezone.now())

        assert exc_info.value.external_id == 'abc-123'
        assert exc_info.value.persisted is False


class TestNotifications:

    def test_message_template(self):
        assert build_message('Ana', 'abc-123', '10.0.0.7') == 'Nombre: Ana\nUUID: abc-123\nIP: 10.0.0.7'

    def test_email_sender_sends_plain_text(self):
        EmailSender(from_email='registros@example.com').send('ana@example.com', 'Ana', 'abc-123', '10.0.0.7')

        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.subject == 'Notificación de Registro'
        assert message.from_email == 'registros@example.com'
        assert message.to == ['ana@example.com']
        assert message.body == 'Nombre: Ana\nUUID: abc-123\nIP: 10.0.0.7'

    def test_email_sender_wraps_smtp_errors(self):
        sender = EmailSender(from_email='registros@example.com')

        with patch('contact.notifications.send_mail', side_effect=smtplib.SMTPAuthenticationError(535, b'bad credentials')):
            with pytest.raises(TransportError) as exc_info:
                sender.send('ana@example.com', 'Ana', 'abc-123', '10.0.0.7')

        assert exc_info.value.channel == 'email'
        assert exc_info.value.external_id == 'abc-123'

    def test_sms_sender_uses_shared_template(self):
        service = TwilioSMSService('ACtest', 'test-token', '+15550000000', enabled=False)

        result = SmsSender(service).send('+1 555 123 4567', 'Ana', 'abc-123', '10.0.0.7')

        assert result['success'] is True
        assert result['simulated'] is True
        assert result['phone_number'] == '+15551234567'

    def test_sms_sender_raises_on_provider_failure(self):
        service = TwilioSMSService('ACtest', 'test-token', '+15550000000', enabled=True)

        with patch.object(service, 'send_sms', return_value={'success': False, 'error': 'Invalid To number'}):
            with pytest.raises(TransportError) as exc_info:
                SmsSender(service).send('+15551234567', 'Ana', 'abc-123', '10.0.0.7')

        assert exc_info.value.channel == 'sms'
        assert exc_info.value.message == 'Invalid To number'


class TestHostAddressResolver:

    def test_returns_first_ipv4(self):
        addrinfo = [
            (socket.AF_INET, socket.SOCK_STREAM, 6, '', ('10.1.2.3', 0)),
            (socket.AF_INET, socket.SOCK_DGRAM, 17, '', ('10.1.2.4', 0)),
        ]
        with patch('contact.network.socket.getaddrinfo', return_value=addrinfo) as getaddrinfo:
            assert HostAddressResolver('web-1').resolve() == '10.1.2.3'

        getaddrinfo.assert_called_once_with('web-1', None, family=socket.AF_INET)

    def test_no_address_falls_back_to_unknown(self):
        with patch('contact.network.socket.getaddrinfo', return_value=[]):
            assert HostAddressResolver('web-1').resolve() == 'Unknown'

    def test_resolution_error_falls_back_to_unknown(self):
        with patch('contact.network.socket.getaddrinfo', side_effect=socket.gaierror(-2, 'Name or service not known')):
            assert HostAddressResolver('web-1').resolve() == 'Unknown'


@pytest.mark.django_db
class TestContactRecordSignals:

    def test_new_record_log_omits_contact_details(self, caplog):
        caplog.set_level(logging.INFO, logger='contact.signals')

        record = ContactRecord.objects.create(
            external_id='abc-123',
            name='Ana',
            email='ana@example.com',
            phone='+15551234567'
        )

        assert f"#{record.pk}: abc-123" in caplog.text
        assert 'ana@example.com' not in caplog.text
        assert '+15551234567' not in caplog.text
