"""
Tests for the Twilio SMS service.
"""
import os
import runpy
from unittest.mock import MagicMock, patch

import pytest
import requests
from django.test import override_settings

import core
from core.sms_service import TwilioSMSService

SETTINGS_PATH = os.path.join(os.path.dirname(core.__file__), 'settings.py')


@pytest.fixture
def sms_service():
    return TwilioSMSService(
        account_sid='ACtest',
        auth_token='test-token',
        from_phone='+15550000000',
        enabled=True,
        timeout=10,
    )


def twilio_response(status_code, data):
    response = MagicMock()
    response.status_code = status_code
    response.content = b'{}'
    response.json.return_value = data
    return response


class TestTwilioSMSService:

    def test_sends_form_encoded_message(self, sms_service):
        with patch('core.sms_service.requests.post') as post:
            post.return_value = twilio_response(201, {'sid': 'SM123', 'status': 'queued'})

            result = sms_service.send_sms('+15551234567', 'Nombre: Ana\nUUID: abc-123\nIP: 10.0.0.7')

        post.assert_called_once_with(
            'https://api.twilio.com/2010-04-01/Accounts/ACtest/Messages.json',
            data={
                'To': '+15551234567',
                'From': '+15550000000',
                'Body': 'Nombre: Ana\nUUID: abc-123\nIP: 10.0.0.7',
            },
            auth=('ACtest', 'test-token'),
            timeout=10
        )
        assert result['success'] is True
        assert result['message_sid'] == 'SM123'
        assert result['status'] == 'queued'

    def test_provider_error_message_is_returned(self, sms_service):
        with patch('core.sms_service.requests.post') as post:
            post.return_value = twilio_response(400, {
                'code': 21211,
                'message': "The 'To' number +1555 is not a valid phone number.",
                'status': 400,
            })

            result = sms_service.send_sms('+1555', 'hello')

        assert result['success'] is False
        assert result['status_code'] == 400
        assert result['error'] == "The 'To' number +1555 is not a valid phone number."

    def test_error_without_json_body(self, sms_service):
        response = twilio_response(503, None)
        response.json.side_effect = ValueError('No JSON')

        with patch('core.sms_service.requests.post', return_value=response):
            result = sms_service.send_sms('+15551234567', 'hello')

        assert result['success'] is False
        assert result['error'] == 'HTTP 503'

    def test_success_status_with_unreadable_body(self, sms_service):
        response = twilio_response(201, None)
        response.text = '<html>OK</html>'
        response.json.side_effect = ValueError('not json')

        with patch('core.sms_service.requests.post', return_value=response):
            result = sms_service.send_sms('+15551234567', 'hello')

        assert result['success'] is False
        assert result['status_code'] == 201
        assert result['error'] == 'Invalid response from SMS provider'

    def test_timeout(self, sms_service):
        with patch('core.sms_service.requests.post', side_effect=requests.exceptions.Timeout()):
            result = sms_service.send_sms('+15551234567', 'hello')

        assert result['success'] is False
        assert result['error'] == 'Request timeout'

    def test_network_error(self, sms_service):
        with patch(
            'core.sms_service.requests.post',
            side_effect=requests.exceptions.ConnectionError('connection refused')
        ):
            result = sms_service.send_sms('+15551234567', 'hello')

        assert result['success'] is False
        assert result['error'].startswith('Network error:')

    def test_disabled_service_simulates(self):
        service = TwilioSMSService('ACtest', 'test-token', '+15550000000', enabled=False)

        with patch('core.sms_service.requests.post') as post:
            result = service.send_sms('+1 (555) 123-4567', 'hello')

        post.assert_not_called()
        assert result['success'] is True
        assert result['simulated'] is True
        assert result['phone_number'] == '+15551234567'

    @override_settings(
        TWILIO_ACCOUNT_SID='ACfromsettings',
        TWILIO_AUTH_TOKEN='secret',
        TWILIO_FROM_PHONE='+15559999999',
        TWILIO_BASE_URL='https://twilio.example.test/',
        SMS_ENABLED=True,
        SMS_REQUEST_TIMEOUT=3,
    )
    def test_from_settings(self):
        service = TwilioSMSService.from_settings()

        assert service.enabled is True
        assert service.timeout == 3
        assert service.from_phone == '+15559999999'
        assert service.messages_url == (
            'https://twilio.example.test/2010-04-01/Accounts/ACfromsettings/Messages.json'
        )


class TestSmsSettingsDefault:
    """SMS_ENABLED falls back to the opposite of DEBUG when unset."""

    def load_settings(self, **env):
        with patch.dict(os.environ, env):
            os.environ.pop('SMS_ENABLED', None)
            return runpy.run_path(SETTINGS_PATH)

    def test_enabled_when_debug_off(self):
        settings = self.load_settings(DEBUG='False', SECRET_KEY='test-secret')
        assert settings['SMS_ENABLED'] is True

    def test_simulated_when_debug_on(self):
        settings = self.load_settings(DEBUG='True', SECRET_KEY='test-secret')
        assert settings['SMS_ENABLED'] is False
