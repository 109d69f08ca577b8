"""
Twilio SMS Service.
Handles SMS sending through the Twilio Programmable Messaging REST API.

Official Twilio API Documentation:
https://www.twilio.com/docs/messaging/api/message-resource#create-a-message-resource
"""
import requests
import logging
from typing import Dict, Optional
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)


class TwilioSMSService:
    """
    Service for sending SMS via the Twilio REST API.

    Credentials are passed in explicitly; ``from_settings()`` builds an
    instance from the TWILIO_* settings.
    """

    MESSAGES_PATH = "/2010-04-01/Accounts/{account_sid}/Messages.json"

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_phone: str,
        enabled: bool = True,
        base_url: str = "https://api.twilio.com",
        timeout: int = 10,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_phone = from_phone
        self.enabled = enabled
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

        if self.enabled and not (self.account_sid and self.auth_token):
            logger.warning("Twilio credentials not configured. SMS sending will fail.")

    @classmethod
    def from_settings(cls) -> "TwilioSMSService":
        return cls(
            account_sid=settings.TWILIO_ACCOUNT_SID,
            auth_token=settings.TWILIO_AUTH_TOKEN,
            from_phone=settings.TWILIO_FROM_PHONE,
            enabled=settings.SMS_ENABLED,
            base_url=settings.TWILIO_BASE_URL,
            timeout=settings.SMS_REQUEST_TIMEOUT,
        )

    @property
    def messages_url(self) -> str:
        return self.base_url + self.MESSAGES_PATH.format(account_sid=self.account_sid)

    def send_sms(self, phone_number: str, message: str) -> Dict:
        """
        Send SMS via Twilio API.

        Args:
            phone_number: Recipient phone number (E.164 format: +15551234567)
            message: SMS message content

        Returns:
            dict: Response with success flag, message_sid, status and error info
        """
        phone_number = self._normalize_phone_number(phone_number)

        if not self.enabled:
            return self._simulate_sms(phone_number, message)

        payload = {
            'To': phone_number,
            'From': self.from_phone,
            'Body': message,
        }

        try:
            # Twilio expects form-encoded data with Basic Auth (SID:token)
            response = requests.post(
                self.messages_url,
                data=payload,
                auth=(self.account_sid, self.auth_token),
                timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            logger.error(f"Timeout sending SMS to {phone_number}")
            return self._failure(phone_number, 'Request timeout')
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error sending SMS to {phone_number}: {str(e)}")
            return self._failure(phone_number, f'Network error: {str(e)}')

        if response.status_code in (200, 201):
            try:
                data = response.json()
            except ValueError:
                logger.error(f"Unreadable Twilio response for SMS to {phone_number}: {response.text[:200]}")
                return self._failure(
                    phone_number,
                    'Invalid response from SMS provider',
                    status_code=response.status_code
                )

            logger.info(
                f"SMS sent successfully to {phone_number}. "
                f"MessageSid: {data.get('sid')}, Status: {data.get('status')}"
            )

            return {
                'success': True,
                'message_sid': data.get('sid'),
                'status': data.get('status'),
                'phone_number': phone_number,
                'timestamp': timezone.now().isoformat(),
            }

        error_message = self._error_message(response)
        logger.error(
            f"Failed to send SMS to {phone_number}. "
            f"Status: {response.status_code}, Error: {error_message}"
        )
        return self._failure(phone_number, error_message, status_code=response.status_code)

    def _error_message(self, response) -> str:
        try:
            error_data = response.json() if response.content else {}
        except ValueError:
            error_data = {}
        return error_data.get('message') or f'HTTP {response.status_code}'

    def _failure(self, phone_number: str, error: str, status_code: Optional[int] = None) -> Dict:
        result = {
            'success': False,
            'error': error,
            'phone_number': phone_number,
            'timestamp': timezone.now().isoformat(),
        }
        if status_code is not None:
            result['status_code'] = status_code
        return result

    def _normalize_phone_number(self, phone: str) -> str:
        """
        Strip formatting characters from a phone number.

        Examples:
            +1 (555) 123-4567 -> +15551234567
            +1-555-123-4567   -> +15551234567
        """
        for char in (' ', '-', '(', ')', '.'):
            phone = phone.replace(char, '')
        return phone

    def _simulate_sms(self, phone_number: str, message: str) -> Dict:
        """Simulate SMS sending for development/testing."""
        logger.info(
            f"\n{'='*60}\n"
            f"SIMULATED SMS\n"
            f"To: {phone_number}\n"
            f"From: {self.from_phone}\n"
            f"Message: {message}\n"
            f"{'='*60}\n"
        )

        return {
            'success': True,
            'message_sid': f'SIM-{timezone.now().timestamp():.0f}',
            'status': 'simulated',
            'phone_number': phone_number,
            'timestamp': timezone.now().isoformat(),
            'simulated': True,
        }
