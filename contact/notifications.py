"""
Contact Registration Notifications

Email and SMS senders used after a contact record is stored. Both channels
carry the same three-line body. A failed send raises TransportError; there
is no retry.
"""
import logging
import smtplib

from django.core.mail import send_mail

from core.sms_service import TwilioSMSService
from .exceptions import TransportError

logger = logging.getLogger(__name__)

EMAIL_SUBJECT = "Notificación de Registro"


def build_message(name, external_id, server_ip):
    """Body shared by the email and SMS notifications."""
    return f"Nombre: {name}\nUUID: {external_id}\nIP: {server_ip}"


class EmailSender:
    """
    Sends the registration notice through Django's mail framework.

    SMTP host, port, credentials and TLS come from the EMAIL_* settings of
    the configured backend; only the sender address is held here.
    """

    channel = 'email'

    def __init__(self, from_email, subject=EMAIL_SUBJECT):
        self.from_email = from_email
        self.subject = subject

    def send(self, destination, name, external_id, server_ip):
        try:
            send_mail(
                subject=self.subject,
                message=build_message(name, external_id, server_ip),
                from_email=self.from_email,
                recipient_list=[destination],
                fail_silently=False
            )
        except (smtplib.SMTPException, OSError, ValueError) as e:
            logger.error(f"Failed to send registration email to {destination}: {str(e)}")
            raise TransportError(str(e), channel=self.channel, external_id=external_id) from e

        logger.info(f"Registration email sent to {destination} for {external_id}")


class SmsSender:
    """Sends the registration notice through the Twilio SMS service."""

    channel = 'sms'

    def __init__(self, sms_service: TwilioSMSService):
        self.sms_service = sms_service

    def send(self, destination, name, external_id, server_ip):
        result = self.sms_service.send_sms(
            phone_number=destination,
            message=build_message(name, external_id, server_ip),
        )

        if not result.get('success'):
            raise TransportError(
                result.get('error', 'Unknown error'),
                channel=self.channel,
                external_id=external_id
            )

        return result
