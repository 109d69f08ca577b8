"""
Contact Registration Services

Persistence store, submission handler and the composition root that wires
them to the configured email and SMS senders.
"""
import logging

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone

from core.sms_service import TwilioSMSService
from .exceptions import PersistenceError, ProcessingError, SubmissionError, TransportError
from .models import ContactRecord
from .network import HostAddressResolver
from .notifications import EmailSender, SmsSender

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Datos procesados exitosamente"


class ContactRecordStore:
    """Writes contact records to the `registros` table."""

    def save(self, external_id, name, email, phone, created_at):
        """
        Insert one ContactRecord.

        Raises:
            PersistenceError: If the insert cannot complete
        """
        try:
            with transaction.atomic():
                record = ContactRecord.objects.create(
                    external_id=external_id,
                    name=name,
                    email=email,
                    phone=phone,
                    created_at=created_at
                )
        except DatabaseError as e:
            logger.error(f"Failed to store contact record {external_id}: {str(e)}")
            raise PersistenceError(str(e), external_id=external_id) from e

        return record


class SubmissionHandler:
    """
    Stores a contact submission, then notifies the contact by email and SMS.

    Steps run strictly in order: store, resolve server IP, email, SMS. A
    failure stops the flow at that step. The record is not rolled back when
    a later step fails; errors raised after the insert carry `persisted=True`.

    Usage:
        handler = SubmissionHandler(store, resolver, email_sender, sms_sender)
        response = handler.handle({
            'external_id': 'abc-123',
            'name': 'Ana',
            'email': 'ana@example.com',
            'phone': '+15551234567',
        })
    """

    def __init__(self, store, address_resolver, email_sender, sms_sender):
        self.store = store
        self.address_resolver = address_resolver
        self.email_sender = email_sender
        self.sms_sender = sms_sender

    def handle(self, submission):
        """
        Process one submission.

        Args:
            submission: dict with external_id, name, email and phone

        Returns:
            dict: {'message', 'uuid', 'serverIp'}

        Raises:
            PersistenceError: The record was not stored; nothing was sent
            TransportError: A notification failed after the record was stored
            ProcessingError: Anything else failed after the record was stored
        """
        external_id = submission['external_id']

        record = self.store.save(
            external_id=external_id,
            name=submission['name'],
            email=submission['email'],
            phone=submission['phone'],
            created_at=timezone.now()
        )
        logger.info(f"Stored contact record #{record.pk} for {external_id}")

        try:
            server_ip = self.address_resolver.resolve()
            self.email_sender.send(record.email, record.name, external_id, server_ip)
            self.sms_sender.send(record.phone, record.name, external_id, server_ip)
        except TransportError as e:
            e.persisted = True
            logger.warning(
                f"Contact record #{record.pk} ({external_id}) stored but "
                f"{e.channel} notification failed: {e.message}"
            )
            raise
        except SubmissionError as e:
            e.persisted = True
            raise
        except Exception as e:
            logger.exception(f"Contact record #{record.pk} ({external_id}) stored but processing failed")
            raise ProcessingError(str(e), external_id=external_id, persisted=True) from e

        return {
            'message': SUCCESS_MESSAGE,
            'uuid': external_id,
            'serverIp': server_ip,
        }


def build_submission_handler():
    """Build a SubmissionHandler from settings."""
    return SubmissionHandler(
        store=ContactRecordStore(),
        address_resolver=HostAddressResolver(),
        email_sender=EmailSender(from_email=settings.CONTACT_EMAIL_FROM),
        sms_sender=SmsSender(TwilioSMSService.from_settings()),
    )
