"""
Contact Registration Signals

Django signals for contact-related events.
"""
import logging

from django.db.models.signals import post_save
from django.dispatch import receiver
from .models import ContactRecord

logger = logging.getLogger(__name__)


@receiver(post_save, sender=ContactRecord)
def contact_record_post_save(sender, instance, created, **kwargs):
    """Log new contact records."""
    if created:
        logger.info(f"New contact record #{instance.pk}: {instance.external_id}")
