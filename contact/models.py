"""
Contact Registration Models

Database schema for contact submissions.
"""
from django.db import models
from django.utils import timezone


class ContactRecord(models.Model):
    """
    A contact submission as received on POST /api/data.

    Rows are written once and never updated or deleted by the service.
    `external_id` is the caller-supplied identifier and is not unique.
    """

    id = models.AutoField(primary_key=True)

    external_id = models.CharField(
        max_length=100,
        db_column='uuid',
        help_text="Caller-supplied identifier"
    )

    name = models.CharField(
        max_length=200,
        db_column='nombre',
        help_text="Name of the contact"
    )

    email = models.CharField(
        max_length=200,
        db_column='correo',
        help_text="Email address notified on registration"
    )

    phone = models.CharField(
        max_length=20,
        db_column='telefono',
        help_text="Phone number notified on registration"
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        db_column='fecha_creacion',
        help_text="When the submission was stored (UTC)"
    )

    class Meta:
        db_table = 'registros'
        ordering = ['-created_at']
        verbose_name = 'Contact Record'
        verbose_name_plural = 'Contact Records'

    def __str__(self):
        return f"{self.external_id} - {self.name}"
