"""
Contact Registration Serializers

Validates the `{"contacto": {...}}` request body.
"""
from rest_framework import serializers


class ContactoSerializer(serializers.Serializer):
    """
    Contact fields as sent by clients.

    Lengths match the `registros` columns so oversized values are rejected
    before reaching the database.
    """

    uuid = serializers.CharField(
        max_length=100,
        required=True,
        help_text="Caller-supplied identifier"
    )

    nombre = serializers.CharField(
        max_length=200,
        required=True,
        help_text="Name of the contact"
    )

    correo = serializers.EmailField(
        max_length=200,
        required=True,
        help_text="Email address for the registration notice"
    )

    telefono = serializers.CharField(
        max_length=20,
        required=True,
        help_text="Phone number for the registration SMS (E.164)"
    )


class ContactSubmissionSerializer(serializers.Serializer):
    """Request wrapper for POST /api/data."""

    contacto = ContactoSerializer(required=True)

    def to_submission(self):
        """Map the validated wire fields to the handler's submission dict."""
        contacto = self.validated_data['contacto']
        return {
            'external_id': contacto['uuid'],
            'name': contacto['nombre'],
            'email': contacto['correo'],
            'phone': contacto['telefono'],
        }
