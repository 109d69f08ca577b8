from django.apps import AppConfig


class ContactConfig(AppConfig):
    default_auto_field = 'django.db.models.AutoField'
    name = 'contact'
    verbose_name = 'Contact Registrations'

    def ready(self):
        """Import signals when app is ready."""
        import contact.signals  # noqa
