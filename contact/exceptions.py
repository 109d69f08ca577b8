"""
Contact Registration Exceptions

One exception type per failure domain of a submission.
"""


class SubmissionError(Exception):
    """Base exception for contact submission failures"""
    code = 'submission_error'

    def __init__(self, message: str, external_id: str = None, persisted: bool = False):
        super().__init__(message)
        self.message = message
        self.external_id = external_id
        self.persisted = persisted


class PersistenceError(SubmissionError):
    """The contact record could not be written (connectivity loss, constraint violation)."""
    code = 'persistence_error'


class AddressLookupError(SubmissionError):
    """No usable local IPv4 address. Never surfaced to the caller."""
    code = 'address_lookup_error'


class TransportError(SubmissionError):
    """
    An email or SMS provider rejected or failed to accept a notification.

    Attributes:
        channel: 'email' or 'sms'
    """
    code = 'transport_error'

    def __init__(self, message: str, channel: str, external_id: str = None, persisted: bool = False):
        super().__init__(message, external_id=external_id, persisted=persisted)
        self.channel = channel


class ProcessingError(SubmissionError):
    """Any other failure raised while processing a stored submission."""
    code = 'unexpected_error'
