"""
Contact Registration Views

API endpoint for contact submissions.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import ParseError
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from .exceptions import SubmissionError
from .serializers import ContactSubmissionSerializer

logger = logging.getLogger(__name__)

PROBLEM_CONTENT_TYPE = 'application/problem+json'
SERVER_ERROR_TYPE = 'https://tools.ietf.org/html/rfc9110#section-15.6.1'
BAD_REQUEST_TYPE = 'https://tools.ietf.org/html/rfc9110#section-15.5.1'


def problem_response(status_code, title, problem_type, **extra):
    """Build an RFC 9457 problem-details response."""
    body = {
        'type': problem_type,
        'title': title,
        'status': status_code,
    }
    body.update(extra)
    return Response(body, status=status_code, content_type=PROBLEM_CONTENT_TYPE)


class ContactDataView(APIView):
    """
    Public endpoint for contact submissions.

    POST /api/data

    Stores the contact, then sends the email and SMS notifications. The
    handler is supplied by the URL configuration via `as_view(handler=...)`.
    """

    authentication_classes = []
    permission_classes = [AllowAny]
    handler = None

    def post(self, request):
        """Submit a contact."""
        try:
            data = request.data
        except ParseError as e:
            return problem_response(
                status.HTTP_400_BAD_REQUEST,
                'The request body is not valid JSON.',
                BAD_REQUEST_TYPE,
                detail=str(e.detail)
            )

        serializer = ContactSubmissionSerializer(data=data)

        if not serializer.is_valid():
            return problem_response(
                status.HTTP_400_BAD_REQUEST,
                'One or more validation errors occurred.',
                BAD_REQUEST_TYPE,
                errors=serializer.errors
            )

        submission = serializer.to_submission()

        try:
            result = self.handler.handle(submission)
        except SubmissionError as e:
            extra = {
                'code': e.code,
                'uuid': submission['external_id'],
                'persisted': e.persisted,
            }
            if getattr(e, 'channel', None):
                extra['channel'] = e.channel
            return problem_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                'An error occurred while processing your request.',
                SERVER_ERROR_TYPE,
                detail=f"Error: {e.message}",
                **extra
            )
        # Failures after the insert arrive as SubmissionError, so nothing was stored here
        except Exception as e:
            logger.exception(f"Unexpected error processing contact {submission['external_id']}")
            return problem_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                'An error occurred while processing your request.',
                SERVER_ERROR_TYPE,
                detail=f"Error: {str(e)}",
                code='unexpected_error',
                uuid=submission['external_id'],
                persisted=False
            )

        return Response(result, status=status.HTTP_200_OK)
