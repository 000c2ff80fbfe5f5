"""Error taxonomy shared by the HTTP surface and the chat reply path."""

from fastapi import status


class GatewayError(Exception):
    """Base class for errors that are reported at the request boundary."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(GatewayError):
    """Malformed or missing request fields."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(GatewayError):
    """Signature or OAuth state mismatch."""

    status_code = status.HTTP_400_BAD_REQUEST


class UpstreamError(GatewayError):
    """A call to Slack, ESI or EVE SSO failed. Never retried."""

    status_code = status.HTTP_502_BAD_GATEWAY


class InternalError(GatewayError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
