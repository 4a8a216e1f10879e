"""Service error types.

Each error carries the HTTP status code the API layer responds with, so
handlers can translate any service failure into a JSON error body without
knowing which operation raised it.
"""


class MenuServiceError(Exception):
    """Base class for all expected service failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        """Initialize the error.

        Args:
            message: Human readable message returned to the caller
        """
        super().__init__(message)
        self.message = message


class InputValidationError(MenuServiceError):
    """Required input is missing or malformed."""

    status_code = 400


class NotFoundError(MenuServiceError):
    """A referenced entity does not exist."""

    status_code = 404


class UpstreamQueryError(MenuServiceError):
    """The relational store call failed or returned an error."""

    status_code = 500


class ExternalServiceError(MenuServiceError):
    """An external service is misconfigured or unavailable."""

    status_code = 500


class TranslationError(ExternalServiceError):
    """The translation service rejected or failed the request."""

    status_code = 400
