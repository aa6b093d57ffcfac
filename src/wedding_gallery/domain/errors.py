"""Error taxonomy shared by services and the HTTP layer."""

from http import HTTPStatus


class GalleryError(Exception):
    """Base error carrying a client-safe message and an HTTP status."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(GalleryError):
    """Section or provider configuration is missing or malformed."""

    default_message = "Gallery is not configured"


class InvalidRequestError(GalleryError):
    """Request is missing required fields or has the wrong shape."""

    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(GalleryError):
    """Submitted passphrase did not match."""

    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "Invalid passphrase"


class AuthorizationError(GalleryError):
    """Session lacks the section grant or a path escapes the section folder."""

    status_code = HTTPStatus.FORBIDDEN
    default_message = "Unauthorized access to this section"


class SectionNotFoundError(GalleryError):
    """Section id is not in the registry."""

    status_code = HTTPStatus.NOT_FOUND
    default_message = "Section not found"


class UpstreamError(GalleryError):
    """Storage provider call failed."""

    default_message = "Storage provider request failed"


class SessionPersistenceError(GalleryError):
    """Session could not be saved or destroyed."""

    default_message = "Session could not be saved"
