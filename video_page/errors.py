class ListingError(Exception):
    """Base for request failures; carries the status and plain-text body."""

    status_code = 500
    message = "Internal Server Error"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.message)
        self.detail = detail


class AuthorizationError(ListingError):
    status_code = 403
    message = "Forbidden"


class PathEscapeError(ListingError):
    status_code = 403
    message = "Forbidden"


class MalformedPathError(ListingError):
    status_code = 400
    message = "Invalid path"


class EnumerationError(ListingError):
    status_code = 500
    message = "Failed to read directory"


class RenderError(ListingError):
    status_code = 500
    message = "Failed to render listing"


class AddressDiscoveryError(Exception):
    """The interface address query failed."""
