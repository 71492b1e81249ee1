"""Error taxonomy shared by the link store and the HTTP layer."""


class LinkError(Exception):
    """Base class for failures reported to API callers."""

    status_code = 500
    message = "Server error"

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(LinkError):
    """Bad target URL or malformed custom code."""

    status_code = 400


class DuplicateCodeError(LinkError):
    """The code is already taken (case-insensitive)."""

    status_code = 400
    message = "Custom code already exists"


class NotFoundError(LinkError):
    """No link matches the requested code."""

    status_code = 404
    message = "Not found"


class StoreError(LinkError):
    """Any other storage failure."""

    status_code = 500
    message = "Server error"
