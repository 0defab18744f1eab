class ServiceError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(ServiceError):
    """Referenced subscription or undo slot does not exist."""
    status_code = 404


class ForbiddenError(ServiceError):
    """Caller does not own the referenced subscription."""
    status_code = 403


class BadRequestError(ServiceError):
    """Malformed input or expired undo slot."""
    status_code = 400


class InternalError(ServiceError):
    """A store write failed for an otherwise valid id."""
    status_code = 500
