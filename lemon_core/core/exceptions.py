__all__ = [
    "BaseError",
    "BadRequestError",
    "ConflictError",
    "InternalError",
    "NotFoundError",
    "NotSupportedError",
    "PreconditionFailedError",
    "error_from_status",
]


class BaseError(Exception):
    status_code: int

    @property
    def message(self) -> str:
        return str(self)


class BadRequestError(BaseError):
    status_code = 400


class NotFoundError(BaseError):
    status_code = 404


class ConflictError(BaseError):
    status_code = 409


class PreconditionFailedError(BaseError):
    status_code = 412


class NotSupportedError(BaseError):
    status_code = 415


class InternalError(BaseError):
    status_code = 500


_STATUS_ERRORS: dict[int, type[BaseError]] = {
    400: BadRequestError,
    404: NotFoundError,
    409: ConflictError,
    412: PreconditionFailedError,
    415: NotSupportedError,
}


def error_from_status(status: int, message: str) -> BaseError:
    """Create the error matching the status code.

    The message is kept as is, so it should already carry the
    "<status> <TYPE> - <detail>" prefix callers match on.
    """
    error_class = _STATUS_ERRORS.get(status, InternalError)
    error = error_class(message)
    if error_class is InternalError and status:
        error.status_code = status
    return error
