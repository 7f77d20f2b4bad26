"""Alert configuration errors.

All errors are recoverable and are meant to be shown to the user so the
input can be corrected. They subclass ``ValueError`` so callers that only
care about "the request was invalid" can keep catching that.
"""

from fastapi import HTTPException, status


class AlertConfigError(ValueError):
    """Base exception for alert configuration errors."""

    pass


class NotFoundError(AlertConfigError):
    """Referenced alert type or alert entry does not exist."""

    pass


class DuplicateNameError(AlertConfigError):
    """Another alert type already uses this name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"An alert type named '{name}' already exists")


class InUseError(AlertConfigError):
    """Alert type is still referenced by alert entries."""

    def __init__(self, name: str, reference_count: int):
        self.name = name
        self.reference_count = reference_count
        super().__init__(
            f"Alert type '{name}' is used by {reference_count} alert "
            f"{'entry' if reference_count == 1 else 'entries'}"
        )


class UnknownKindError(AlertConfigError):
    """Alert kind code is not in the catalog."""

    def __init__(self, code: int):
        self.code = code
        super().__init__(f"Unknown alert kind: {code}")


class OutOfBoundsError(AlertConfigError):
    """Start time falls outside the allowed window."""

    def __init__(self, start: int, minimum_start: int, maximum_start: int):
        self.start = start
        self.minimum_start = minimum_start
        self.maximum_start = maximum_start
        super().__init__(
            f"Start {start} must be between {minimum_start} and {maximum_start}"
        )


class ValueOutOfRangeError(AlertConfigError):
    """Threshold value does not fit the stored range."""

    def __init__(self, value: int, minimum: int, maximum: int):
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(f"Value {value} must be between {minimum} and {maximum}")


class IsDefaultEntryError(AlertConfigError):
    """The start-0 entry cannot be moved or deleted."""

    pass


class KindHasNoValueError(AlertConfigError):
    """Alert kind does not take a threshold value."""

    def __init__(self, code: int):
        self.code = code
        super().__init__(f"Alert kind {code} does not take a value")


class OverlapError(AlertConfigError):
    """Another entry of the same kind already starts at this minute."""

    def __init__(self, start: int):
        self.start = start
        super().__init__(f"An alert entry starting at minute {start} already exists")


class SessionClosedError(AlertConfigError):
    """Editing session was already committed or discarded."""

    pass


_STATUS_BY_ERROR: dict[type[AlertConfigError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateNameError: status.HTTP_409_CONFLICT,
    InUseError: status.HTTP_409_CONFLICT,
    OverlapError: status.HTTP_409_CONFLICT,
}


def to_http_exception(exc: AlertConfigError) -> HTTPException:
    """Map an alert configuration error to the HTTP error returned for it.

    Conflicts with stored data are 409, missing records 404, anything
    else is invalid input (422).
    """
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=str(exc),
    )
