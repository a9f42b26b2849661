"""Exception hierarchy for eventform.

Validation failures are not exceptions: the validation engine returns
structured results. These errors cover programming mistakes and data
source failures.
"""


class EventFormError(Exception):
    """Base exception for all eventform errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class UnknownFieldError(EventFormError):
    """Raised when a strict lookup names a field the form does not define.

    Mutating operations on the store never raise this; they log a warning
    and return False instead.
    """

    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown field: {key}")
        self.key = key


class DataSourceExhaustedError(EventFormError):
    """Raised when every candidate URL for a resource failed."""

    def __init__(
        self,
        resource: str,
        attempts: dict[str, str] | None = None,
        last_error: Exception | None = None,
    ) -> None:
        if attempts:
            message = (
                f"All {len(attempts)} data sources failed for '{resource}'"
            )
        else:
            message = f"No data source succeeded for '{resource}'"
        super().__init__(message, cause=last_error)
        self.resource = resource
        self.attempts = attempts or {}
        self.last_error = last_error


class DatasetFormatError(EventFormError):
    """Raised when a dataset payload has none of the supported shapes."""

    def __init__(self, resource: str, detail: str) -> None:
        super().__init__(f"Unrecognized '{resource}' dataset: {detail}")
        self.resource = resource
