"""
Application exception types.

Services raise these exceptions and the handlers registered in
``core.error_handlers`` translate them into HTTP responses.  Database
faults are not wrapped: any ``sqlite3.Error`` escaping a service is
answered with a generic server error.
"""

from dataclasses import dataclass
from typing import List


@dataclass
class FieldError:
    """A single violated rule on a request field."""

    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class ProfileAPIError(Exception):
    """Base class for errors reported to API clients."""

    status_code = 400


class RequestValidationFailed(ProfileAPIError):
    """Client supplied data that fails the declared field rules."""

    def __init__(self, errors: List[FieldError]):
        super().__init__(", ".join(e.message for e in errors))
        self.errors = errors


class NotFoundError(ProfileAPIError):
    """The requested resource does not exist.

    Profile lookups report it with status 400 and a ``msg`` body;
    lookups against external services pass ``status_code=404``.
    """

    def __init__(self, msg: str, status_code: int = 400):
        super().__init__(msg)
        self.msg = msg
        self.status_code = status_code
