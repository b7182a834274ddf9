"""Error types raised while talking to the TMDB API."""
from __future__ import annotations

import logging
from enum import Enum

import httpx

from movie_feed.core.logging import get_logger

logger = get_logger("infrastructure.tmdb")


class TmdbErrorKind(Enum):
    """Documented TMDB v3 status codes as ``(code, http status, message)``."""

    SUCCESS = (1, 200, "Success.")
    INVALID_SERVICE = (2, 501, "Invalid service: this service does not exist.")
    INSUFFICIENT_PERMISSION = (3, 401, "Authentication failed: You do not have permissions to access the service.")
    INVALID_FORMAT = (4, 405, "Invalid format: This service doesn't exist in that format.")
    INVALID_PARAMETERS = (5, 422, "Invalid parameters: Your request parameters are incorrect.")
    INVALID_ID = (6, 404, "Invalid id: The pre-requisite id is invalid or not found.")
    INVALID_API_KEY = (7, 401, "Invalid API key: You must be granted a valid key.")
    DUPLICATE_ENTRY = (8, 403, "Duplicate entry: The data you tried to submit already exists.")
    SERVICE_OFFLINE = (9, 503, "Service offline: This service is temporarily offline, try again later.")
    SUSPENDED_API_KEY = (10, 401, "Suspended API key: Access to your account has been suspended, contact TMDB.")
    INTERNAL_ERROR = (11, 500, "Internal error: Something went wrong, contact TMDB.")
    ITEM_UPDATE_SUCCESS = (12, 201, "The item/record was updated successfully.")
    ITEM_DELETE_SUCCESS = (13, 200, "The item/record was deleted successfully.")
    AUTHENTICATION_FAILED = (14, 401, "Authentication failed.")
    FAILED = (15, 500, "Failed.")
    DEVICE_DENIED = (16, 401, "Device denied.")
    SESSION_DENIED = (17, 401, "Session denied.")
    VALIDATION_FAILED = (18, 400, "Validation failed.")
    INVALID_ACCEPT_HEADER = (19, 406, "Invalid accept header.")
    INVALID_DATE_RANGE = (20, 422, "Invalid date range: Should be a range no longer than 14 days.")
    ENTRY_NOT_FOUND = (21, 200, "Entry not found: The item you are trying to edit cannot be found.")
    INVALID_PAGE = (22, 400, "Invalid page: Pages start at 1 and max at 500. They are expected to be an integer.")
    INVALID_DATE = (23, 400, "Invalid date: Format needs to be YYYY-MM-DD.")
    TIMED_OUT = (24, 504, "Your request to the backend server timed out. Try again.")
    RATE_LIMITED = (25, 429, "Your request count (#) is over the allowed limit of (40).")
    USER_AND_PASS_REQUIRED = (26, 400, "You must provide a username and password.")
    TOO_MANY_RESPONSE_OBJECTS = (
        27,
        400,
        "Too many append to response objects: The maximum number of remote calls is 20.",
    )
    INVALID_TIMEZONE = (28, 400, "Invalid timezone: Please consult the documentation for a valid timezone.")
    REQUIRES_CONFIRMATION = (29, 400, "You must confirm this action: Please provide a confirm=true parameter.")
    INVALID_USER_OR_PASS = (30, 401, "Invalid username and/or password: You did not provide a valid login.")
    ACCOUNT_DISABLED = (
        31,
        401,
        "Account disabled: Your account is no longer active. Contact TMDB if this is an error.",
    )
    EMAIL_NOT_VERIFIED = (32, 401, "Email not verified: Your email address has not been verified.")
    INVALID_REQUEST_TOKEN = (33, 401, "Invalid request token: The request token is either expired or invalid.")
    RESOURCE_NOT_FOUND = (34, 404, "The resource you requested could not be found.")
    INVALID_TOKEN = (35, 401, "Invalid token.")
    TOKEN_REQUIRES_WRITE_PERMISSION = (36, 401, "This token hasn't been granted write permission by the user.")
    INVALID_SESSION = (37, 404, "The requested session could not be found.")
    REQUIRES_EDIT_PERMISSION = (38, 401, "You don't have permission to edit this resource.")
    PRIVATE = (39, 401, "This resource is private.")
    NOTHING_TO_UPDATE = (40, 200, "Nothing to update.")
    TOKEN_NOT_APPROVED = (41, 422, "This request token hasn't been approved by the user.")
    METHOD_NOT_SUPPORTED = (42, 405, "This request method is not supported for this resource.")
    NO_BACKEND_CONNECTION = (43, 502, "Couldn't connect to the backend server.")
    OTHER_INVALID_ID = (44, 500, "The ID is invalid.")
    USER_SUSPENDED = (45, 403, "This user has been suspended.")
    MAINTENANCE = (46, 503, "The API is undergoing maintenance. Try again later.")
    INVALID_INPUT = (47, 400, "The input is not valid.")

    def __init__(self, code: int, status: int, message: str) -> None:
        self.code = code
        self.status = status
        self.message = message

    @classmethod
    def lookup(cls, status: int, code: int) -> "TmdbErrorKind":
        """Return the kind matching both ``code`` and ``status``.

        Raises :class:`UnknownTmdbError` when the pair is not documented.
        """

        kind = _BY_CODE.get(code)
        if kind is None or kind.status != status:
            raise UnknownTmdbError(status, code)
        return kind

    @classmethod
    def is_known_status(cls, status: int) -> bool:
        return status in _KNOWN_STATUSES

    @property
    def log_level(self) -> int | None:
        """Severity used when this error is surfaced to a client, ``None`` for success codes."""

        if self in _SILENT_KINDS:
            return None
        if self in _SEVERE_KINDS:
            return logging.ERROR
        return logging.WARNING


_BY_CODE: dict[int, TmdbErrorKind] = {kind.code: kind for kind in TmdbErrorKind}
_KNOWN_STATUSES: frozenset[int] = frozenset(kind.status for kind in TmdbErrorKind)

_SILENT_KINDS = frozenset(
    {
        TmdbErrorKind.SUCCESS,
        TmdbErrorKind.ITEM_UPDATE_SUCCESS,
        TmdbErrorKind.ITEM_DELETE_SUCCESS,
    }
)

# service or credential faults that need an operator's attention
_SEVERE_KINDS = frozenset(
    {
        TmdbErrorKind.INVALID_SERVICE,
        TmdbErrorKind.INSUFFICIENT_PERMISSION,
        TmdbErrorKind.INVALID_FORMAT,
        TmdbErrorKind.INVALID_API_KEY,
        TmdbErrorKind.SERVICE_OFFLINE,
        TmdbErrorKind.SUSPENDED_API_KEY,
        TmdbErrorKind.INTERNAL_ERROR,
        TmdbErrorKind.AUTHENTICATION_FAILED,
        TmdbErrorKind.DEVICE_DENIED,
        TmdbErrorKind.SESSION_DENIED,
        TmdbErrorKind.INVALID_ACCEPT_HEADER,
        TmdbErrorKind.USER_AND_PASS_REQUIRED,
        TmdbErrorKind.INVALID_USER_OR_PASS,
        TmdbErrorKind.ACCOUNT_DISABLED,
        TmdbErrorKind.EMAIL_NOT_VERIFIED,
        TmdbErrorKind.INVALID_REQUEST_TOKEN,
        TmdbErrorKind.INVALID_TOKEN,
        TmdbErrorKind.TOKEN_REQUIRES_WRITE_PERMISSION,
        TmdbErrorKind.INVALID_SESSION,
        TmdbErrorKind.REQUIRES_EDIT_PERMISSION,
        TmdbErrorKind.PRIVATE,
        TmdbErrorKind.TOKEN_NOT_APPROVED,
        TmdbErrorKind.METHOD_NOT_SUPPORTED,
        TmdbErrorKind.NO_BACKEND_CONNECTION,
        TmdbErrorKind.USER_SUSPENDED,
        TmdbErrorKind.MAINTENANCE,
    }
)


class RequestError(RuntimeError):
    """Base class for failures while requesting data from TMDB."""


class TmdbTransportError(RequestError):
    """Raised when TMDB cannot be reached or returns an unreadable body."""


class TmdbError(RequestError):
    """Raised when TMDB answers with one of its documented error codes."""

    def __init__(self, kind: TmdbErrorKind) -> None:
        super().__init__(f"tmdb error: {kind.message}")
        self.kind = kind

    @property
    def status_code(self) -> int:
        return self.kind.status

    @property
    def message(self) -> str:
        return self.kind.message


class UnknownTmdbError(RequestError):
    """Raised for non-200 responses that do not match the documented error table."""

    def __init__(self, status_code: int, tmdb_code: int | None = None) -> None:
        self.status_code = status_code
        self.tmdb_code = tmdb_code
        if tmdb_code is None:
            detail = f"unknown status code: {status_code}"
        else:
            detail = f"unknown tmdb error {{status_code: {status_code}, tmdb_code: {tmdb_code}}}"
        super().__init__(f"unknown tmdb error: {detail}")


def error_from_response(response: httpx.Response) -> RequestError:
    """Translate a non-200 TMDB response into the matching error."""

    status = response.status_code
    if not TmdbErrorKind.is_known_status(status):
        return UnknownTmdbError(status)

    try:
        code = int(response.json()["status_code"])
    except (ValueError, KeyError, TypeError) as exc:
        logger.warning("unable to extract error data: %s", exc)
        return UnknownTmdbError(status)

    try:
        return TmdbError(TmdbErrorKind.lookup(status, code))
    except UnknownTmdbError as exc:
        return exc


__all__ = [
    "RequestError",
    "TmdbError",
    "TmdbErrorKind",
    "TmdbTransportError",
    "UnknownTmdbError",
    "error_from_response",
]
