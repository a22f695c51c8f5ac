"""
Error taxonomy and remote error classification.

The remote API is not consistent about how it reports "missing" and
"already there": sometimes a structured code, sometimes only an HTTP status,
sometimes just a message. ``classify_error`` is the single place that knows
those shapes.
"""
from enum import Enum
from typing import Any, Dict, Optional


class DeployError(RuntimeError):
    """Base class for deployment failures."""


class ValidationError(DeployError):
    """Missing or invalid input; raised before any work starts."""


class InvalidSourceError(DeployError):
    """Local source path is neither a regular file nor a directory."""


class PathConflictError(DeployError):
    """Remote path exists but is not a directory."""


class DirectoryCreationError(DeployError):
    """Remote directory still missing (or wrong type) after creation."""


class RemoteAPIError(DeployError):
    """Failure reported by the remote API."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status: Optional[int] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.payload = payload

    def __str__(self) -> str:
        parts = [self.message]
        if self.code:
            parts.append(f"code={self.code}")
        if self.status is not None:
            parts.append(f"status={self.status}")
        return " ".join(parts)


class ErrorKind(Enum):
    """Classification of a remote failure."""
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    OTHER = "other"


NOT_FOUND_CODES = frozenset({"entity_not_found", "not_found", "subject_does_not_exist"})
ALREADY_EXISTS_CODES = frozenset({
    "already_exists",
    "entity_exists",
    "file_exists",
    "exists",
    "directory_exists",
    "item_with_same_name_exists",
})
NOT_FOUND_MESSAGES = ("not found", "no entry found", "does not exist")
ALREADY_EXISTS_MESSAGES = ("already exists",)


def _nested(error: Any) -> Dict[str, Any]:
    """Return the ``error`` sub-object of an exception or payload, if any."""
    inner = error.get("error") if isinstance(error, dict) else getattr(error, "error", None)
    if inner is None and isinstance(error, RemoteAPIError) and isinstance(error.payload, dict):
        inner = error.payload.get("error")
    return inner if isinstance(inner, dict) else {}


def _field(error: Any, name: str) -> Any:
    inner = _nested(error)
    if inner.get(name) is not None:
        return inner[name]
    if isinstance(error, dict):
        return error.get(name)
    return getattr(error, name, None)


def _message_text(error: Any) -> str:
    parts = [_nested(error).get("message")]
    if isinstance(error, dict):
        parts.append(error.get("message"))
    elif isinstance(error, str):
        parts.append(error)
    else:
        parts.append(getattr(error, "message", None))
        if isinstance(error, BaseException):
            parts.extend(str(arg) for arg in error.args)
    return " ".join(str(p) for p in parts if p).lower()


def classify_error(error: Any) -> ErrorKind:
    """
    Classify a remote failure.

    Heuristics, first match wins:
      1. structured code (``code`` on the error or its nested ``error``
         object), compared case-insensitively against the known code sets;
      2. HTTP status 404 means not found;
      3. case-insensitive message substrings.

    Works on exceptions, raw error payloads (dicts) and plain strings.
    """
    code = _field(error, "code")
    if code:
        code = str(code).lower()
        if code in NOT_FOUND_CODES:
            return ErrorKind.NOT_FOUND
        if code in ALREADY_EXISTS_CODES:
            return ErrorKind.ALREADY_EXISTS

    if _field(error, "status") == 404:
        return ErrorKind.NOT_FOUND

    message = _message_text(error)
    if any(marker in message for marker in NOT_FOUND_MESSAGES):
        return ErrorKind.NOT_FOUND
    if any(marker in message for marker in ALREADY_EXISTS_MESSAGES):
        return ErrorKind.ALREADY_EXISTS
    return ErrorKind.OTHER


def is_not_found(error: Any) -> bool:
    return classify_error(error) is ErrorKind.NOT_FOUND


def is_already_exists(error: Any) -> bool:
    return classify_error(error) is ErrorKind.ALREADY_EXISTS
