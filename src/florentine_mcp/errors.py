"""Mapping of failures to the diagnostic errors returned to the MCP client.

Only the first violation of a ``ValidationError`` decides the error code.
Rules are tried in order:

1. ``mode`` missing or of the wrong type -> ``MODE_MISSING``
2. ``mode`` not one of the allowed values -> ``MODE_INVALID``
3. ``llmKey`` violation mentioning ``"llmService"`` -> ``LLM_KEY_WITHOUT_SERVICE``
4. ``llmService`` violation mentioning ``"llmKey"`` -> ``LLM_SERVICE_WITHOUT_KEY``
5. ``florentineToken`` missing -> ``NO_TOKEN``
6. anything else -> ``INVALID_INPUT`` with a message built from the field
   path and the kind of failure

Any other exception becomes ``UNKNOWN_ERROR``.
"""

from enum import Enum

from pydantic import ValidationError
from pydantic_core import ErrorDetails

from florentine_mcp.logging import get_logger
from florentine_mcp.models import DiagnosticError, ErrorResponse

logger = get_logger("errors")

VALIDATION_ERROR_NAME = "FlorentineApiError"
UNKNOWN_ERROR_NAME = "FlorentineUnknownError"
LOCAL_REQUEST_ID = "local"

MODE_MISSING_MESSAGE = 'Missing mode argument. Use --mode <mode> to specify "static" or "dynamic".'
MODE_INVALID_MESSAGE = 'Invalid mode argument. Please specify "static" or "dynamic" for --mode.'
NO_TOKEN_MESSAGE = (
    "Please provide your Florentine API key. You can find it in your account settings: "
    "https://florentine.ai/settings"
)
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class ErrorCode(str, Enum):
    MODE_MISSING = "MODE_MISSING"
    MODE_INVALID = "MODE_INVALID"
    NO_TOKEN = "NO_TOKEN"
    LLM_KEY_WITHOUT_SERVICE = "LLM_KEY_WITHOUT_SERVICE"
    LLM_SERVICE_WITHOUT_KEY = "LLM_SERVICE_WITHOUT_KEY"
    INVALID_INPUT = "INVALID_INPUT"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class FailureKind(str, Enum):
    MISSING = "missing"
    TYPE = "type"
    ENUM = "enum"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    CUSTOM = "custom"
    OTHER = "other"


_ENUM_ERRORS = {"literal_error", "enum"}
_TOO_SHORT_ERRORS = {"too_short", "string_too_short"}
_TOO_LONG_ERRORS = {"too_long", "string_too_long"}
_CUSTOM_ERRORS = {
    "value_error",
    "assertion_error",
    "llm_pair",
    "collections_without_database",
    "invalid_required_value",
    "partial_aggregation",
    "empty_response",
}
_EXPECTED_TYPES = {
    "string": "string",
    "int": "number",
    "float": "number",
    "bool": "boolean",
    "list": "list",
    "dict": "object",
    "model": "object",
    "model_attributes": "object",
}


def failure_kind(error: ErrorDetails) -> FailureKind:
    error_type = error["type"]
    if error_type == "missing":
        return FailureKind.MISSING
    if error_type in _ENUM_ERRORS:
        return FailureKind.ENUM
    if error_type in _TOO_SHORT_ERRORS:
        return FailureKind.TOO_SHORT
    if error_type in _TOO_LONG_ERRORS:
        return FailureKind.TOO_LONG
    if error_type in _CUSTOM_ERRORS:
        return FailureKind.CUSTOM
    if error_type.endswith("_type") or error_type.endswith("_parsing"):
        return FailureKind.TYPE
    return FailureKind.OTHER


def expected_type(error: ErrorDetails) -> str:
    base = error["type"].rsplit("_", 1)[0]
    return _EXPECTED_TYPES.get(base, base)


def violation_path(error: ErrorDetails) -> tuple[int | str, ...]:
    """Location of the violation, including the field a refinement points at."""
    path = tuple(error["loc"])
    field = (error.get("ctx") or {}).get("field")
    if field is not None:
        path = (*path, field)
    return path


def _invalid_input_message(error: ErrorDetails, field: str) -> str:
    kind = failure_kind(error)
    if kind is FailureKind.MISSING:
        return f'"{field}" is required, but missing.'
    if kind is FailureKind.TYPE:
        return f'"{field}" must be a {expected_type(error)}.'
    if kind is FailureKind.ENUM:
        return f'The value for "{field}" is not valid.'
    if kind is FailureKind.TOO_SHORT:
        return f'"{field}" is too short.'
    if kind is FailureKind.TOO_LONG:
        return f'"{field}" is too long.'
    if kind is FailureKind.CUSTOM:
        return f'Problem with "{field}": {error["msg"]}'
    return f'There is a problem with "{field}": {error["msg"]}'


def classify(error: ErrorDetails) -> tuple[ErrorCode, str]:
    """Pick the error code and message for a single violation."""
    path = violation_path(error)
    kind = failure_kind(error)
    message = error["msg"]

    if "mode" in path and kind in (FailureKind.MISSING, FailureKind.TYPE):
        return ErrorCode.MODE_MISSING, MODE_MISSING_MESSAGE
    if "mode" in path and kind is FailureKind.ENUM:
        return ErrorCode.MODE_INVALID, MODE_INVALID_MESSAGE
    if "llmKey" in path and '"llmService"' in message:
        return ErrorCode.LLM_KEY_WITHOUT_SERVICE, message
    if "llmService" in path and '"llmKey"' in message:
        return ErrorCode.LLM_SERVICE_WITHOUT_KEY, message
    if "florentineToken" in path and kind is FailureKind.MISSING:
        return ErrorCode.NO_TOKEN, NO_TOKEN_MESSAGE

    field = ".".join(str(part) for part in path)
    return ErrorCode.INVALID_INPUT, _invalid_input_message(error, field)


def handle_validation_error(err: ValidationError) -> ErrorResponse:
    """Turn a validation failure into a 400 diagnostic error."""
    error_code, message = classify(err.errors()[0])
    return ErrorResponse(
        error=DiagnosticError(
            name=VALIDATION_ERROR_NAME,
            message=message,
            error_code=error_code.value,
            status_code=400,
            request_id=LOCAL_REQUEST_ID,
        )
    )


def unknown_error() -> ErrorResponse:
    return ErrorResponse(
        error=DiagnosticError(
            name=UNKNOWN_ERROR_NAME,
            message=UNKNOWN_ERROR_MESSAGE,
            error_code=ErrorCode.UNKNOWN_ERROR.value,
            status_code=500,
            request_id=LOCAL_REQUEST_ID,
        )
    )


def to_error_response(err: BaseException) -> ErrorResponse:
    """Classify any exception. Never raises."""
    if not isinstance(err, ValidationError):
        return unknown_error()
    try:
        return handle_validation_error(err)
    except Exception as e:
        logger.error(f"Could not classify validation error: {e}")
        return unknown_error()
