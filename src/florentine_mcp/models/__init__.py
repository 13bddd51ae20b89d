from .base import LlmService, ReturnType
from .config import ArgsConfig, EnvConfig, FlorentineConfig, Mode
from .request import AskInput, RequestBody, RequestConfig
from .required_input import InFilter, RequiredInput
from .response import (
    AskResponse,
    CollectionSummary,
    DiagnosticError,
    ErrorResponse,
    ListCollectionsResponse,
)

__all__ = [
    "LlmService",
    "ReturnType",
    "Mode",
    "ArgsConfig",
    "EnvConfig",
    "FlorentineConfig",
    "AskInput",
    "RequestBody",
    "RequestConfig",
    "InFilter",
    "RequiredInput",
    "AskResponse",
    "CollectionSummary",
    "DiagnosticError",
    "ErrorResponse",
    "ListCollectionsResponse",
]
