from . import models
from .client import FlorentineClient
from .errors import handle_validation_error, to_error_response, unknown_error
from .merge import merge_configs
from .server import FlorentineServer, create_server
from .tool_surface import ToolSurface

__all__ = [
    "FlorentineClient",
    "FlorentineServer",
    "ToolSurface",
    "create_server",
    "handle_validation_error",
    "merge_configs",
    "to_error_response",
    "unknown_error",
    "models",
]
