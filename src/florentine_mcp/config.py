"""Loading of the static configuration from launch arguments and environment.

Unset and empty values are dropped before validation, so an absent setting is
always reported as missing rather than as an empty string.
"""

import os
from collections.abc import Mapping
from typing import Any

from florentine_mcp.models import ArgsConfig, EnvConfig, FlorentineConfig

ENV_VARIABLES = {
    "florentineToken": "FLORENTINE_TOKEN",
    "llmService": "LLM_SERVICE",
    "llmKey": "LLM_KEY",
    "sessionId": "SESSION_ID",
    "requiredInputs": "REQUIRED_INPUTS",
    "returnTypes": "RETURN_TYPES",
}


def _present(values: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value not in (None, "")}


def load_args_config(
    mode: str | None = None,
    debug: str | None = None,
    logpath: str | None = None,
) -> ArgsConfig:
    return ArgsConfig.model_validate(_present({"mode": mode, "debug": debug, "logpath": logpath}))


def load_env_config(environ: Mapping[str, str] | None = None) -> EnvConfig:
    if environ is None:
        environ = os.environ
    return EnvConfig.model_validate(
        _present({field: environ.get(name) for field, name in ENV_VARIABLES.items()})
    )


def load_static_config(
    args_config: ArgsConfig,
    environ: Mapping[str, str] | None = None,
) -> FlorentineConfig:
    """Validate the environment layer and combine it with the launch arguments.

    Raises:
        pydantic.ValidationError: If the environment layer is invalid.
    """
    env_config = load_env_config(environ)
    return FlorentineConfig.model_validate(
        {
            **args_config.model_dump(by_alias=True, exclude_none=True),
            **env_config.model_dump(by_alias=True, exclude_none=True),
        }
    )
