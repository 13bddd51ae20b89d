import json
from typing import Any, Literal

from pydantic import ConfigDict, Field, field_validator, model_validator

from florentine_mcp.models.base import LlmService, ReturnType, WireModel, require_llm_pair
from florentine_mcp.models.required_input import RequiredInput

Mode = Literal["static", "dynamic"]


class ArgsConfig(WireModel):
    """Launch arguments (``--mode``, ``--debug``, ``--logpath``)."""

    mode: Mode = Field(description='The mode to run the MCP server in (must be "static" or "dynamic")')
    debug: Literal["true", "false"] | None = Field(
        default=None, description="Enable debug mode for logging"
    )
    logpath: str | None = Field(default=None, description="The absolute path to the debug log file")

    @property
    def debug_enabled(self) -> bool:
        return self.debug == "true"


class EnvConfig(WireModel):
    """Settings taken from the process environment.

    ``requiredInputs`` and ``returnTypes`` may be given as JSON text, which is
    how they arrive from environment variables.
    """

    florentine_token: str = Field(
        min_length=1,
        description="Your Florentine API key, get it from https://florentine.ai/settings",
    )
    llm_service: LlmService | None = Field(
        default=None,
        description='The LLM service to use, must be one of: "openai", "anthropic", "google", or "deepseek"',
    )
    llm_key: str | None = Field(default=None, description="Your API key for the chosen LLM service")
    session_id: str | None = Field(
        default=None, description="An optional session ID for server side chat history"
    )
    required_inputs: list[RequiredInput] = Field(
        default_factory=list,
        description="Required input objects specifying key paths and their expected values",
    )
    return_types: list[ReturnType] = Field(
        default_factory=list,
        description='Response types to return, any combination of: "aggregation", "result", "answer"',
    )

    @field_validator("required_inputs", "return_types", mode="before")
    @classmethod
    def decode_json(cls, value: Any) -> Any:
        if isinstance(value, str):
            return json.loads(value)
        return value

    @model_validator(mode="after")
    def llm_service_and_key(self) -> "EnvConfig":
        require_llm_pair(self.llm_service, self.llm_key)
        return self


class FlorentineConfig(EnvConfig, ArgsConfig):
    """The static configuration, resolved once at startup from args and env."""

    model_config = ConfigDict(frozen=True)
