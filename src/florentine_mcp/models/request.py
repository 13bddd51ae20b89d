from pydantic import Field, model_validator

from florentine_mcp.models.base import LlmService, ReturnType, WireModel, require_llm_pair
from florentine_mcp.models.required_input import RequiredInput


class AskInput(WireModel):
    """Arguments of a single ``florentine_ask`` call.

    Only ``question`` is accepted on the static surface; the overrides are
    filled in by the caller on the dynamic surface.
    """

    question: str = Field(min_length=1)
    session_id: str | None = None
    return_types: list[ReturnType] | None = None
    required_inputs: list[RequiredInput] | None = None


class RequestConfig(WireModel):
    """The effective config sent along with a question."""

    llm_service: LlmService | None = None
    llm_key: str | None = None
    session_id: str | None = None
    return_types: list[ReturnType]
    required_inputs: list[RequiredInput] | None = None

    @model_validator(mode="after")
    def llm_service_and_key(self) -> "RequestConfig":
        require_llm_pair(self.llm_service, self.llm_key)
        return self


class RequestBody(WireModel):
    """Body of ``POST /ask``."""

    question: str = Field(min_length=1)
    config: RequestConfig
