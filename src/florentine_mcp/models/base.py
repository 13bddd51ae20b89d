"""Shared pieces for the wire models.

Every model validates and serialises with camelCase aliases, so validation
errors report the same field names the Florentine API and the MCP client use.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

LlmService = Literal["openai", "deepseek", "google", "anthropic"]
ReturnType = Literal["aggregation", "result", "answer"]

LLM_PAIR_MESSAGE = "llmService and llmKey must both be present or both be absent"


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def refinement_error(error_type: str, field: str, message: str) -> PydanticCustomError:
    """Build a cross-field violation that points at ``field``.

    Model-level validators report an empty location, so the offending field
    travels in the error context and is appended to the path on classification.
    """
    return PydanticCustomError(error_type, message, {"field": field})


def require_llm_pair(llm_service: str | None, llm_key: str | None) -> None:
    """Reject an LLM key without a service, or a service without a key."""
    if llm_key is not None and llm_service is None:
        raise refinement_error(
            "llm_pair",
            "llmKey",
            f'"llmKey" was provided without "llmService". {LLM_PAIR_MESSAGE}',
        )
    if llm_service is not None and llm_key is None:
        raise refinement_error(
            "llm_pair",
            "llmService",
            f'"llmService" was provided without "llmKey". {LLM_PAIR_MESSAGE}',
        )
