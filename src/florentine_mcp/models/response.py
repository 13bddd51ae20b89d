"""Models for what comes back from the Florentine API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import model_validator

from florentine_mcp.models.base import WireModel, refinement_error

AGGREGATION_FIELDS = ("confidence", "database", "collection", "aggregation")


class AskResponse(WireModel):
    """Answer to a question.

    At least one of three groups must be present: the aggregation group
    (``confidence``, ``database``, ``collection`` and ``aggregation`` together),
    ``result``, or ``answer``. The groups may be combined freely, but the
    aggregation group is all or nothing.
    """

    confidence: float | None = None
    database: str | None = None
    collection: str | None = None
    aggregation: str | None = None
    result: Any = None
    answer: str | None = None

    @model_validator(mode="after")
    def one_complete_group(self) -> AskResponse:
        present = [name for name in AGGREGATION_FIELDS if getattr(self, name) is not None]
        if present and len(present) < len(AGGREGATION_FIELDS):
            missing = [name for name in AGGREGATION_FIELDS if name not in present]
            raise refinement_error(
                "partial_aggregation",
                missing[0],
                "Aggregation fields must all be present together. "
                f"Missing: {', '.join(missing)}.",
            )
        if not present and self.result is None and self.answer is None:
            raise refinement_error(
                "empty_response",
                "answer",
                "At least one option must be present: "
                "(confidence + database + collection + aggregation), result, or answer.",
            )
        return self


class CollectionStructure(WireModel):
    key_path: str | None = None
    type_of_values: str | None = None
    children: list[CollectionStructure] | None = None


class KeyPathMapping(WireModel):
    key_path: str
    collection_name: str


class UserCollectionStructure(WireModel):
    collection_name: str
    summary: str
    mappings: list[KeyPathMapping] | None = None
    structure: list[CollectionStructure]


class CollectionSummary(WireModel):
    db_name: str
    instance_type: Literal["atlas", "self-deployed"]
    collections: list[UserCollectionStructure]


class ListCollectionsResponse(WireModel):
    summaries: list[CollectionSummary]


class DiagnosticError(WireModel):
    name: str
    message: str
    error_code: str
    status_code: int
    request_id: str


class ErrorResponse(WireModel):
    """Error envelope used both by the API and for locally produced errors."""

    error: DiagnosticError
