"""Selection of the tool surface exposed to the calling agent.

The ``--mode`` launch argument picks one of two surfaces once, at startup:

- ``AUTO`` (``static`` mode): ``florentine_ask`` takes only ``question``;
  everything else comes from the operator's configuration.
- ``MANUAL`` (``dynamic`` mode): ``florentine_ask`` also takes ``sessionId``,
  ``returnTypes`` and ``requiredInputs``, which are merged over the
  operator's configuration on every call.

``florentine_list_collections`` is part of both surfaces.
"""

from enum import Enum
from typing import NamedTuple

from florentine_mcp.models import Mode, ReturnType

ASK_TOOL = "florentine_ask"
LIST_COLLECTIONS_TOOL = "florentine_list_collections"

ASK_DESCRIPTION = (
    "Creates an aggregation, executes it and returns the resulting data from a MongoDB "
    "database for a question asked by the user. It can handle complex questions that "
    "require multiple steps, such as filtering, grouping, and sorting data. You should try "
    "to put as much information as possible in the question. Only do query decomposition "
    "if you are sure that the question is too complex for a single aggregation."
)

MANUAL_ASK_NOTE = (
    "IMPORTANT: Only provide the 'question' parameter. All other parameters (sessionId, "
    "requiredInputs, returnTypes) are automatically configured by the client and should "
    "NOT be provided."
)

LIST_COLLECTIONS_DESCRIPTION = (
    "Used internally to fetch metadata (name, summary, structure) of database collections "
    '**only when needed** to help answer a question via the "ask" tool. Should not be used alone.'
)


class ToolSurface(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"


# The two surfaces fall back to different return types when none are configured.
DEFAULT_RETURN_TYPES: dict[ToolSurface, list[ReturnType]] = {
    ToolSurface.AUTO: ["answer"],
    ToolSurface.MANUAL: ["result"],
}


class ToolSpec(NamedTuple):
    """Descriptor of one tool exposed on a surface.

    Attributes:
        name: Tool name registered with the MCP server.
        title: Human-readable title.
        description: Description sent to the calling agent.
        accepts_overrides: Whether the tool takes the ``sessionId``,
            ``returnTypes`` and ``requiredInputs`` overrides.
    """

    name: str
    title: str
    description: str
    accepts_overrides: bool = False


def surface_for_mode(mode: Mode) -> ToolSurface:
    if mode == "static":
        return ToolSurface.AUTO
    if mode == "dynamic":
        return ToolSurface.MANUAL
    raise ValueError(f"Unknown mode: {mode!r}")


def exposed_tools(surface: ToolSurface) -> list[ToolSpec]:
    """Return the tools exposed on ``surface``, list collections first."""
    tools = [
        ToolSpec(
            name=LIST_COLLECTIONS_TOOL,
            title="Florentine List Collections",
            description=LIST_COLLECTIONS_DESCRIPTION,
        )
    ]
    if surface is ToolSurface.MANUAL:
        tools.append(
            ToolSpec(
                name=ASK_TOOL,
                title="Florentine Ask",
                description=f"{ASK_DESCRIPTION}\n{MANUAL_ASK_NOTE}",
                accepts_overrides=True,
            )
        )
    else:
        tools.append(ToolSpec(name=ASK_TOOL, title="Florentine Ask", description=ASK_DESCRIPTION))
    return tools
