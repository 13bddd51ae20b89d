import json
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import BaseModel, Field, ValidationError

from florentine_mcp.client import FlorentineClient
from florentine_mcp.errors import handle_validation_error, to_error_response
from florentine_mcp.logging import configure_logging, format_data, get_logger
from florentine_mcp.merge import merge_configs
from florentine_mcp.models import (
    AskInput,
    AskResponse,
    ErrorResponse,
    FlorentineConfig,
    ListCollectionsResponse,
    RequestBody,
)
from florentine_mcp.tool_surface import (
    LIST_COLLECTIONS_TOOL,
    ToolSpec,
    exposed_tools,
    surface_for_mode,
)

logger = get_logger("server")

SERVER_NAME = "florentine"
SERVER_VERSION = "0.1.5"

Question = Annotated[str, Field(description="The question to answer from the database")]
SessionIdArg = Annotated[
    str | None,
    Field(description="Session ID for server side chat history. Replaces the configured one."),
]
ReturnTypesArg = Annotated[
    list[str] | None,
    Field(
        description=(
            'Any of "aggregation", "result" and "answer". '
            "Added to the configured return types."
        )
    ),
]
RequiredInputsArg = Annotated[
    list[dict[str, Any]] | None,
    Field(
        description=(
            'Objects with "keyPath" and "value", optionally scoped with "database" '
            'and "collections". "value" is a string, number, boolean or {"$in": [...]}. '
            "Added to the configured required inputs."
        )
    ),
]


class FlorentineServer:
    """Florentine tools on top of a FastMCP server.

    The static config is fixed at construction. Tools are registered once by
    ``initialize``; which ``florentine_ask`` variant is registered depends on
    the configured mode.
    """

    def __init__(
        self,
        florentine_config: FlorentineConfig,
        client: FlorentineClient | None = None,
    ):
        self.florentine_config = florentine_config
        self.surface = surface_for_mode(florentine_config.mode)
        self.client = client or FlorentineClient(florentine_config.florentine_token)
        self.server = FastMCP(name=SERVER_NAME, version=SERVER_VERSION, lifespan=self._lifespan)
        self.is_initialized = False

    @asynccontextmanager
    async def _lifespan(self, server: FastMCP) -> AsyncIterator[dict[str, Any]]:
        """Close the API client's connection pool when the server shuts down."""
        try:
            yield {}
        finally:
            logger.info("Closing Florentine API client")
            await self.client.aclose()

    async def list_collections(self) -> ListCollectionsResponse | ErrorResponse:
        try:
            return await self.client.list_collections()
        except Exception as e:
            logger.exception(f"Error calling {LIST_COLLECTIONS_TOOL} tool: {e}")
            return to_error_response(e)

    async def ask(self, input_config: AskInput | dict[str, Any]) -> AskResponse | ErrorResponse:
        """Merge the call's arguments over the static config and ask the API."""
        try:
            ask_input = AskInput.model_validate(input_config)
            request_body = RequestBody.model_validate(
                {
                    "question": ask_input.question,
                    "config": merge_configs(self.florentine_config, ask_input, self.surface),
                }
            )
            logger.info(f"Request body of florentine_ask tool:\n{format_data(request_body)}")
            return await self.client.ask(request_body)
        except Exception as e:
            logger.exception(f"Error calling florentine_ask tool: {e}")
            return to_error_response(e)

    async def _respond(
        self,
        caller: str,
        call: Callable[[], Awaitable[BaseModel]],
    ) -> str:
        """Run a tool call and encode its outcome for the MCP client.

        Errors are raised as ``ToolError`` so the client receives them with
        ``isError`` set instead of a failed protocol call.
        """
        try:
            response = await call()
        except Exception as e:
            logger.exception(f"Error calling {caller} tool: {e}")
            response = to_error_response(e)

        if isinstance(response, ErrorResponse):
            raise ToolError(json.dumps(response.to_wire()))
        if isinstance(response, ListCollectionsResponse):
            return json.dumps(response.to_wire()["summaries"])
        return json.dumps(response.to_wire())

    def _register(self, spec: ToolSpec, fn: Callable[..., Awaitable[str]]) -> None:
        self.server.tool(fn, name=spec.name, title=spec.title, description=spec.description)

    def register_tools(self) -> None:
        logger.info("Registering Tools...")
        for spec in exposed_tools(self.surface):
            if spec.name == LIST_COLLECTIONS_TOOL:
                self._register(spec, self._list_collections_tool())
            elif spec.accepts_overrides:
                self._register(spec, self._manual_ask_tool())
            else:
                self._register(spec, self._auto_ask_tool())

    def _list_collections_tool(self) -> Callable[[], Awaitable[str]]:
        async def list_collections() -> str:
            return await self._respond(LIST_COLLECTIONS_TOOL, self.list_collections)

        return list_collections

    def _auto_ask_tool(self) -> Callable[..., Awaitable[str]]:
        async def ask(question: Question) -> str:
            return await self._respond("florentine_ask", lambda: self.ask({"question": question}))

        return ask

    def _manual_ask_tool(self) -> Callable[..., Awaitable[str]]:
        # Parameter names are the tool's argument names on the wire. Their
        # contents are validated by AskInput so violations become diagnostics.
        async def ask(
            question: Question,
            sessionId: SessionIdArg = None,
            returnTypes: ReturnTypesArg = None,
            requiredInputs: RequiredInputsArg = None,
        ) -> str:
            ask_input = {
                "question": question,
                "sessionId": sessionId,
                "returnTypes": returnTypes,
                "requiredInputs": requiredInputs,
            }
            return await self._respond("florentine_ask", lambda: self.ask(ask_input))

        return ask

    def initialize(self) -> None:
        if self.is_initialized:
            logger.info("Florentine MCP Server is already initialized.")
            return
        logger.info("Starting Florentine MCP Server...")
        self.register_tools()
        self.is_initialized = True

    def get_server(self) -> FastMCP:
        if not self.is_initialized:
            raise RuntimeError("Florentine MCP Server must be initialized before use.")
        return self.server


def create_server(config: dict[str, Any]) -> FastMCP:
    """Build an initialized server from a single config mapping.

    Used by hosting platforms that hand over the whole configuration at once
    (camelCase keys, as in ``FlorentineConfig``) instead of launch arguments
    and environment variables.

    Raises:
        ValueError: If the configuration is invalid. The message is the
            diagnostic message for the first violation.
    """
    try:
        florentine_config = FlorentineConfig.model_validate(config)
    except ValidationError as e:
        raise ValueError(handle_validation_error(e).error.message) from e

    configure_logging(florentine_config.debug_enabled, florentine_config.logpath)
    florentine_server = FlorentineServer(florentine_config)
    florentine_server.initialize()
    return florentine_server.get_server()
