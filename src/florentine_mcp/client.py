from typing import Any

import httpx

from florentine_mcp.logging import format_data, get_logger
from florentine_mcp.models import (
    AskResponse,
    ErrorResponse,
    ListCollectionsResponse,
    RequestBody,
)

logger = get_logger("client")

FLORENTINE_BASE_URL = "https://nltm.florentine.ai"


class FlorentineClient:
    """
    Thin async client for the Florentine API.

    Successful responses are validated against their models. Error responses
    are validated against ``ErrorResponse`` and returned as is; their codes
    belong to the API. Validation failures and transport errors propagate.

    No timeout is applied unless one is given; asks that build and run an
    aggregation routinely take longer than httpx's default. A closed client
    reopens its connection pool on the next call.
    """

    def __init__(
        self,
        token: str,
        base_url: str = FLORENTINE_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: httpx.Timeout | float | None = None,
    ):
        self.base_url = base_url
        self.headers = {
            "Content-Type": "application/json",
            "florentine-token": token,
        }
        self._transport = transport
        self._timeout = timeout
        self._http = self._open()

    def _open(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            transport=self._transport,
            timeout=self._timeout,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        if self._http.is_closed:
            self._http = self._open()
        return await self._http.request(method, path, **kwargs)

    async def ask(self, body: RequestBody) -> AskResponse | ErrorResponse:
        response = await self._request("POST", "/ask", json=body.to_wire())
        data = self._json(response, "ask")
        if not response.is_success:
            return ErrorResponse.model_validate(data)
        return AskResponse.model_validate(data)

    async def list_collections(self) -> ListCollectionsResponse | ErrorResponse:
        response = await self._request("GET", "/collections")
        data = self._json(response, "list_collections")
        if not response.is_success:
            return ErrorResponse.model_validate(data)
        return ListCollectionsResponse.model_validate(data)

    def _json(self, response: httpx.Response, caller: str) -> Any:
        data = response.json()
        if response.is_success:
            logger.info(f"Response from florentine_{caller} tool:\n{format_data(data)}")
        else:
            logger.error(
                f"Error calling florentine_{caller} tool "
                f"(HTTP {response.status_code}):\n{format_data(data)}"
            )
        return data

    async def aclose(self) -> None:
        await self._http.aclose()
