"""
Example: Ask questions in dynamic mode.

Launches florentine-mcp over stdio in dynamic mode and adds the current
user's required inputs to every florentine_ask call, so the model only has to
supply the question.
"""

import asyncio
import json
import os
from typing import Any

from dotenv import load_dotenv
from fastmcp import Client
from fastmcp.client.transports import StdioTransport

load_dotenv()

USER_ID_FOR_SESSION = {
    "abc": "66d4a8f3c9e1b2a3d4e5f601",
    "def": "507f1f77bcf86cd799439011",
}


def fetch_user_data(session_id: str | None) -> dict[str, Any]:
    """Look up user specific ask arguments. Replace with a real lookup."""
    if not session_id or session_id not in USER_ID_FOR_SESSION:
        return {}
    return {"requiredInputs": [{"keyPath": "userId", "value": USER_ID_FOR_SESSION[session_id]}]}


async def ask(client: Client[Any], question: str, session_id: str) -> Any:
    arguments = {"question": question, "sessionId": session_id, **fetch_user_data(session_id)}
    print(json.dumps(arguments, indent=2))
    result = await client.call_tool("florentine_ask", arguments, raise_on_error=False)
    return json.loads(result.content[0].text)


async def main():
    transport = StdioTransport(
        command="florentine-mcp",
        args=["--mode", "dynamic"],
        env={"FLORENTINE_TOKEN": os.getenv("FLORENTINE_TOKEN", "")},
    )

    async with Client(transport) as client:
        tools = await client.list_tools()
        print(f"Available tools: {[tool.name for tool in tools]}")

        question = "How many orders did I place last month?"
        print(f"\nUser: {question}\n")
        response = await ask(client, question, session_id="abc")
        print(json.dumps(response, indent=2))


if __name__ == "__main__":
    asyncio.run(main())
