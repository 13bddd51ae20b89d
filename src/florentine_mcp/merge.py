"""Resolution of the effective request config.

The static configuration (launch arguments and environment) is combined with
the arguments of one ``florentine_ask`` call. Each field is resolved on its
own:

- ``llmService`` / ``llmKey`` come from the static config only, as a pair.
- ``sessionId``: the call's value if non-empty, else the static value, else
  omitted.
- ``returnTypes``: static values followed by the call's values. When both are
  empty the surface default applies.
- ``requiredInputs``: static values followed by the call's values, omitted
  when both are empty.

Nothing here validates; the result is checked by ``RequestBody``.
"""

from typing import Any

from florentine_mcp.models import AskInput, FlorentineConfig
from florentine_mcp.tool_surface import DEFAULT_RETURN_TYPES, ToolSurface


def merge_configs(
    florentine_config: FlorentineConfig,
    input_config: AskInput,
    surface: ToolSurface,
) -> dict[str, Any]:
    """Merge the static config and one call's arguments into a request config.

    Args:
        florentine_config: The static configuration.
        input_config: Arguments of the current call.
        surface: Active tool surface, which decides the ``returnTypes`` default.

    Returns:
        A dict keyed by wire field names, ready for ``RequestConfig``.
        Neither input is modified.
    """
    merged: dict[str, Any] = {}

    if florentine_config.llm_service is not None:
        merged["llmService"] = florentine_config.llm_service
    if florentine_config.llm_key is not None:
        merged["llmKey"] = florentine_config.llm_key

    session_id = input_config.session_id or florentine_config.session_id
    if session_id:
        merged["sessionId"] = session_id

    return_types = [*florentine_config.return_types, *(input_config.return_types or [])]
    merged["returnTypes"] = return_types or list(DEFAULT_RETURN_TYPES[surface])

    required_inputs = [
        *florentine_config.required_inputs,
        *(input_config.required_inputs or []),
    ]
    if required_inputs:
        merged["requiredInputs"] = required_inputs

    return merged
