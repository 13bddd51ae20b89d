from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from florentine_mcp.config import load_args_config, load_static_config
from florentine_mcp.errors import to_error_response
from florentine_mcp.logging import configure_logging, format_data, get_logger
from florentine_mcp.server import FlorentineServer

app = typer.Typer(add_completion=False)
console = Console(stderr=True)
logger = get_logger("cli")


def report_fatal(err: Exception, debug: bool) -> None:
    """Report a startup failure to the debug log if there is one, else to stderr."""
    detail = format_data(to_error_response(err)) if isinstance(err, ValidationError) else repr(err)
    if debug:
        logger.error(f"Fatal error starting Florentine MCP server:\n{detail}")
    else:
        console.print(f"[red]Fatal error starting Florentine MCP server:[/red]\n{escape(detail)}")


@app.command()
def serve(
    mode: Annotated[
        str | None,
        typer.Option("--mode", "-m", help='The mode to run the MCP server in ("static" or "dynamic")'),
    ] = None,
    debug: Annotated[
        str | None, typer.Option("--debug", "-d", help="Enable debug mode for logging")
    ] = None,
    logpath: Annotated[
        str | None, typer.Option("--logpath", "-l", help="The debug log path")
    ] = None,
) -> None:
    """
    Start the Florentine MCP server on stdio.
    """
    load_dotenv()
    debug_enabled = False

    try:
        args_config = load_args_config(mode=mode, debug=debug, logpath=logpath)
        debug_enabled = args_config.debug_enabled
        configure_logging(debug_enabled, args_config.logpath)

        florentine_config = load_static_config(args_config)
        florentine_server = FlorentineServer(florentine_config)
        florentine_server.initialize()
        logger.info(f"Starting Florentine MCP server with options:\n{format_data(args_config)}")
    except Exception as e:
        report_fatal(e, debug_enabled)
        raise typer.Exit(code=1)

    florentine_server.get_server().run(transport="stdio")


if __name__ == "__main__":
    app()
