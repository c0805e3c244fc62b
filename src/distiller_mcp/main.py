"""CLI entrypoint for distiller-mcp."""

from pathlib import Path

import rich_click as click

from distiller_mcp import __version__
from distiller_mcp.controllers import (
    BridgeCliController,
    ServeCommand,
    ToolCallCommand,
)

click.rich_click.USE_MARKDOWN = True
CONTROLLER = BridgeCliController()

_binary_option = click.option(
    "--binary",
    default=None,
    help="Path to the aid executable. Defaults to AID_BINARY or aid on PATH.",
)
_root_option = click.option(
    "--root",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Working directory for aid runs. Defaults to AID_ROOT or the current directory.",
)
_timeout_option = click.option(
    "--timeout-seconds",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Kill aid runs that exceed this many seconds. Defaults to AID_MCP_TIMEOUT_SECONDS.",
)


@click.group()
@click.version_option(version=__version__, prog_name="distiller-mcp")
def distiller_mcp() -> None:
    """Bridge between MCP agents and the AI Distiller (`aid`) CLI."""


@distiller_mcp.command("serve")
@click.option(
    "--transport",
    type=click.Choice(["mcp", "jsonl"], case_sensitive=False),
    default="mcp",
    show_default=True,
    help="`mcp` speaks the Model Context Protocol; `jsonl` speaks line-delimited JSON-RPC.",
)
@_binary_option
@_root_option
@_timeout_option
@click.option(
    "--debug/--no-debug",
    default=None,
    help="Log at DEBUG level. Defaults to AID_MCP_DEBUG.",
)
def serve(
    transport: str,
    binary: str | None,
    root: Path | None,
    timeout_seconds: float | None,
    debug: bool | None,
) -> None:
    """Serve the tool catalog on stdin/stdout until the client disconnects."""

    try:
        CONTROLLER.serve(
            ServeCommand(
                transport=transport.lower(),
                binary=binary,
                root=root,
                timeout_seconds=timeout_seconds,
                debug=debug,
            ),
        )
    except ValueError as error:
        raise click.ClickException(str(error)) from error


@distiller_mcp.command("tools")
def tools() -> None:
    """List the tools exposed to agents, grouped by category."""

    _emit_lines(CONTROLLER.list_tools())


@distiller_mcp.command("capabilities")
def capabilities() -> None:
    """Print the capability report returned by `get_capabilities`."""

    _emit_lines(CONTROLLER.capabilities())


@distiller_mcp.command("call")
@click.argument("tool_name")
@click.option(
    "--arg",
    "arg_pairs",
    multiple=True,
    metavar="KEY=VALUE",
    help="Tool argument. Values are typed by the tool declaration. Can be repeated.",
)
@click.option(
    "--json-args",
    default=None,
    help="Tool arguments as a JSON object; `--arg` values override its keys.",
)
@click.option(
    "--dry-run/--no-dry-run",
    default=False,
    show_default=True,
    help="Print the aid command line instead of running it.",
)
@_binary_option
@_root_option
@_timeout_option
def call(  # noqa: PLR0913
    tool_name: str,
    arg_pairs: tuple[str, ...],
    json_args: str | None,
    dry_run: bool,
    binary: str | None,
    root: Path | None,
    timeout_seconds: float | None,
) -> None:
    """Run one tool directly, without an MCP client."""

    try:
        result = CONTROLLER.call(
            ToolCallCommand(
                tool_name=tool_name,
                arg_pairs=arg_pairs,
                json_args=json_args,
                dry_run=dry_run,
                binary=binary,
                root=root,
                timeout_seconds=timeout_seconds,
            ),
        )
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    _emit_lines(result.lines)
    if not result.success:
        raise click.ClickException(f"Tool {tool_name} failed.")


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    distiller_mcp()
