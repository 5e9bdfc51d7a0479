"""Tools command - List, inspect and dry-run catalogue tools."""

import json

import typer
from rich.console import Console
from rich.table import Table

from bitrix_proxy.application.dispatcher import ToolDispatcher
from bitrix_proxy.core.domain.errors import ValidationError

app = typer.Typer(help="Tool catalogue")
console = Console()


def parse_args_option(raw: str | None) -> dict:
    """Parse the ``--args`` JSON option into an argument bag."""
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except ValueError as e:
        console.print(f"[red]--args is not valid JSON: {e}[/red]")
        raise typer.Exit(2)
    if not isinstance(value, dict):
        console.print("[red]--args must be a JSON object[/red]")
        raise typer.Exit(2)
    return value


@app.command("list")
def list_tools(
    domain: str = typer.Option(None, "--domain", help="Only tools of one builder (e.g. deals)"),
):
    """List available tools."""
    dispatcher = ToolDispatcher()

    table = Table(title="Available Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Domain", style="magenta")
    table.add_column("Description", style="white")

    for builder in dispatcher.builders:
        if domain and builder.domain != domain:
            continue
        for tool in builder.tool_definitions:
            table.add_row(tool.name, builder.domain, tool.description)

    console.print(table)


@app.command("inspect")
def inspect_tool(
    tool_name: str = typer.Argument(..., help="Tool name to inspect"),
):
    """Inspect tool details and parameters."""
    tool = ToolDispatcher().get_tool(tool_name)

    if not tool:
        console.print(f"[red]Tool '{tool_name}' not found[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold cyan]{tool.name}[/bold cyan]")
    console.print(f"{tool.description}\n")

    console.print("[bold]Parameters:[/bold]")
    console.print_json(data=tool.parameters_schema)


@app.command("build")
def build_request(
    tool_name: str = typer.Argument(..., help="Tool name"),
    args: str = typer.Option(None, "--args", "-a", help="Tool arguments as a JSON object"),
):
    """Show the Bitrix24 request a tool call translates to, without sending it."""
    try:
        request = ToolDispatcher().dispatch(tool_name, parse_args_option(args))
    except ValidationError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    console.print_json(data=request.to_dict())
