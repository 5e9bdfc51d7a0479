"""Call command - Execute a tool against the configured webhook."""

import asyncio

import typer
from rich.console import Console

from bitrix_proxy.api.cli.commands.tools import parse_args_option
from bitrix_proxy.api.dependencies import build_proxy_service
from bitrix_proxy.application.settings import load_settings
from bitrix_proxy.core.domain.errors import ProxyError, error_envelope

console = Console()


def call_tool(
    ctx: typer.Context,
    tool_name: str = typer.Argument(..., help="Tool name"),
    args: str = typer.Option(None, "--args", "-a", help="Tool arguments as a JSON object"),
):
    """Call a tool and print the Bitrix24 result."""
    global_opts = ctx.obj or {}
    tool_args = parse_args_option(args)

    async def _call():
        service = build_proxy_service(load_settings(global_opts.get("config_path")))
        try:
            return await service.call_tool(tool_name, tool_args)
        finally:
            await service.close()

    try:
        result = asyncio.run(_call())
    except ProxyError as e:
        console.print_json(data=error_envelope(e))
        raise typer.Exit(1)

    console.print_json(data={"ok": True, "data": result})
