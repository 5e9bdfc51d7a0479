"""Bitrix24 tool proxy CLI entry point."""

import typer
from rich.console import Console

from bitrix_proxy.api.cli.commands import call, config, serve, tools

app = typer.Typer(
    name="bitrix-proxy",
    help="Bitrix24 tool proxy - semantic CRM tools over Bitrix24 REST",
    add_completion=True,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register command groups
app.add_typer(tools.app, name="tools", help="Tool catalogue")
app.add_typer(config.app, name="config", help="Configuration")
app.command("call")(call.call_tool)
app.command("serve")(serve.serve)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: str = typer.Option(
        None, "--config", "-c", help="YAML config file (overrides BITRIX_PROXY_CONFIG)"
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """Bitrix24 tool proxy CLI."""
    from bitrix_proxy.api.log_config import configure_logging

    configure_logging("DEBUG" if debug else "WARNING")
    ctx.obj = {"config_path": config_path, "debug": debug}


@app.command()
def version():
    """Show version."""
    from bitrix_proxy import __version__

    console.print(f"[bold blue]Version:[/bold blue] [cyan]{__version__}[/cyan]")


if __name__ == "__main__":
    app()
