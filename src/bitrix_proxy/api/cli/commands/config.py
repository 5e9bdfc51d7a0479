"""Config command - Show the effective configuration."""

import typer
from rich.console import Console
from rich.table import Table

from bitrix_proxy.application.settings import load_settings
from bitrix_proxy.core.domain.errors import ConfigError

app = typer.Typer(help="Configuration")
console = Console()


def _mask_webhook(url: str | None) -> str:
    # the last path segment of a webhook URL is its secret token
    if not url:
        return "[red]not set[/red]"
    head, _, _ = url.rpartition("/")
    return f"{head}/***"


@app.command("show")
def show_config(ctx: typer.Context):
    """Show the effective configuration (webhook token masked)."""
    global_opts = ctx.obj or {}
    try:
        settings = load_settings(global_opts.get("config_path"))
    except ConfigError as e:
        console.print(f"[red]{e.message}[/red]")
        if e.details:
            console.print_json(data=e.details)
        raise typer.Exit(1)

    table = Table(title="Effective Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    bitrix = settings.bitrix
    table.add_row("webhook_url", _mask_webhook(bitrix.webhook_url))
    table.add_row("timeout_seconds", f"{bitrix.timeout_seconds:g}")
    table.add_row("max_attempts", str(bitrix.max_attempts))
    table.add_row("retry_delay_seconds", f"{bitrix.retry_delay_seconds:g}")
    table.add_row("requests_per_second", f"{bitrix.requests_per_second:g}")
    table.add_row("server", f"{settings.server.host}:{settings.server.port}")
    table.add_row("log_level", settings.server.log_level)

    console.print(table)
