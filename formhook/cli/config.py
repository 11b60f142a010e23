"""Configuration command for formhook."""

import click
from rich.console import Console
from rich.table import Table

from formhook.config import get_config
from formhook.constants import USER_AGENT


@click.command("config")
def config_command() -> None:
    """Show the effective formhook configuration."""
    config = get_config()

    console = Console()
    table = Table(title="Formhook Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Environment Variable", style="yellow")

    table.add_row("Request Timeout", f"{config.request_timeout}s", "FORMHOOK_REQUEST_TIMEOUT")
    table.add_row(
        "Merge URL Query Into Body",
        str(config.merge_url_query_into_body),
        "FORMHOOK_MERGE_URL_QUERY_INTO_BODY",
    )
    plugin_dirs = ", ".join(str(p) for p in config.plugin_dir_paths()) or "none"
    table.add_row("Plugin Directories", plugin_dirs, "FORMHOOK_PLUGIN_DIRS")
    table.add_row("Log Level", config.log_level, "FORMHOOK_LOG_LEVEL")
    table.add_row("Log Format", config.log_format, "FORMHOOK_LOG_FORMAT")

    console.print(table)
    console.print(f"User-Agent: {USER_AGENT}")
    console.print("\n[bold]Tip:[/bold] Set environment variables in your shell or .env file")
