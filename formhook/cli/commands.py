"""The ``formhook`` command: inspect callbacks, validate and try out configurations."""

import sys
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from formhook.core.codec import decode_configuration
from formhook.core.dispatcher import Dispatcher
from formhook.domain.exit_codes import ExitCode
from formhook.domain.models import DispatchConfiguration, DispatchResult
from formhook.domain.protocols import FormField, ResultCallback
from formhook.domain.submission import (
    FieldSubmission,
    SimpleForm,
    StaticField,
    SubmissionContext,
    TextField,
)
from formhook.errors import MalformedConfigurationError
from formhook.logging import setup_logging
from formhook.plugins import get_registry

from .config import config_command

console = Console()


class _RecordingCallback(ResultCallback):
    """Keeps the result and forwards it to the configured callback, if any."""

    def __init__(self, inner: Optional[ResultCallback] = None):
        self.inner = inner
        self.result: Optional[DispatchResult] = None

    def handle_result(self, result: DispatchResult) -> None:
        self.result = result
        if self.inner is not None:
            self.inner.handle_result(result)


def _parse_assignments(values: Sequence[str], option: str) -> List[Tuple[uuid.UUID, str]]:
    parsed = []
    for item in values:
        field_id, sep, value = item.partition("=")
        if not sep:
            raise click.BadParameter(f"expected FIELD_ID=VALUE, got {item!r}", param_hint=option)
        try:
            parsed.append((uuid.UUID(field_id.strip()), value))
        except ValueError:
            raise click.BadParameter(f"{field_id!r} is not a GUID", param_hint=option)
    return parsed


def _load_configuration(config_file: Path) -> DispatchConfiguration:
    try:
        return decode_configuration(config_file.read_text(encoding="utf-8"))
    except MalformedConfigurationError as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        sys.exit(ExitCode.USER_ERROR)


def _configuration_table(configuration: DispatchConfiguration) -> Table:
    table = Table(title="Send Data Configuration", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("URL", configuration.url or "[dim]not set[/dim]")
    table.add_row("Method", configuration.method or "[dim]not set[/dim]")
    table.add_row(
        "Transmission Format", configuration.transmission_format or "[dim]not set[/dim]"
    )
    if configuration.result_handler:
        table.add_row("Result Handler", configuration.result_handler)
    else:
        table.add_row("Result Handler", "[dim]none[/dim]")
    for mapping in configuration.fields:
        table.add_row(f"Field {mapping.field_id}", mapping.field_name)
    return table


@click.group(context_settings={"max_content_width": 120})
def main() -> None:
    """Send form submissions to external URLs."""
    setup_logging()


@main.command("callbacks")
def callbacks_command() -> None:
    """List installed result callbacks."""
    registry = get_registry()

    table = Table(show_header=True, header_style="bold magenta", box=None)
    table.add_column("Identifier", style="cyan", no_wrap=True)
    table.add_column("Description", style="white")
    for descriptor in registry.descriptors():
        table.add_row(descriptor.identifier, descriptor.description)

    console.print(table)
    console.print(f"\n[dim]{len(registry)} callback(s) installed[/dim]")


@main.command("validate")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate_command(config_file: Path) -> None:
    """Check that CONFIG_FILE is a valid send data configuration."""
    configuration = _load_configuration(config_file)
    console.print(_configuration_table(configuration))
    if configuration.result_handler and configuration.callback is None:
        console.print(
            f"[yellow]Result handler not installed:[/yellow] {configuration.result_handler}"
        )
    console.print("[green]Configuration is valid[/green]")


@main.command("send")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--value",
    "values",
    multiple=True,
    metavar="FIELD_ID=VALUE",
    help="Submitted value for a text field (repeatable)",
)
@click.option(
    "--server-value",
    "server_values",
    multiple=True,
    metavar="FIELD_ID=VALUE",
    help="Value of a server-side only field (repeatable)",
)
def send_command(config_file: Path, values: Tuple[str, ...], server_values: Tuple[str, ...]) -> None:
    """Send a sample submission using CONFIG_FILE."""
    configuration = _load_configuration(config_file)
    submitted = _parse_assignments(values, "--value")
    computed = _parse_assignments(server_values, "--server-value")

    fields: Dict[uuid.UUID, FormField] = {}
    for field_id, _ in submitted:
        fields.setdefault(field_id, TextField(id=field_id))
    for field_id, value in computed:
        fields[field_id] = StaticField(id=field_id, value=value)

    context = SubmissionContext(
        form=SimpleForm(fields=tuple(fields.values()), name=config_file.stem),
        data=[FieldSubmission(field_id, (value,)) for field_id, value in submitted],
        submission_id=str(uuid.uuid4()),
    )

    recorder = _RecordingCallback(configuration.callback)
    Dispatcher().handle(configuration.model_copy(update={"callback": recorder}), context)

    result = recorder.result
    if result is None:
        console.print(
            f"[yellow]Nothing sent:[/yellow] unrecognized transmission format "
            f"{configuration.transmission_format!r}"
        )
        sys.exit(ExitCode.USER_ERROR)

    if result.success:
        console.print(
            Panel(
                escape(result.response_text or ""),
                title=f"[green]Sent[/green] (HTTP {result.status_code})",
            )
        )
    else:
        console.print(Panel(escape(str(result.error)), title="[red]Failed[/red]"))
        sys.exit(ExitCode.SEND_ERROR)


main.add_command(config_command)


if __name__ == "__main__":
    main()
