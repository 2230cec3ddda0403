"""Defines the command-line interface for the validity engine.

This module uses the `click` library to create the `validity` command. It
loads forms out of HTML pages, runs client-side validation or server-error
display against them, and prints the resulting error state with `rich`.
"""
import io
import json
import sys
import logging
from typing import Any, Dict, List, Optional, Tuple

import click
import tomli_w
from rich.console import Console
from rich.panel import Panel
from rich.markup import escape
from rich.table import Table

from .core.config import Config
from .core.exceptions import FormNotFoundError
from .core.form import Form
from .core.registry import RuleRegistry
from .core.validator import Validity
from .adapters.recording import RecordingAdapter
from .utils.html_forms import load_document_file

# Configure rich console for output.
console = Console()

# Set up basic logging.
logger = logging.getLogger(__name__)


class AliasedGroup(click.Group):
    """A custom click Group that supports command aliases and case-insensitivity."""

    def __init__(self, *args, **kwargs):
        """Initializes the aliased group."""
        super().__init__(*args, **kwargs)
        self._aliases: Dict[str, str] = {}

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        """Gets a command by name, checking for aliases and prefixes.

        Args:
            ctx: The click context.
            cmd_name: The command name entered by the user.

        Returns:
            The matched click command, or None.
        """
        cmd_name = cmd_name.lower()
        # Exact match
        rv = super().get_command(ctx, cmd_name)
        if rv is not None:
            return rv
        # Alias match
        if cmd_name in self._aliases:
            return super().get_command(ctx, self._aliases[cmd_name])
        # Prefix match
        matches = [x for x in self.list_commands(ctx) if x.startswith(cmd_name)]
        if not matches:
            return None
        if len(matches) == 1:
            return super().get_command(ctx, matches[0])
        ctx.fail(f"Ambiguous command: '{cmd_name}'. Matches: {', '.join(sorted(matches))}")
        return None

    def add_alias(self, alias: str, command_name: str) -> None:
        """Adds an alias for a command.

        Args:
            alias: The alias to add.
            command_name: The name of the command to alias.
        """
        self._aliases[alias.lower()] = command_name.lower()


def _log_level(verbose: bool, debug: bool, settings: Config) -> int:
    """Picks the log level; the `verbose` setting stands in for --verbose."""
    if debug:
        return logging.DEBUG
    if verbose or settings.get("verbose", False):
        return logging.INFO
    return logging.WARNING


def _parse_value_overrides(values: Tuple[str, ...]) -> Dict[str, str]:
    """Parses `FIELD=VALUE` options into a dict.

    Raises:
        click.BadParameter: If an option has no '='.
    """
    overrides: Dict[str, str] = {}
    for item in values:
        field_id, sep, value = item.partition("=")
        if not sep or not field_id:
            raise click.BadParameter(f"Expected FIELD=VALUE, got '{item}'", param_hint="--value")
        overrides[field_id] = value
    return overrides


def _load_form(page: str, form_id: str, config: Config) -> Tuple[Validity, Form, RecordingAdapter]:
    """Loads `page` and returns an engine bound to a recording adapter."""
    document = load_document_file(page, config)
    recorder = RecordingAdapter()
    engine = Validity(document, config=config, adapter=recorder)
    try:
        form = document.get_form(form_id)
    except FormNotFoundError as e:
        console.print(f"[red]Error: {e}.[/red]")
        sys.exit(2)
    return engine, form, recorder


def _field_rows(form: Form, recorder: RecordingAdapter) -> List[Dict[str, Any]]:
    """Summarizes the recorded error state of every field in `form`."""
    rows = []
    for field in form.snapshot():
        if recorder.has_error(field.field_id):
            status = "failed"
        elif field.validation_spec_error is not None:
            status = "malformed"
        elif not field.validation_spec and not field.error_spec:
            status = "unchecked"
        else:
            status = "passed"
        rows.append({
            "field": field.field_id,
            "status": status,
            "message": recorder.message_for(field.field_id),
        })
    return rows


def _display_rows(title: str, rows: List[Dict[str, Any]]) -> None:
    """Displays field results in a formatted table."""
    table = Table(title=title)
    table.add_column("Field", style="cyan")
    table.add_column("Status")
    table.add_column("Message")
    styles = {
        "failed": "[red]Failed[/red]",
        "malformed": "[yellow]Malformed spec[/yellow]",
        "unchecked": "[dim]No rules[/dim]",
        "passed": "[green]Passed[/green]",
    }
    for row in rows:
        table.add_row(escape(row["field"]), styles[row["status"]], escape(row["message"] or ""))
    console.print(table)


@click.group(cls=AliasedGroup, invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="pyvalidity")
@click.option("--verbose", is_flag=True, help="Enable verbose output.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """Validate HTML forms against the rules declared on their inputs.

    Each input declares its checks in a `data-validate` attribute, a JSON
    object mapping rule names to error messages, and the server error codes
    it responds to in a `data-error` attribute of the same shape.
    """
    if sys.platform == "win32" and isinstance(sys.stdout, io.TextIOWrapper):
        sys.stdout.reconfigure(encoding='utf-8')
    settings = Config()
    if not settings.get("colors", True):
        console.no_color = True
    logging.basicConfig(level=_log_level(verbose, debug, settings), format='%(asctime)s - %(levelname)s - %(message)s')
    logger.debug("Debug mode enabled.")

    if ctx.invoked_subcommand is None:
        console.print("Use 'validity validate <page> --form <id>' to validate a form, or 'validity --help' for more commands.")


@main.command()
@click.argument("page", type=click.Path(exists=True, dir_okay=False))
@click.option("--form", "form_id", required=True, help="Id of the form to validate.")
@click.option("--value", "values", multiple=True, metavar="FIELD=VALUE", help="Override a field's value. Repeatable.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
@click.option("--json", "json_output", is_flag=True, help="Output results in JSON format.")
def validate(page: str, form_id: str, values: Tuple[str, ...], config_path: Optional[str], json_output: bool) -> None:
    """Validate a form in an HTML page.

    Field values come from the inputs' `value` attributes unless overridden
    with --value. Exits with status 1 when the form is invalid.
    """
    config_obj = Config(config_path=config_path)
    overrides = _parse_value_overrides(values)
    engine, form, recorder = _load_form(page, form_id, config_obj)

    for field_id, value in overrides.items():
        field = form.get_field(field_id)
        if field is None:
            console.print(f"[red]Error: form '{form_id}' has no field '{field_id}'.[/red]")
            sys.exit(2)
        field.value = value

    is_valid = engine.validate(form_id)
    rows = _field_rows(form, recorder)

    if json_output:
        click.echo(json.dumps({"form": form_id, "valid": is_valid, "fields": rows}, indent=2))
    else:
        _display_rows(f"Validation of '{form_id}'", rows)
        if is_valid:
            console.print(Panel("All validations passed.", style="green", title="Form Valid"))
        else:
            failed = sum(1 for row in rows if row["status"] == "failed")
            console.print(Panel(f"Found errors on {failed} field(s).", style="red", title="Form Invalid"))

    if not is_valid:
        sys.exit(1)


@main.command(name="server-errors")
@click.argument("page", type=click.Path(exists=True, dir_okay=False))
@click.argument("codes", nargs=-1, required=True)
@click.option("--form", "form_id", required=True, help="Id of the form the server rejected.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
@click.option("--json", "json_output", is_flag=True, help="Output results in JSON format.")
def server_errors(page: str, codes: Tuple[str, ...], form_id: str, config_path: Optional[str], json_output: bool) -> None:
    """Show which fields display the given server error CODES."""
    config_obj = Config(config_path=config_path)
    engine, form, recorder = _load_form(page, form_id, config_obj)

    engine.display_server_errors(form_id, codes)
    matched = [
        {"field": field_id, "message": message}
        for field_id, message in recorder.set_calls()
    ]

    if json_output:
        click.echo(json.dumps({"form": form_id, "codes": list(codes), "errors": matched}, indent=2))
        return

    if not matched:
        console.print(f"[yellow]No field in '{form_id}' responds to {', '.join(codes)}.[/yellow]")
        return

    table = Table(title=f"Server errors on '{form_id}'")
    table.add_column("Field", style="cyan")
    table.add_column("Message")
    for item in matched:
        table.add_row(escape(item["field"]), escape(item["message"]))
    console.print(table)


@main.command(name="rules")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
def list_rules(config_path: Optional[str]) -> None:
    """List every validation rule that can be used in `data-validate`."""
    registry = RuleRegistry.from_config(Config(config_path=config_path))
    table = Table(title="Validation Rules")
    table.add_column("Rule", style="cyan")
    table.add_column("Aliases")
    table.add_column("Category")
    table.add_column("Description")
    for name in sorted(registry, key=str.lower):
        info = registry[name].describe()
        table.add_row(info["name"], ", ".join(info["aliases"]), info["category"], info["description"])
    console.print(table)


@main.group(name="config", cls=AliasedGroup, invoke_without_command=True)
@click.pass_context
def config_group(ctx: click.Context) -> None:
    """Inspect or edit the user configuration file.

    Values set here are written to ~/.config/validity/config.toml and apply
    to every later run unless a project `validity.toml`, an explicit
    --config file or a VALIDITY_* environment variable overrides them.
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(config_list)


@config_group.command(name="list")
def config_list() -> None:
    """Show the effective configuration as TOML."""
    settings = Config()
    console.print(Panel(escape(tomli_w.dumps(settings.config).strip()), title="Current Configuration"))


@config_group.command(name="get")
@click.argument("key")
def config_get(key: str) -> None:
    """Print the value of a dot-separated KEY, e.g. markup.error_class."""
    value = Config().get(key)
    if value is None:
        console.print(f"[red]Error: unknown configuration key '{escape(key)}'.[/red]")
        sys.exit(1)
    click.echo(json.dumps(value) if not isinstance(value, str) else value)


@config_group.command(name="set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Set KEY to VALUE and save it to the user configuration.

    Booleans accept true/false, list settings are comma separated.
    """
    settings = Config()
    try:
        settings.set_from_string(key, value)
        settings.save_user_config()
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}.[/red]")
        sys.exit(1)
    except IOError as e:
        console.print(f"[red]Error saving configuration: {escape(str(e))}[/red]")
        sys.exit(1)
    console.print(f"[green]'{escape(key)}' set to {escape(json.dumps(settings.get(key)))}.[/green]")


@config_group.command(name="reset")
def config_reset() -> None:
    """Delete the user configuration so the defaults apply again."""
    try:
        removed = Config.reset_user_config()
    except IOError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)
    if removed:
        console.print("[green]Configuration reset to defaults.[/green]")
    else:
        console.print("[yellow]No user configuration file to reset.[/yellow]")


main.add_alias("check", "validate")


if __name__ == "__main__":
    main()
