"""Defines the command-line interface for tagval.

This module uses the `click` library to expose the validation engine from
the shell: binding a JSON document into a record type and reporting the
first rule violation, listing the available rules, and managing the
configuration file.
"""
import io
import json
import logging
import os
import sys
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.config import Config
from .core.errors import BindError, ConfigurationError, ValidationError
from .core.validator import Validator
from .utils.loading import load_record_type

# Configure rich console for human-readable output.
console = Console(emoji=True)

logger = logging.getLogger(__name__)

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_BAD_INPUT = 2
EXIT_CONFIGURATION = 3


class AliasedGroup(click.Group):
    """A custom click Group that supports command aliases and case-insensitivity."""

    def __init__(self, *args, **kwargs):
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
        rv = super().get_command(ctx, cmd_name)
        if rv is not None:
            return rv
        if cmd_name in self._aliases:
            return super().get_command(ctx, self._aliases[cmd_name])
        matches = [x for x in self.list_commands(ctx) if x.startswith(cmd_name)]
        if not matches:
            return None
        if len(matches) == 1:
            return super().get_command(ctx, matches[0])
        ctx.fail(f"Ambiguous command: '{cmd_name}'. Matches: {', '.join(sorted(matches))}")
        return None

    def add_alias(self, alias: str, command_name: str) -> None:
        self._aliases[alias.lower()] = command_name.lower()


def _log_level(verbose: bool, debug: bool, config_obj: Config) -> int:
    """Picks the logging level from the flags, falling back to the `verbose` setting."""
    if debug:
        return logging.DEBUG
    if verbose or config_obj.get("verbose", False):
        return logging.INFO
    return logging.WARNING


@click.group(cls=AliasedGroup, invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="tagval")
@click.option("--verbose", is_flag=True, help="Enable verbose output.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """Validate JSON documents against rule strings declared on record types.

    Record types are Python dataclasses whose fields carry rule strings such
    as "required|email" or "length_between:4,6".
    """
    if sys.platform == "win32" and isinstance(sys.stdout, io.TextIOWrapper):
        sys.stdout.reconfigure(encoding='utf-8')
    config_obj = Config()
    console.no_color = not config_obj.get("colors", True) or "NO_COLOR" in os.environ
    logging.basicConfig(level=_log_level(verbose, debug, config_obj), format='%(asctime)s - %(levelname)s - %(message)s')
    logger.debug("Debug mode enabled.")

    if ctx.invoked_subcommand is None:
        console.print("Use 'tagval check <module:Record> <file.json>' to validate a document, or 'tagval --help' for more commands.")


def _error_payload(error: Exception) -> Dict[str, Any]:
    if isinstance(error, ValidationError):
        return error.to_dict()
    return {"kind": type(error).__name__, "message": str(error)}


def _report(target: str, error: Optional[Exception], json_output: bool) -> None:
    """Prints the outcome of a check, as JSON or as a rich panel/table."""
    if json_output:
        result = {"target": target, "valid": error is None}
        if error is not None:
            result["error"] = _error_payload(error)
        click.echo(json.dumps(result, indent=2, default=str))
        return

    if error is None:
        console.print(Panel(f"The document is a valid {target}.", style="green", title="Valid"))
        return

    table = Table(title=f"Validation failed for {target}")
    table.add_column("Kind", style="red", no_wrap=True)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Message")
    payload = _error_payload(error)
    table.add_row(payload["kind"], payload.get("field") or "-", payload["message"])
    console.print(table)


@main.command()
@click.argument("target", type=str)
@click.argument("input_file", type=click.File("rb"), default="-")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
@click.option("--json", "json_output", is_flag=True, help="Output the result in JSON format.")
def check(target: str, input_file: io.BufferedReader, config_path: Optional[str], json_output: bool) -> None:
    """Validate a JSON document against a record type.

    TARGET names a dataclass as 'package.module:Class' or 'path/to/file.py:Class'.
    The document is read from INPUT_FILE, or from standard input when omitted.

    \b
    Exit codes:
        0  the document is valid
        1  the document breaks a rule
        2  the input is empty or not decodable into the record
        3  the record type or one of its rule strings is invalid
    """
    config_obj = Config(config_path=config_path)
    try:
        record_type = load_record_type(target)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(EXIT_CONFIGURATION)

    validator = Validator(config_obj)
    try:
        validator.bind(input_file, record_type)
    except ValidationError as e:
        _report(target, e, json_output)
        sys.exit(EXIT_INVALID)
    except BindError as e:
        _report(target, e, json_output)
        sys.exit(EXIT_BAD_INPUT)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error in {target}: {e}[/red]")
        sys.exit(EXIT_CONFIGURATION)

    _report(target, None, json_output)


@main.command(name="rules")
def list_rules() -> None:
    """List the rule keywords the engine understands."""
    table = Table(title="Available Rules")
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Parameter")
    table.add_column("Failure", style="magenta")
    table.add_column("Description")
    for keyword, predicate in Validator(Config.defaults()).describe():
        table.add_row(keyword, "yes" if predicate.takes_param else "-", predicate.failure.__name__, predicate.description)
    console.print(table)


@main.command()
@click.argument("action", type=click.Choice(['get', 'set', 'list', 'reset']), required=True)
@click.argument("key", type=str, required=False)
@click.argument("value", type=str, required=False)
def config(action: str, key: Optional[str], value: Optional[str]) -> None:
    """Manage the tagval configuration.

    This command allows you to view, set, and reset configuration values
    that are stored in the user-level configuration file.

    \b
    ACTION:
        get <key>       Get a configuration value.
        set <key> <value> Set a configuration value.
        list            List all current configuration values.
        reset           Reset the configuration to its default state.
    """
    config_obj = Config()
    if action == "list":
        console.print(Panel(json.dumps(config_obj.config, indent=2), title="Current Configuration"))
    elif action == "get":
        if not key:
            console.print("[red]Error: 'get' action requires a key.[/red]")
            sys.exit(1)
        click.echo(json.dumps(config_obj.get(key)))
    elif action == "set":
        if not key or value is None:
            console.print("[red]Error: 'set' action requires a key and a value.[/red]")
            sys.exit(1)
        # Type casting for bools and ints
        if value.lower() in ('true', 'false'):
            processed_value: Any = value.lower() == 'true'
        elif value.isdigit():
            processed_value = int(value)
        else:
            processed_value = value
        config_obj.set(key, processed_value)
        try:
            config_obj.save_user_config()
            console.print(f"[green]'{key}' set to '{processed_value}' and saved to user config.[/green]")
        except IOError as e:
            console.print(f"[red]Error saving configuration: {e}[/red]")
            sys.exit(1)
    elif action == "reset":
        if Config.reset_user_config():
            console.print("[green]Configuration reset to defaults.[/green]")
        else:
            console.print("[yellow]No user configuration file to reset.[/yellow]")


main.add_alias('c', 'check')
main.add_alias('ls', 'rules')

if __name__ == "__main__":
    main()
