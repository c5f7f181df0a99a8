import json
from pathlib import Path
from typing import Any
import typer
from rich.console import Console
from rich.markup import escape

from simple_json_patch.etc.consts import CONFIG
from simple_json_patch.etc.utils import to_plain
from simple_json_patch.patch import PatchErrorLog


def read_json_file(path: Path) -> Any:
    """
    Load a JSON document from a file, exiting with a readable message on failure.
    :param path: The file to read.
    :return: The parsed document.
    """
    try:
        return json.loads(path.read_text(encoding='utf-8'))
    except OSError as e:
        CONSOLE.print(f'[red]Cannot read {path}: {e.strerror}[/red]')
        raise typer.Exit(code=2) from e
    except json.JSONDecodeError as e:
        CONSOLE.print(f'[red]{path} is not valid JSON: {e}[/red]')
        raise typer.Exit(code=2) from e


def dump_json(value: Any) -> str:
    """
    Serialise a value with the configured indentation.
    :param value: The value, plain or a model.
    :return: The JSON text.
    """
    return json.dumps(to_plain(value), indent=CONFIG.output_indent or None)


def print_errors(error_log: PatchErrorLog):
    """
    Print the errors of a collect-errors run, grouped by the affected type.
    :param error_log: The errors recorded while applying a patch.
    """
    for affected_type, messages in error_log.by_affected_type().items():
        CONSOLE.print(f'[red]Error in {escape(affected_type)}:[/red]')
        for message in messages:
            CONSOLE.print(f'  - {escape(message)}')


CONSOLE = Console()
