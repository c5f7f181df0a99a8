from pathlib import Path
from typing import Annotated, Optional
import typer

from simple_json_patch.model.json_patch import JsonPatchDocument
from simple_json_patch.patch import JsonPatchEngine, JsonPatchException
from .util import CONSOLE, read_json_file, dump_json, print_errors


app = typer.Typer(no_args_is_help=True)


def _load_document(path: Path) -> JsonPatchDocument:
    try:
        return JsonPatchDocument.from_entries(read_json_file(path))
    except JsonPatchException as e:
        CONSOLE.print(f'[red]{e.message}[/red]')
        raise typer.Exit(code=2) from e


@app.command('apply')
def apply_command(target_file: Annotated[Path, typer.Argument(help='JSON document to patch')],
                  patch_file: Annotated[Path, typer.Argument(help='JSON Patch document to apply')],
                  collect_errors: Annotated[bool, typer.Option(
                      '--collect-errors',
                      help='Keep going after a failed operation and report every failure',
                  )] = False,
                  output: Annotated[Optional[Path], typer.Option(
                      '--output', '-o',
                      help='Write the patched document to this file instead of printing it',
                  )] = None,
                  ):
    """
    Apply a JSON Patch document to a JSON file.
    """
    target = read_json_file(target_file)
    document = _load_document(patch_file)
    engine = JsonPatchEngine()

    if collect_errors:
        patched, error_log = engine.apply_collecting(target, document)
    else:
        try:
            patched = engine.apply(target, document)
        except JsonPatchException as e:
            CONSOLE.print(f'[red]Operation "{e.error.operation}" failed: {e.message}[/red]')
            raise typer.Exit(code=1) from e
        error_log = None

    if output:
        output.write_text(dump_json(patched), encoding='utf-8')
        CONSOLE.print(f'Patched document written to {output}')
    else:
        CONSOLE.print_json(dump_json(patched))

    if error_log:
        print_errors(error_log)
        raise typer.Exit(code=1)


@app.command('test')
def test_command(target_file: Annotated[Path, typer.Argument(help='JSON document to check')],
                 patch_file: Annotated[Path, typer.Argument(help='JSON Patch document to try')],
                 ):
    """
    Check whether a JSON Patch document applies cleanly, without changing anything.
    """
    target = read_json_file(target_file)
    document = _load_document(patch_file)

    _, error_log = JsonPatchEngine().apply_collecting(target, document, dry_run=True)

    if error_log:
        print_errors(error_log)
        raise typer.Exit(code=1)

    CONSOLE.print(f'[green]All {len(document)} operations apply cleanly.[/green]')


@app.command('diff')
def diff_command(source_file: Annotated[Path, typer.Argument(help='The original JSON document')],
                 target_file: Annotated[Path, typer.Argument(help='The desired JSON document')],
                 ):
    """
    Print the JSON Patch document turning one JSON file into another.
    """
    document = JsonPatchDocument.from_diff(read_json_file(source_file), read_json_file(target_file))

    CONSOLE.print_json(dump_json(document.to_list()))
