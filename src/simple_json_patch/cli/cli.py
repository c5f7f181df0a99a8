import typer

from simple_json_patch import __version__
import simple_json_patch.cli.patch as patch
import simple_json_patch.cli.demo as demo
from .util import CONSOLE


def create_cli() -> typer.Typer:
    app = typer.Typer(help='Apply RFC 6902 JSON Patch documents to JSON files')

    app.add_typer(patch.app, name='patch', help='Apply, check and compute JSON Patch documents')
    app.add_typer(demo.app, name='demo', help='Walkthroughs on typed records')

    @app.command('version')
    def version():
        """
        Print the package version.
        """
        CONSOLE.print(__version__)

    return app


def main():
    app = create_cli()

    app()


if __name__ == '__main__':
    main()
