import logging
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from snippetstore import __version__
from snippetstore.errors import InvalidArgumentError, SnippetStoreError
from snippetstore.store import SnippetStore, initialize, validate_name
from snippetstore.utils.logging_utils import rich_log, setup_logging, is_debug_mode

# Errors go to stderr, snippet output goes through echo_raw on stdout
err_console = Console(stderr=True)

app = typer.Typer(
    name="snippetstore",
    help="SnippetStore - Simple application for reading and writing short notes or snippets",
    no_args_is_help=True,
    add_completion=False,
)

def configure_logging(debug: bool = False):
    """Configure logging based on debug mode."""
    if debug or is_debug_mode():
        setup_logging(level=logging.DEBUG)
    else:
        setup_logging(level=logging.WARNING)

def exit_with_error(error: SnippetStoreError):
    """Report a failed operation on stderr and exit non-zero."""
    rich_log("debug", f"{type(error).__name__}: {error}")
    err_console.print(f"[red]Error:[/red] {escape(str(error))}", soft_wrap=True, highlight=False)
    raise typer.Exit(1)

def echo_raw(text: str, nl: bool = True):
    """Echo stored text unchanged; click would otherwise strip ANSI codes when stdout is not a tty."""
    typer.echo(text, nl=nl, color=True)

def version_callback(value: bool):
    if value:
        typer.echo(f"SnippetStore {__version__}")
        raise typer.Exit()

@app.callback()
def main_callback(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    version: bool = typer.Option(False, "--version", callback=version_callback, is_eager=True,
                                 help="Show the version and exit"),
) -> None:
    """Simple application for reading and writing short notes or snippets."""
    configure_logging(debug)

@app.command(name="init")
def init_command(
    snippetstore_dir: Optional[str] = typer.Argument(
        None, help="Full path to the snippet folder (default: ~/.local/share/snippetstore)"),
) -> None:
    """Initialize SnippetStore directory."""
    try:
        directory = initialize(snippetstore_dir)
    except SnippetStoreError as e:
        exit_with_error(e)
    typer.echo(f"SnippetStore directory: {directory}")

@app.command(name="read")
def read_command(
    snippet_name: Optional[str] = typer.Argument(None, help="Name of the snippet to read"),
) -> None:
    """Read content of the specified snippet to standard output."""
    try:
        validate_name(snippet_name)
        content = SnippetStore().read(snippet_name)
    except SnippetStoreError as e:
        exit_with_error(e)
    typer.echo("Snippets content:")
    echo_raw(content, nl=False)

@app.command(name="new")
def new_command(
    snippet_name: Optional[str] = typer.Option(None, "-n", "--name", help="Name of the snippet"),
    content: Optional[str] = typer.Option(None, "-c", "--content", help="Text content of the snippet"),
) -> None:
    """Create a new snippet, replacing any snippet with the same name."""
    try:
        validate_name(snippet_name)
        if content is None:
            raise InvalidArgumentError("Snippet content is required (-c/--content)")
        SnippetStore().create(snippet_name, content)
    except SnippetStoreError as e:
        exit_with_error(e)
    typer.echo("Saved new snippet")

@app.command(name="list")
def list_command() -> None:
    """List out all snippets."""
    try:
        snippets = SnippetStore().list()
    except SnippetStoreError as e:
        exit_with_error(e)
    for idx, name in snippets:
        echo_raw(f"{idx}: {name}")

def main():
    app()

if __name__ == "__main__":
    main()
