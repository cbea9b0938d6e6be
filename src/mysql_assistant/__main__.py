import typer
from typing import Optional
from rich import print
from rich.markup import escape
from .logging_setup import setup_logging
from .config import Defaults, Operation
from .command import build_command
from .prompts import ask_all, confirmation, typer_ask
from .runner import run_command, ExecutionError
from . import __version__
from . import store

app = typer.Typer(add_completion=False, help="MySQL Assistant CLI: export and import databases with mysqldump / mysql")


def _version_callback(value: Optional[bool]):
    if value:
        typer.echo(f"mysql-assistant {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    version: Optional[bool] = typer.Option(
        None, "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """Without a command, ask which operation to perform."""
    setup_logging(1 if verbose else 0)
    if ctx.invoked_subcommand is None:
        _transfer(None)


def _load_defaults() -> Defaults:
    try:
        return store.load_or_default()
    except store.ConfigError as e:
        print(f"[red]Cannot read configuration:[/] {escape(str(e))}")
        raise typer.Exit(code=1)


def exit_code_for(returncode: Optional[int]) -> int:
    """Child exit status as our own; killed by signal N becomes 128 + N, like a shell."""
    if not returncode:
        return 1
    if returncode < 0:
        return 128 - returncode
    return returncode


def _transfer(operation: Optional[Operation], *, dry_run: bool = False, assume_yes: bool = False) -> None:
    """Ask the questions, show the command, confirm and run it."""
    defaults = _load_defaults()
    answers = ask_all(defaults, operation)
    command = build_command(answers)
    label = "Import" if command.is_import else "Export"

    if dry_run:
        typer.echo(str(command))
        return
    if not assume_yes and not typer_ask(confirmation(str(command)), False):
        print("Abort.")
        return

    try:
        run_command(command)
    except ExecutionError as e:
        print(f"[red]{label} failed:[/]\n{escape(str(e))}")
        raise typer.Exit(code=exit_code_for(e.returncode))
    print(f"[bold green]{label} complete[/] -> [cyan]{escape(command.path)}[/]")


@app.command()
def export(
    dry_run: bool = typer.Option(False, "--dry-run", help="Only print the mysqldump command"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Run without asking for confirmation"),
):
    """Dump a database to a .sql file with mysqldump."""
    _transfer("export", dry_run=dry_run, assume_yes=yes)


@app.command("import")
def import_(
    dry_run: bool = typer.Option(False, "--dry-run", help="Only print the mysql command"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Run without asking for confirmation"),
):
    """Load a .sql file into a database with mysql."""
    _transfer("import", dry_run=dry_run, assume_yes=yes)


@app.command("config")
def config_cmd(
    key: Optional[str] = typer.Argument(None, help=f"One of: {', '.join(Defaults.key_names())}"),
    value: Optional[str] = typer.Argument(None, help="New default (true/false for the ask* settings)"),
):
    """Set a default answer, or list the current defaults."""
    if key is None:
        defaults = _load_defaults()
        print(f"Configuration file: [cyan]{escape(store.store_path())}[/]")
        for name, current in defaults.model_dump(by_alias=True).items():
            if name == "password" and current:
                current = "****"
            print(f"- [cyan]{name}[/]: {escape(str(current))}")
        return
    if value is None:
        raise typer.BadParameter(f"Missing value for {key}", param_hint="VALUE")

    try:
        store.set_default(key, value, _load_defaults())
    except store.ConfigError as e:
        print(f"[red]Configuration not saved:[/] {escape(str(e))}")
        raise typer.Exit(code=1)
    print(f'The default configuration for "{escape(key)}" is now set to "{escape(value)}"')


if __name__ == "__main__":
    app()
