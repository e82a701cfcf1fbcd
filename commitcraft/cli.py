"""CLI entry point for CommitCraft."""

import shlex
import subprocess
import traceback
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from commitcraft import __version__
from commitcraft.config import (
    CONFIG_FILE,
    create_config_file,
    get_editor,
    get_settings,
    load_settings,
    set_editor,
)
from commitcraft.errors import CommitCraftError, InvalidConfigError
from commitcraft.git import (
    GitRepository,
    add_with_exclude,
    create_needed_files,
    generate_commit_message,
    git_commit,
    git_push,
    stageable_files,
)
from commitcraft.utils import setup_logging

app = typer.Typer(
    name="commitcraft",
    help="Stage with exclusions, generate commit messages, commit and push.",
    add_completion=True,
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

# Lets git flags such as --amend pass through to git untouched
PASSTHROUGH = {"allow_extra_args": True, "ignore_unknown_options": True}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]CommitCraft[/bold] version {__version__}")
        raise typer.Exit()


@contextmanager
def handle_errors(ctx: typer.Context) -> Iterator[None]:
    """Turn CommitCraft errors into a red message and exit code 1."""
    try:
        yield
    except (CommitCraftError, TimeoutError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        if ctx.obj and ctx.obj.get("verbose"):
            err_console.print(escape(traceback.format_exc()))
        raise typer.Exit(1)


def _open_repo() -> GitRepository:
    settings = get_settings()
    return GitRepository.open(Path.cwd(), timeout=settings.git_timeout)


def _config_path(ctx: typer.Context) -> Path:
    return (ctx.obj or {}).get("config_path") or CONFIG_FILE


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """CommitCraft - a helper for the everyday git workflow.

    Stage files while excluding patterns, generate a commit message file
    from the repository state, commit with it and push.
    """
    ctx.obj = {"config_path": config, "verbose": verbose}
    setup_logging(verbose=verbose)

    with handle_errors(ctx):
        load_settings(config_path=config, force_reload=True)


@app.command("add-with-exclude")
def add_with_exclude_command(
    ctx: typer.Context,
    patterns: Optional[List[str]] = typer.Argument(None, help="Glob patterns to leave unstaged"),
    dry_run: bool = typer.Option(False, "--dry-run", "-d", help="Show what would be staged"),
) -> None:
    """Stage all changes except files matching the given patterns."""
    with handle_errors(ctx):
        result = add_with_exclude(_open_repo(), patterns or [], dry_run=dry_run)

    plan = result.plan
    if plan.is_empty:
        console.print("[yellow]No files to add or delete[/yellow]")
        return

    if dry_run:
        console.print(f"Would add {len(plan.included)} files:")
        for path in plan.included:
            console.print(f"  [green]+[/green] {escape(path)}")
        console.print(f"Would delete {len(plan.deletions)} files:")
        for path in plan.deletions:
            console.print(f"  [red]-[/red] {escape(path)}")
        console.print(f"Would exclude {plan.excluded_count} files")
        return

    console.print(f"[green]{result.summary()}[/green]")


@app.command(context_settings=PASSTHROUGH)
def commit(
    ctx: typer.Context,
    push: bool = typer.Option(False, "--push", "-p", help="Push after committing"),
    unsigned: bool = typer.Option(False, "--unsigned", "-u", help="Never GPG-sign the commit"),
    dry_run: bool = typer.Option(False, "--dry-run", "-d", help="Show what would be committed"),
) -> None:
    """Commit with the generated commit message file.

    Any extra arguments are passed on to git commit (and git push).
    """
    settings = get_settings()
    args = list(ctx.args)

    with handle_errors(ctx):
        repo = _open_repo()
        result = git_commit(
            repo,
            args,
            unsigned=unsigned,
            dry_run=dry_run,
            message_file=settings.commit_message_file,
        )

    if result.unsigned_fallback:
        console.print("[yellow]Warning: GPG signing not available or not configured. Creating unsigned commit.[/yellow]")
        console.print("[dim]To suppress this warning, use the --unsigned (-u) flag.[/dim]")

    if dry_run:
        console.print("Would commit with message:")
        console.print("---")
        console.print(escape(result.message))
        console.print("---")
        console.print("Would sign commit with -S flag" if result.sign else "Would create unsigned commit")
        if result.args:
            console.print(f"With additional args: {escape(str(result.args))}")
    else:
        if result.output:
            console.print(escape(result.output))
        console.print("[green]Commit successful[/green]")

    if push:
        _push(ctx, repo, args, dry_run)


def _push(ctx: typer.Context, repo: GitRepository, args: list[str], dry_run: bool) -> None:
    with handle_errors(ctx):
        output = git_push(repo, args, dry_run=dry_run)

    if dry_run:
        console.print("Would push to remote repository")
        if args:
            console.print(f"With args: {escape(str(args))}")
        return

    if output:
        console.print(escape(output))
    console.print("[green]Push successful[/green]")


@app.command(context_settings=PASSTHROUGH)
def push(
    ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", "-d", help="Show what would be pushed"),
) -> None:
    """Push to the remote; extra arguments are passed on to git push."""
    with handle_errors(ctx):
        repo = _open_repo()
    _push(ctx, repo, list(ctx.args), dry_run)


@app.command()
def generate(
    ctx: typer.Context,
    commit_type: Optional[str] = typer.Option(
        None,
        "--type",
        "-t",
        help="Commit type (prompted for when omitted)",
    ),
    no_commit_number: bool = typer.Option(
        False,
        "--no-commit-number",
        "-n",
        help="Leave the [N] commit number out of the header",
    ),
    no_edit: bool = typer.Option(False, "--no-edit", help="Do not open the editor afterwards"),
) -> None:
    """Generate the commit message file and open it in the editor."""
    settings = get_settings()
    types = settings.commit_types

    if commit_type is None:
        commit_type = Prompt.ask("Commit type", choices=types, default=types[0], console=console)

    with handle_errors(ctx):
        if commit_type not in types:
            raise InvalidConfigError("commit_type", commit_type, f"must be one of {', '.join(types)}")

        repo = _open_repo()
        create_needed_files(
            repo,
            message_file=settings.commit_message_file,
            commitignore_file=settings.commitignore_file,
        )
        path = generate_commit_message(
            repo,
            commit_type,
            no_commit_number=no_commit_number,
            commit_types=types,
            default_branch=settings.default_branch,
            message_file=settings.commit_message_file,
            commitignore_file=settings.commitignore_file,
        )

    console.print(f"[green]{escape(settings.commit_message_file)} created[/green]")

    if not no_edit:
        _open_editor(get_editor(), path)


def _open_editor(editor: str, path: Path) -> None:
    cmd = shlex.split(editor) + [str(path)]
    try:
        subprocess.run(cmd, check=False)
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] editor not found: {escape(editor)}")
        raise typer.Exit(1)


@app.command("list-status")
def list_status(ctx: typer.Context) -> None:
    """List stageable files, one per line (used for shell completion)."""
    with handle_errors(ctx):
        files = stageable_files(_open_repo().read_status())

    for path in sorted(files):
        typer.echo(path)


@app.command()
def init(
    ctx: typer.Context,
    editor: str = typer.Argument("nano", help="Editor used for commit messages"),
) -> None:
    """Create the configuration file."""
    with handle_errors(ctx):
        path = create_config_file(editor, _config_path(ctx))
    console.print(f"[green]Configuration created at {escape(str(path))}[/green]")


@app.command("set-editor")
def set_editor_command(
    ctx: typer.Context,
    editor: str = typer.Argument(..., help="Editor used for commit messages"),
) -> None:
    """Change the editor used for commit messages."""
    with handle_errors(ctx):
        set_editor(editor, _config_path(ctx))
    console.print(f"[green]Editor set to {escape(editor)}[/green]")


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Show current configuration."""
    settings = get_settings()

    console.print(Panel("[bold]Current Configuration[/bold]", border_style="blue"))

    table = Table(show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("Config file", escape(str(_config_path(ctx))))
    table.add_row("Editor", escape(settings.editor))
    table.add_row("Default branch", escape(settings.default_branch))
    table.add_row("Commit types", escape(", ".join(settings.commit_types)))
    table.add_row("Commit message file", escape(settings.commit_message_file))
    table.add_row("Commit ignore file", escape(settings.commitignore_file))
    table.add_row("Git timeout", f"{settings.git_timeout}s")

    console.print(table)


if __name__ == "__main__":
    app()
