"""
Command-line entry point: ``vlurp <source> [options]``.
"""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..models import FetchConfig, FilterSpec
from ..infrastructure.error_handler import VlurpError
from .api import RepositoryFetcher


console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="Fetch GitHub repositories and gists, keeping only the files you ask for.",
    add_completion=False,
)


@app.command()
def main(
    source: str = typer.Argument(..., help="user/repo or a GitHub/Gist URL"),
    root: Optional[Path] = typer.Option(
        None, "-d", "--root", help="Root directory; content lands in <root>/<user>/<repo>"
    ),
    filters: Optional[List[str]] = typer.Option(
        None, "-f", "--filter",
        help="Glob pattern to keep; prefix with ! to exclude (default: .claude/** and CLAUDE.md)"
    ),
    force: bool = typer.Option(False, "--force", "-y", help="Overwrite an existing target without asking"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Fetch SOURCE into ./<user>/<repo> (or <root>/<user>/<repo>)."""

    spec = FilterSpec.of(filters) if filters else FilterSpec.default()
    config = FetchConfig(source_dir=root, filter_spec=spec, force_overwrite=force)
    fetcher = RepositoryFetcher(config, verbose=verbose)

    try:
        descriptor = fetcher.locate(source)
        target = fetcher.target_for(descriptor)

        status = fetcher.check_target(target)
        if status.exists and status.file_count and not force:
            typer.echo(f"{target} already exists with {status.file_count} entries.")
            if not typer.confirm("Overwrite it?", default=False):
                typer.echo("Aborted.")
                raise typer.Exit(code=1)
            force = True

        with console.status(f"vlurping {descriptor.display_name}..."):
            outcome = asyncio.run(fetcher.fetch(
                descriptor.tarball_location, target, force_overwrite=force
            ))

    except VlurpError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    console.print(f"[green]Successfully vlurped {descriptor.display_name}[/green]")
    console.print(f"  Location: {outcome.target}", highlight=False)
    if spec:
        console.print(f"  Filters: {len(spec)} pattern(s) applied", highlight=False)

    tree = fetcher.render_tree(outcome.target)
    if tree:
        console.print()
        console.print(tree, markup=False, highlight=False)

    console.print(f"[cyan]vlurped {outcome.file_count} files to {outcome.target}[/cyan]")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
