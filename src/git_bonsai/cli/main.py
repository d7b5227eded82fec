"""Main CLI interface for Git Bonsai."""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from git_bonsai import __version__
from git_bonsai.config import BonsaiConfig
from git_bonsai.core.errors import BonsaiError
from git_bonsai.core.layout import BonsaiLayout
from git_bonsai.core.repository import BonsaiRepository
from git_bonsai.models.commit import Branch, Commit
from git_bonsai.render.svg import SvgRenderer

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_config(config_path: Optional[str], max_commits: Optional[int]) -> BonsaiConfig:
    try:
        config = BonsaiConfig.load(config_path) if config_path else BonsaiConfig()
    except ValidationError as e:
        console.print(f"[red]Error: Invalid config file {config_path}:[/red]")
        console.print(escape(str(e)), style="red")
        raise click.Abort() from e
    if max_commits is not None:
        config.git.max_commits = max_commits
    return config


def read_repository_or_exit(
    repo_path: str, config: BonsaiConfig
) -> Tuple[Dict[str, Commit], Dict[str, Branch]]:
    """Read the repository or exit with an error message."""
    repository = BonsaiRepository(Path(repo_path).resolve(), config)
    if not repository.exists():
        console.print(f"[red]Error: Not a git repository: {repository.project_root}[/red]")
        raise click.Abort()

    try:
        return repository.read()
    except BonsaiError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort() from e


repo_path_option = click.option(
    "--repo-path",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Path to the git repository",
)
max_commits_option = click.option(
    "--max-commits", type=int, default=None, help="Maximum number of commits to read"
)
config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON configuration file",
)
verbose_option = click.option(
    "--verbose", "-v", is_flag=True, help="Show debug logging"
)


@click.group()
@click.version_option(version=__version__)
@verbose_option
def main(verbose: bool):
    """Git Bonsai - grow a bonsai tree from your commit history."""
    _configure_logging(verbose)


@main.command()
@repo_path_option
@max_commits_option
@config_option
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False), default="bonsai.svg", help="SVG file to write"
)
@verbose_option
def render(
    repo_path: str,
    max_commits: Optional[int],
    config_path: Optional[str],
    output: str,
    verbose: bool,
):
    """Render the repository as a bonsai SVG."""
    if verbose:
        _configure_logging(verbose)
    config = _load_config(config_path, max_commits)
    commits, branches = read_repository_or_exit(repo_path, config)

    try:
        nodes = BonsaiLayout(config).generate_layout(commits, branches)
    except BonsaiError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort() from e

    path = SvgRenderer(config, branches).save(nodes, output)
    console.print(
        f"[green]🌳 Grew a bonsai from {len(commits)} commits "
        f"and {len(branches)} branches: {path}[/green]"
    )


@main.command()
@repo_path_option
@max_commits_option
@config_option
@click.option("--json", "as_json", is_flag=True, help="Print nodes as JSON")
@verbose_option
def layout(
    repo_path: str,
    max_commits: Optional[int],
    config_path: Optional[str],
    as_json: bool,
    verbose: bool,
):
    """Show the computed position of every commit."""
    if verbose:
        _configure_logging(verbose)
    config = _load_config(config_path, max_commits)
    commits, branches = read_repository_or_exit(repo_path, config)

    try:
        nodes = BonsaiLayout(config).generate_layout(commits, branches)
    except BonsaiError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort() from e

    if as_json:
        payload = []
        for node in nodes:
            entry = node.model_dump(mode="json", exclude={"commit"})
            entry["message"] = node.commit.message
            entry["author"] = node.commit.author
            payload.append(entry)
        click.echo(json.dumps(payload, indent=2))
        return

    table = Table(title=f"Bonsai layout ({len(nodes)} nodes)")
    table.add_column("SHA", style="cyan")
    table.add_column("Role")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Angle", justify="right")
    table.add_column("Message")

    for node in nodes:
        table.add_row(
            node.commit.short_sha,
            node.role.value,
            f"{node.x:.1f}",
            f"{node.y:.1f}",
            f"{node.size:.1f}",
            f"{node.angle:.1f}",
            node.commit.message[:50],
        )

    console.print(table)


@main.command()
@repo_path_option
@max_commits_option
@verbose_option
def info(repo_path: str, max_commits: Optional[int], verbose: bool):
    """Show commits and branches that would make up the bonsai."""
    if verbose:
        _configure_logging(verbose)
    config = _load_config(None, max_commits)
    commits, branches = read_repository_or_exit(repo_path, config)

    console.print(f"[bold]Repository:[/bold] {Path(repo_path).resolve()}")
    console.print(f"[bold]Commits read:[/bold] {len(commits)}")
    console.print(f"[bold]Branches:[/bold] {len(branches)}")

    if not branches:
        return

    table = Table()
    table.add_column("Branch", style="green")
    table.add_column("Head", style="cyan")
    table.add_column("Main")
    table.add_column("Commits", justify="right")

    for branch in branches.values():
        labelled = sum(1 for c in commits.values() if c.branch_name == branch.name)
        table.add_row(
            branch.name,
            branch.head[:7],
            "yes" if branch.is_main else "",
            str(labelled),
        )

    console.print(table)


if __name__ == "__main__":
    main()
