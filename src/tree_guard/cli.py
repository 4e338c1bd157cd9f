"""CLI entry points for tree-guard."""

import logging
import sys
from typing import Any, Callable, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tree_guard.config import load_config
from tree_guard.core.clean_tree import CleanTreeChecker
from tree_guard.core.hooks import HookInstaller
from tree_guard.core.repository import (
    GitRepository,
    NotAGitRepositoryError,
    TreeGuardError,
)
from tree_guard.core.todo_scan import TodoScanner
from tree_guard.models.check_result import CheckStatus, CleanTreeResult

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

LISTING_STATUSES = {
    CheckStatus.STAGED_CHANGES,
    CheckStatus.UNSTAGED_CHANGES,
    CheckStatus.UNTRACKED_FILES,
    CheckStatus.BEHIND_UPSTREAM,
    CheckStatus.AHEAD_OF_UPSTREAM,
}


class UnknownArgMixin:
    """Reports unrecognized options as ``Unknown arg: <arg>`` (exit status 2)."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)  # type: ignore[misc]
        except click.NoSuchOption as e:
            raise click.UsageError(f"Unknown arg: {e.option_name}", ctx=ctx) from e


class GuardCommand(UnknownArgMixin, click.Command):
    """Command with tree-guard's usage error wording."""

    allow_extra_args = True

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        rest = super().parse_args(ctx, args)
        if rest and not ctx.resilient_parsing:
            raise click.UsageError(f"Unknown arg: {rest[0]}", ctx=ctx)
        return rest


class GuardGroup(UnknownArgMixin, click.Group):
    """Group with tree-guard's usage error wording."""


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr; debug level when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def common_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add --config and --verbose to a command."""
    func = click.option(
        "-v",
        "--verbose",
        is_flag=True,
        help="Log git commands and check results to stderr.",
    )(func)
    func = click.option(
        "-c",
        "--config",
        "config_path",
        type=click.Path(exists=True, dir_okay=False),
        help="Path to a tree-guard TOML config file.",
    )(func)
    return func


def report_failure(result: CleanTreeResult) -> None:
    """
    Print a failed check.

    Listings go to stdout, the ERROR line to stderr.
    """
    if result.status not in LISTING_STATUSES:
        err_console.print(f"[bold red]ERROR:[/bold red] {escape(result.message)}")
        if result.hint:
            err_console.print(escape(result.hint), style="dim")
        return

    console.print()
    console.print(escape(result.message), style="bold yellow")

    if result.porcelain:
        console.print("Run 'git status --porcelain' to inspect.")
        console.print()
        for line in result.porcelain:
            click.echo(line)
    else:
        for path in result.paths:
            click.echo(path)

    err_console.print(f"[bold red]ERROR:[/bold red] {escape(result.hint or result.message)}")


@click.command("check", cls=GuardCommand, context_settings=CONTEXT_SETTINGS)
@click.option(
    "--allow-untracked",
    is_flag=True,
    help="Do not fail on untracked, non-ignored files.",
)
@click.option(
    "--require-upstream",
    is_flag=True,
    help="Fail unless the branch has an upstream and is in sync with it.",
)
@click.option(
    "--branch",
    metavar="BRANCH",
    help="Fail unless BRANCH is checked out.",
)
@common_options
def check_clean(
    allow_untracked: bool,
    require_upstream: bool,
    branch: Optional[str],
    config_path: Optional[str],
    verbose: bool,
) -> None:
    """Check that the git working tree is clean before a CI run.

    Fails on staged changes, unstaged changes and untracked files, and
    optionally on the wrong branch or a branch out of sync with upstream.

    Exit status is 0 when clean, 1 when a check fails, 2 on usage errors.

    Example:
        check-git-clean
        check-git-clean --allow-untracked
        check-git-clean --require-upstream --branch main
    """
    configure_logging(verbose)
    config = load_config(config_path)

    checker = CleanTreeChecker(
        config=config.with_clean_flags(
            allow_untracked=allow_untracked,
            require_upstream=require_upstream,
            branch=branch,
        ),
        timeout_seconds=config.git.timeout_seconds,
    )
    result = checker.check()

    if result.is_clean:
        console.print(f"[bold green]{escape(result.message)}[/bold green]")
        return

    report_failure(result)
    raise SystemExit(1)


@click.command("todos", cls=GuardCommand, context_settings=CONTEXT_SETTINGS)
@common_options
def scan_todos(config_path: Optional[str], verbose: bool) -> None:
    """Block a commit when staged *.py or *.js files contain TODO.

    Matching is case-insensitive and only looks at staged content.
    Meant to run as a git pre-commit hook.
    """
    configure_logging(verbose)
    config = load_config(config_path)

    scanner = TodoScanner(config=config.todo, timeout_seconds=config.git.timeout_seconds)
    try:
        result = scanner.scan()
    except TreeGuardError as e:
        raise click.ClickException(str(e)) from e

    if result.is_clean:
        return

    console.print(
        f"[bold red]ERROR:[/bold red] Found {escape(result.marker)}s in staged files:"
    )
    for match in result.matches:
        click.echo(str(match))
    console.print(
        f"[dim]{len(result.matches)} line(s) in {len(result.files)} file(s)[/dim]"
    )
    console.print(
        f"[yellow]Please remove {escape(result.marker)}s (or unstage them) before commit.[/yellow]"
    )
    raise SystemExit(1)


@click.group(cls=GuardGroup, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="tree-guard")
def main() -> None:
    """tree-guard - git hygiene guards for CI and pre-commit.

    Check that a working tree is clean before CI, and keep TODO markers
    out of commits.
    """


main.add_command(check_clean)
main.add_command(scan_todos)


@main.command("status", cls=GuardCommand)
@click.option(
    "--branch",
    metavar="BRANCH",
    help="Branch expected to be checked out.",
)
@common_options
def show_status(branch: Optional[str], config_path: Optional[str], verbose: bool) -> None:
    """Show the result of every clean-tree check without failing.

    Example:
        tree-guard status
        tree-guard status --branch main
    """
    configure_logging(verbose)
    config = load_config(config_path)
    clean_config = config.with_clean_flags(branch=branch)

    checker = CleanTreeChecker(config=clean_config, timeout_seconds=config.git.timeout_seconds)
    try:
        results = checker.survey()
    except NotAGitRepositoryError as e:
        raise click.ClickException(str(e)) from e

    table = Table(title="Working Tree", show_header=True, header_style="bold cyan")
    table.add_column("Check", style="bold", no_wrap=True)
    table.add_column("Result", no_wrap=True)
    table.add_column("Details")

    for name, result in results:
        if result.is_clean:
            status_style = "[green]ok[/green]"
        elif result.status == CheckStatus.UNTRACKED_FILES and clean_config.allow_untracked:
            status_style = "[yellow]allowed[/yellow]"
        elif result.status == CheckStatus.NO_UPSTREAM and not clean_config.require_upstream:
            status_style = "[yellow]no upstream[/yellow]"
        else:
            status_style = f"[red]{result.status.value.replace('_', ' ')}[/red]"

        details = [result.message, *result.paths]
        table.add_row(name, status_style, escape("\n".join(details)))

    console.print(table)


@main.command("install-hook", cls=GuardCommand)
@click.option(
    "-f",
    "--force",
    is_flag=True,
    help="Replace an existing pre-commit hook not written by tree-guard.",
)
def install_hook(force: bool) -> None:
    """Install a pre-commit hook that runs the TODO scanner.

    Example:
        tree-guard install-hook
        tree-guard install-hook --force
    """
    try:
        installer = HookInstaller(GitRepository())
        path = installer.install(force=force)
    except TreeGuardError as e:
        raise click.ClickException(str(e)) from e

    console.print(f"[bold green]Installed pre-commit hook:[/bold green] {escape(str(path))}")


if __name__ == "__main__":
    main()
