"""CLI entry point for vaultprune."""

from __future__ import annotations

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler

from vaultprune import __version__
from vaultprune.deleter import BatchDeleter, ConsoleGate
from vaultprune.exceptions import SecretStoreError
from vaultprune.formatters import render_delete_plan, render_delete_report
from vaultprune.paths import as_directory, strip_leading
from vaultprune.store import VaultStore, make_client

console = Console()


def _abort(msg: str) -> None:
    console.print(f"[bold red]Error:[/] {msg}")
    sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    """Send package log records to stderr through Rich."""
    logger = logging.getLogger("vaultprune")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    )


def _normalize_root(path: str) -> str:
    """Validate *path* and return it in ``mount/dir/`` form."""
    stripped = strip_leading(path.strip())
    if not stripped:
        _abort("Path must not be empty.")
    return as_directory(stripped)


@click.command()
@click.argument("path")
@click.option("--addr", envvar="VAULT_ADDR", default=None, help="Vault address.")
@click.option("--token", envvar="VAULT_TOKEN", default=None, help="Vault token.")
@click.option("--namespace", envvar="VAULT_NAMESPACE", default=None, help="Vault namespace.")
@click.option(
    "--dry-run", is_flag=True, default=False, help="List the keys that would be deleted and exit."
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging.")
@click.version_option(__version__, "--version", "-V")
def main(
    path: str,
    addr: str | None,
    token: str | None,
    namespace: str | None,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Recursively delete every secret under PATH in Vault.

    All keys found under PATH are listed first and nothing is deleted until
    you answer "yes".  Both KV v1 and KV v2 mounts are supported.

    \b
    Examples:
      vaultprune secret/app/
      vaultprune --dry-run /kv/team/old-service
      VAULT_ADDR=https://vault:8200 vaultprune secret/app
    """
    _configure_logging(verbose)
    root = _normalize_root(path)

    store = VaultStore(make_client(addr, token, namespace), name=addr)
    deleter = BatchDeleter(store, ConsoleGate(), console=console)

    if dry_run:
        try:
            leaves = deleter.collect(root)
        except SecretStoreError as exc:
            _abort(str(exc))
            return
        if not leaves:
            _abort(f"can't find keys to delete: {root}")
            return
        console.print(render_delete_plan(leaves, root))
        console.print(f"\n[dim]Dry run: {len(leaves)} key(s) would be deleted.[/]")
        return

    try:
        report = deleter.delete_all(root)
    except SecretStoreError as exc:
        _abort(str(exc))
        return

    console.print(render_delete_report(report))
