"""Command line interface for libaosc."""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from libaosc.arch import aosc_branch, get_arch_name
from libaosc.constants import DATA_DIR, DEFAULT_BRANCH, DEFAULT_MIRROR
from libaosc.errors import FetchPackagesError
from libaosc.fetcher import FetchPackages, FetchPackagesAsync
from libaosc.models import Packages
from libaosc.storage import load_packages

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(help="Fetch and inspect AOSC OS package indexes.")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _print_packages(packages: Packages, show: int) -> None:
    console.print(f"Found [bold]{len(packages)}[/bold] packages")
    if show <= 0 or not len(packages):
        return

    table = Table("Package", "Version", "Architecture", "Size", "Installed-Size")
    for package in packages.root[:show]:
        table.add_row(
            package.name,
            package.version,
            package.architecture,
            str(package.size),
            str(package.installed_size),
        )
    console.print(table)


@app.command()
def fetch(
    arch: str = typer.Argument(None, help="Architecture to fetch. Defaults to the host's."),
    branch: str = typer.Argument(DEFAULT_BRANCH, help="Repository branch"),
    dest: Path = typer.Option(DATA_DIR, "--dest", "-d", help="Directory to save the Packages file in"),
    mirror: str = typer.Option(DEFAULT_MIRROR, "--mirror", "-m", help="Mirror base URL"),
    compress: bool = typer.Option(True, "--compress/--no-compress", help="Download Packages.xz"),
    use_async: bool = typer.Option(False, "--async/--sync", help="Use the asyncio fetcher"),
    show: int = typer.Option(1, "--show", help="Number of packages to print"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Download and parse the Packages index of a branch."""
    _setup_logging(verbose)
    if arch is None:
        arch = get_arch_name()
        if arch is None:
            err_console.print("[red]Unable to detect the host architecture, pass it explicitly.[/red]")
            raise typer.Exit(code=2)

    try:
        if use_async:
            fetcher = FetchPackagesAsync(compress, dest, mirror)
            packages = asyncio.run(fetcher.fetch_packages(arch, branch))
        else:
            fetcher = FetchPackages(compress, dest, mirror)
            packages = fetcher.fetch_packages(arch, branch)
    except FetchPackagesError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    _print_packages(packages, show)


@app.command()
def parse(
    path: Path = typer.Argument(..., help="Saved Packages file, plain or xz-compressed"),
    show: int = typer.Option(0, "--show", help="Number of packages to print"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Parse a previously downloaded Packages file."""
    _setup_logging(verbose)
    try:
        packages = load_packages(path)
    except FetchPackagesError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    _print_packages(packages, show)


@app.command()
def arch() -> None:
    """Show the detected architecture and AOSC OS branch of this host."""
    arch_name = get_arch_name()
    branch = aosc_branch()
    console.print(f"Architecture: {arch_name or 'unsupported'}")
    console.print(f"Branch: {branch.value if branch else 'unknown'}")
