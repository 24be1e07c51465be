"""CLI entrypoints for vaultsite build tooling."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from .builder import BuildReport, SiteBuilder
from .config import Config, load_config
from .content import FrontMatterError
from .media import ResizeError
from .vault import Vault

console = Console()
error_console = Console(stderr=True)
app = typer.Typer(help="Incremental static site builder for Markdown vaults.")

ConfigPathOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to a vaultsite.yml configuration file."),
]
VerboseFlag = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Log per-file activity such as deletions."),
]


@app.command()
def build(
    source: Annotated[Path, typer.Argument(help="Vault directory to read.")],
    destination: Annotated[Path, typer.Argument(help="Site directory to write.")],
    config_path: ConfigPathOption = None,
    base: Annotated[
        Optional[str],
        typer.Option("--base", help="URL prefix of the site, e.g. '/docs/'."),
    ] = None,
    resizer: Annotated[
        Optional[str],
        typer.Option("--resizer", help="Image resize backend: 'pillow' or 'command'."),
    ] = None,
    verbose: VerboseFlag = False,
) -> None:
    """Build DESTINATION from SOURCE, rewriting only what changed."""
    _configure_logging(verbose)
    config = _load(config_path, source=source, destination=destination, base=base, resizer=resizer)

    try:
        report = SiteBuilder(config).run()
    except (ResizeError, FrontMatterError, OSError, ValueError) as exc:
        console.print(f"[bold red]Build failed[/]: {exc}")
        raise typer.Exit(code=1) from exc

    _print_build_summary(report)


@app.command()
def scan(
    source: Annotated[Path, typer.Argument(help="Vault directory to read.")],
    cache: Annotated[
        Optional[Path],
        typer.Option("--cache", help="Metadata cache to reuse and refresh."),
    ] = None,
    verbose: VerboseFlag = False,
) -> None:
    """Scan SOURCE and report the files it contains."""
    _configure_logging(verbose)
    if not source.is_dir():
        console.print(f"[bold red]Vault not found[/]: {source}")
        raise typer.Exit(code=1)

    try:
        vault = Vault.load(source, cache)
    except (FrontMatterError, OSError) as exc:
        console.print(f"[bold red]Scan failed[/]: {exc}")
        raise typer.Exit(code=1) from exc

    console.print(
        f"[bold green]Vault[/]: total={vault.stats.total}, updated={vault.stats.updated}"
    )
    counts = vault.count_by_kind()
    console.print(
        "[bold blue]Kinds[/]: "
        + ", ".join(f"{kind.value}={count}" for kind, count in counts.items())
    )


def _load(
    config_path: Path | None,
    *,
    source: Path,
    destination: Path,
    base: str | None,
    resizer: str | None,
) -> Config:
    try:
        config = load_config(config_path) if config_path is not None else Config()
        updates: dict[str, object] = {"source_dir": source, "output_dir": destination}
        if base is not None:
            updates["base_url"] = base
        data = config.model_dump()
        data.update(updates)
        if resizer is not None:
            data["responsive"]["resizer"] = resizer
        return Config.model_validate(data)
    except FileNotFoundError as exc:
        console.print(f"[bold red]Configuration not found[/]: {exc}")
        raise typer.Exit(code=1) from exc
    except ValidationError as exc:
        console.print(f"[bold red]Invalid configuration[/]: {exc}")
        raise typer.Exit(code=1) from exc


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False, show_time=False)],
        force=True,
    )


def _print_build_summary(report: BuildReport) -> None:
    console.print(
        f"[bold green]Vault[/]: total={report.vault.total}, updated={report.vault.updated}"
    )
    console.print(
        "[bold green]Site[/]: "
        f"total={report.site.total}, updated={report.site.updated}, deleted={report.site.deleted}"
    )
    console.print(
        f"[bold blue]Pages[/]: {report.pages} rendered in {report.duration_seconds:.2f}s"
    )
