"""CLI command for connectivity analysis."""

from rich.console import Console
from rich.table import Table
from rich import box

from ..core.config import ConnectivitySettings
from ..modules.connectivity import ConnectivityModule


def connectivity_command(args) -> int:
    """
    Compute a connectivity network from a settings file.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command-line arguments with:
        - config: Path - Connectivity settings YAML file
        - output_dir: Path, optional - Directory for the network file
        - method: str, optional - Method overriding the settings file

    Returns
    -------
    int
        Exit code, 0 on success
    """
    console = Console()

    if not args.config.exists():
        console.print(f"[red]Settings file not found: {args.config}[/red]")
        return 1

    settings = ConnectivitySettings.from_yaml(args.config)
    if args.method:
        settings = settings.model_copy(update={"method": args.method})

    console.print("\n[bold]neuroconn Connectivity[/bold]")
    console.print(f"Settings: {args.config}")
    console.print(f"Method: {settings.method}")
    console.print(f"Level: {'source' if settings.do_source_loc else 'sensor'}\n")

    module = ConnectivityModule(output_dir=args.output_dir)
    result = module.process(settings, name=args.config.stem)

    table = Table(title="Result", box=box.SIMPLE)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in result.metadata.items():
        table.add_row(key, str(value))
    table.add_row("time", f"{result.execution_time_seconds:.2f}s")
    console.print(table)

    for warning in result.warnings:
        console.print(f"[yellow]{warning}[/yellow]")
    for error in result.errors:
        console.print(f"[red]{error}[/red]")
    for path in result.output_files:
        console.print(f"Saved: {path}")

    if result.success:
        console.print("[green]Done[/green]")
        return 0
    return 1
