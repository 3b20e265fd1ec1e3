import json
import typing as t
from pathlib import Path

import typer
from rich import print
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import config_loader
from .agent import status_check
from .agent.swanctl import SwanctlRunner
from .agent.vici_control import ViciController
from .config_template import DEFAULT_CONFIG_TEMPLATE, create_minimal_config
from .errors import ExternalProcessFailure, SwanUIError
from .logging_config import configure_logging
from .schema import SwanUIConfig
from .swanctl_parsers import list_conns, list_sas, stats

app = typer.Typer(
    add_completion=False,
    help="""
strongSwan status and control backend

By default the CLI reads 'swanui.config.yaml' from your current directory
when it exists and uses built-in defaults otherwise.
Use --config-file to specify a different config file.
"""
)

INPUT_FILE_HELP = "Parse saved swanctl output from this file instead of running swanctl"


def _config(ctx: typer.Context) -> SwanUIConfig:
    return ctx.obj["config"]


def _runner(ctx: typer.Context) -> SwanctlRunner:
    cfg = _config(ctx)
    return SwanctlRunner(binary=cfg.swanctl.binary, timeout=cfg.swanctl.timeout_seconds)


def _controller(ctx: typer.Context) -> ViciController:
    cfg = _config(ctx)
    return ViciController(socket_path=cfg.vici.socket_path, timeout=cfg.vici.timeout_seconds)


def _fail(e: Exception) -> t.NoReturn:
    print(f"[red]Error:[/red] {escape(str(e))}")
    if isinstance(e, ExternalProcessFailure) and e.output:
        typer.echo(e.output.rstrip())
    raise typer.Exit(code=1)


@app.callback()
def _default(
    ctx: typer.Context,
    config_file: t.Optional[Path] = typer.Option(
        None, exists=True, readable=True, help=f"Path to {config_loader.DEFAULT_CONFIG_FILENAME}"
    ),
    log_level: t.Optional[str] = typer.Option(None, help="Override logging.level from the config"),
):
    """Load configuration and set up logging for every command."""
    try:
        cfg = config_loader.resolve_config(config_file)
    except ValueError as e:
        print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)
    configure_logging(log_level or cfg.logging.level.value)
    ctx.obj = {"config": cfg}


@app.command()
def init(
    output: Path = typer.Option(Path(config_loader.DEFAULT_CONFIG_FILENAME), help="Where to write the template"),
    minimal: bool = typer.Option(False, help="Strip comments and blank lines"),
    force: bool = typer.Option(False, help="Overwrite an existing file"),
):
    """Write a configuration template."""
    if output.exists() and not force:
        print(f"[yellow]{output} already exists; use --force to overwrite.[/yellow]")
        raise typer.Exit(code=1)
    text = create_minimal_config(DEFAULT_CONFIG_TEMPLATE) if minimal else DEFAULT_CONFIG_TEMPLATE
    output.write_text(text, encoding="utf-8")
    print(f"[green]Created config at[/green] {output}")


@app.command()
def validate_config(
    config_file: Path = typer.Argument(..., exists=True, readable=True, help="Path to configuration file to validate"),
):
    """Validate a configuration file against the schema.

    Examples:
        swanui validate-config swanui.config.yaml
    """
    console = Console()
    try:
        cfg = config_loader.load_config(config_file)
    except ValueError as e:
        console.print(Panel.fit(
            f"[bold red]✗ Configuration validation failed[/bold red]\n\n{e}",
            title="[red]Validation Error[/red]",
            border_style="red",
        ))
        raise typer.Exit(code=1)

    console.print(Panel.fit(
        f"[bold green]✓ Configuration is valid![/bold green]\n\n"
        f"[dim]Summary:[/dim]\n"
        f"  • Listen: {cfg.server.host}:{cfg.server.port}\n"
        f"  • swanctl: {cfg.swanctl.binary} (timeout {cfg.swanctl.timeout_seconds:g}s)\n"
        f"  • VICI socket: {cfg.vici.socket_path}\n"
        f"  • Schema version: v{cfg.version}",
        title="[green]Validation Passed[/green]",
        border_style="green",
    ))


@app.command()
def serve(
    ctx: typer.Context,
    host: t.Optional[str] = typer.Option(None, help="Override server.host"),
    port: t.Optional[int] = typer.Option(None, help="Override server.port"),
):
    """Run the HTTP backend."""
    import uvicorn

    from .web.app import create_app

    cfg = _config(ctx)
    bind_host = host or cfg.server.host
    bind_port = port or cfg.server.port
    print(f"[bold]swanui backend listening on {bind_host}:{bind_port}[/bold]")
    uvicorn.run(create_app(cfg), host=bind_host, port=bind_port, log_config=None)


@app.command()
def children(
    ctx: typer.Context,
    input_file: t.Optional[Path] = typer.Option(None, exists=True, readable=True, help=INPUT_FILE_HELP),
):
    """List configured children (from --list-conns, falling back to --list-sas)."""
    if input_file is not None:
        names = list_conns.parse_children(input_file.read_text(encoding="utf-8"))
    else:
        names = status_check.collect_children(_runner(ctx))
    for name in names:
        typer.echo(name)


@app.command()
def active(
    ctx: typer.Context,
    input_file: t.Optional[Path] = typer.Option(None, exists=True, readable=True, help=INPUT_FILE_HELP),
):
    """List installed children from --list-sas."""
    try:
        if input_file is not None:
            names = list_sas.parse_active(input_file.read_text(encoding="utf-8"))
        else:
            names = status_check.collect_active(_runner(ctx))
    except SwanUIError as e:
        _fail(e)
    for name in names:
        typer.echo(name)


@app.command()
def status(
    ctx: typer.Context,
    input_file: t.Optional[Path] = typer.Option(None, exists=True, readable=True, help=INPUT_FILE_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print the status mapping as JSON"),
):
    """Show per-child traffic counters."""
    try:
        if input_file is not None:
            result = stats.parse_status(input_file.read_text(encoding="utf-8"))
        else:
            result = status_check.collect_status(_runner(ctx))
    except SwanUIError as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps(stats.status_to_dict(result), indent=2, sort_keys=True))
        return

    if not result:
        print("[yellow]No installed children found.[/yellow]")
        return

    table = Table(title="strongSwan Children", show_header=True, header_style="bold cyan")
    table.add_column("Child", style="white")
    table.add_column("Status", style="white")
    table.add_column("In bytes", justify="right")
    table.add_column("In pkts", justify="right")
    table.add_column("Out bytes", justify="right")
    table.add_column("Out pkts", justify="right")
    for name in sorted(result):
        st = result[name]
        table.add_row(
            name,
            "[green]ACTIVE[/green]" if st.active else "[red]DOWN[/red]",
            f"{st.in_bytes:,}",
            f"{st.in_pkts:,}",
            f"{st.out_bytes:,}",
            f"{st.out_pkts:,}",
        )
    Console().print(table)


@app.command()
def debug_active(
    ctx: typer.Context,
    input_file: t.Optional[Path] = typer.Option(None, exists=True, readable=True, help=INPUT_FILE_HELP),
):
    """Show which --list-sas lines matched the active-child rules."""
    if input_file is not None:
        text = list_sas.render_trace(input_file.read_text(encoding="utf-8"))
    else:
        text = status_check.collect_debug_trace(_runner(ctx))
    typer.echo(text)


@app.command()
def initiate(ctx: typer.Context, name: str = typer.Argument(..., help="Child SA name")):
    """Bring up a child SA via VICI."""
    try:
        _controller(ctx).initiate(name)
    except SwanUIError as e:
        _fail(e)
    print(f"[green]initiated {name}[/green]")


@app.command()
def terminate(ctx: typer.Context, name: str = typer.Argument(..., help="Child SA name")):
    """Tear down a child SA via VICI."""
    try:
        _controller(ctx).terminate(name)
    except SwanUIError as e:
        _fail(e)
    print(f"[green]terminated {name}[/green]")
