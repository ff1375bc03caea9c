"""
CLI Entry Point for Generals Grid.

Provides commands for:
- Rendering the role x tier grid for a set of picks
- Checking why a unit is blocked
- Building a team interactively
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from .catalog import UnknownEntryError
from .data_loader import CatalogLoadError, DataLoader
from .engine import SelectionEngine
from .models import Status, Tier, ToggleOutcome

# Setup rich console
console = Console()

# Setup logging (stderr, so --json output stays parseable)
logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
    handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
)
logger = logging.getLogger(__name__)

# Create Typer app
app = typer.Typer(
    name="generals-grid",
    help="Pick a five-general team: one per role, one per tier, no repeated names",
    add_completion=False,
)

TIER_STYLES: dict[Tier, str] = {
    Tier.T0: "gold1",
    Tier.T1: "indian_red1",
    Tier.T2: "medium_purple1",
    Tier.T3: "sky_blue1",
    Tier.T4: "grey70",
}

OUTCOME_MESSAGES: dict[ToggleOutcome, str] = {
    ToggleOutcome.ADDED: "[green]Added[/]",
    ToggleOutcome.SWAPPED: "[cyan]Swapped in[/]",
    ToggleOutcome.REMOVED: "[yellow]Removed[/]",
    ToggleOutcome.BLOCKED: "[red]Blocked[/]",
}

LEGEND = (
    "[bold white on dark_orange3]● selected[/]   "
    "[gold1]available / swap[/]   "
    "[grey30]blocked[/]"
)


@app.callback()
def cli(
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="-v for load info, -vv for every pick"),
):
    """Pick a five-general team: one per role, one per tier, no repeated names."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG if verbose > 1 else logging.INFO)


def create_engine(catalog_path: Optional[Path] = None) -> SelectionEngine:
    """Load the catalog and wrap it in a fresh engine."""
    try:
        catalog = DataLoader(catalog_path).load_catalog()
    except (FileNotFoundError, CatalogLoadError) as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)
    return SelectionEngine(catalog)


def parse_pick(value: str) -> tuple[str, str, str]:
    """Split a ROLE:TIER:UNIT pick argument."""
    parts = value.split(":", 2)
    if len(parts) != 3 or not all(p.strip() for p in parts):
        raise typer.BadParameter(f"Expected ROLE:TIER:UNIT, got '{value}'")
    role, tier, unit = (p.strip() for p in parts)
    return role, tier.upper(), unit


def apply_toggle(
    engine: SelectionEngine,
    role: str,
    tier: str,
    unit: str,
    echo: bool = True,
) -> ToggleOutcome:
    """Toggle one entry and report the outcome on the console."""
    entry = engine.catalog.entry(role, tier, unit)
    reason = engine.block_reason(entry)
    outcome = engine.toggle(entry)
    if echo:
        message = f"{OUTCOME_MESSAGES[outcome]} {entry}"
        if reason is not None:
            message += f" [dim]({reason.describe()})[/]"
        console.print(message)
    return outcome


def apply_picks(engine: SelectionEngine, picks: list[str], echo: bool = True) -> None:
    for value in picks:
        try:
            apply_toggle(engine, *parse_pick(value), echo=echo)
        except UnknownEntryError as e:
            console.print(f"[red]Error: {e}[/]")
            raise typer.Exit(1)


def render_cell(units: list[tuple[str, Status]], tier: Tier) -> Text:
    text = Text()
    for i, (unit, status) in enumerate(units):
        if i:
            text.append("\n")
        if status == Status.SELECTED:
            text.append(f"● {unit}", style="bold white on dark_orange3")
        elif status == Status.DIMMED:
            text.append(f"  {unit}", style="grey30")
        else:
            text.append(f"  {unit}", style=TIER_STYLES[tier])
    return text


def render_grid(engine: SelectionEngine) -> Table:
    """Build the role x tier table, shading tiers already used by the team."""
    catalog = engine.catalog
    used = engine.used_tiers()
    counter_style = "green" if engine.is_full() else "dark_orange"

    table = Table(
        title=catalog.name,
        caption=f"[{counter_style}]Selected: {engine.count()}/{engine.team_size}[/]\n{LEGEND}",
        show_lines=True,
    )
    table.add_column("Role", style="bold", no_wrap=True)
    for tier in catalog.tiers:
        header_style = "dim" if tier in used else f"bold {TIER_STYLES[tier]}"
        table.add_column(f"{tier.value}\n{tier.label}", header_style=header_style, no_wrap=True)

    for role, row in engine.board().items():
        icon = catalog.role_icon(role)
        occupied = engine.pick_for(role) is not None
        label = Text(f"{icon} {role}" if icon else role, style="dark_orange" if occupied else "")
        table.add_row(label, *(render_cell(row[tier], tier) for tier in catalog.tiers))
    return table


def render_team(engine: SelectionEngine) -> None:
    if not engine.count():
        console.print("[dim]No generals selected.[/]")
        return
    table = Table(title="Team")
    table.add_column("Role", style="cyan")
    table.add_column("Tier", style="yellow")
    table.add_column("General", style="green")
    for pick in engine.current_selections():
        table.add_row(pick.role, f"{pick.tier.value} {pick.tier.label}", pick.unit)
    console.print(table)


# =============================================================================
# COMMANDS
# =============================================================================


@app.command()
def grid(
    pick: Optional[list[str]] = typer.Option(None, "--pick", "-p", help="ROLE:TIER:UNIT, repeatable, toggled in order"),
    catalog: Optional[Path] = typer.Option(None, "--catalog", help="Catalog YAML file"),
    output_json: bool = typer.Option(False, "--json", help="Output raw JSON"),
):
    """Show the grid with every unit's status."""
    engine = create_engine(catalog)

    if output_json:
        apply_picks(engine, pick or [], echo=False)
        typer.echo(json.dumps(engine.snapshot(include_board=True), indent=2, ensure_ascii=False))
        return

    apply_picks(engine, pick or [])
    console.print(render_grid(engine))


@app.command()
def check(
    role: str = typer.Argument(..., help="Role name"),
    tier: str = typer.Argument(..., help="Tier, T0..T4"),
    unit: str = typer.Argument(..., help="Unit name"),
    pick: Optional[list[str]] = typer.Option(None, "--pick", "-p", help="Existing picks, ROLE:TIER:UNIT"),
    catalog: Optional[Path] = typer.Option(None, "--catalog", help="Catalog YAML file"),
):
    """Explain whether one unit can be picked given existing picks."""
    engine = create_engine(catalog)
    apply_picks(engine, pick or [], echo=False)

    try:
        entry = engine.catalog.entry(role, tier.upper(), unit)
    except UnknownEntryError as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    status = engine.status_of(entry)
    console.print(f"{entry}: [bold]{status.value.upper()}[/]")
    reason = engine.block_reason(entry)
    if reason is not None:
        console.print(f"  [dim]{reason.describe()}[/]")


@app.command()
def roles(
    catalog: Optional[Path] = typer.Option(None, "--catalog", help="Catalog YAML file"),
):
    """List catalog roles."""
    engine = create_engine(catalog)
    cat = engine.catalog

    table = Table(title=cat.name)
    table.add_column("Role", style="cyan")
    table.add_column("Units", style="green", justify="right")
    for role in cat.roles:
        icon = cat.role_icon(role)
        table.add_row(f"{icon} {role}" if icon else role, str(len(cat.entries_for(role))))
    console.print(table)


@app.command()
def play(
    catalog: Optional[Path] = typer.Option(None, "--catalog", help="Catalog YAML file"),
):
    """Build a team interactively."""
    engine = create_engine(catalog)
    console.print(Panel(
        "Enter [bold]<role> <tier> <general>[/] to pick or unpick.\n"
        "Other commands: [bold]team[/], [bold]grid[/], [bold]clear[/], [bold]quit[/]",
        title=engine.catalog.name,
    ))
    console.print(render_grid(engine))

    while True:
        line = Prompt.ask(f"[{engine.count()}/{engine.team_size}]").strip()
        if not line:
            continue
        command = line.lower()
        if command in ("quit", "exit", "q"):
            break
        if command == "clear":
            engine.clear()
            console.print("[yellow]Team cleared.[/]")
            continue
        if command == "team":
            render_team(engine)
            continue
        if command == "grid":
            console.print(render_grid(engine))
            continue

        parts = line.split(maxsplit=2)
        if len(parts) != 3:
            console.print("[red]Expected: <role> <tier> <general>[/]")
            continue
        try:
            apply_toggle(engine, parts[0], parts[1].upper(), parts[2])
        except UnknownEntryError as e:
            console.print(f"[red]{e}[/]")
            continue
        if engine.is_full():
            console.print("[green]Team complete.[/]")

    render_team(engine)


@app.command("mcp-serve")
def mcp_serve():
    """
    Start the MCP server so an assistant can build a team through tool calls.

    Configure the client with:

    {
      "mcpServers": {
        "generals-grid": {
          "command": "generals-grid",
          "args": ["mcp-serve"]
        }
      }
    }
    """
    from .mcp_server import run_mcp_server
    run_mcp_server()


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
