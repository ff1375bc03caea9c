"""
MCP Server for Generals Grid.

Exposes the selection engine as MCP tools so an assistant can build a team
with the same rules as the CLI grid.

Usage:
    generals-grid mcp-serve

IMPORTANT: MCP uses stdio for JSON-RPC communication.
- NEVER print() or write to stdout - it corrupts the protocol
- All logging must go to stderr
"""

import logging
import sys

from mcp.server.fastmcp import FastMCP

from .catalog import UnknownEntryError
from .data_loader import load_catalog
from .engine import SelectionEngine

# Configure logging to stderr only (stdout is reserved for MCP protocol)
logging.basicConfig(
    level=logging.WARNING,
    format="%(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
    force=True,  # Override any existing config
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("generals-grid")

# One team per server process (initialized lazily)
_engine: SelectionEngine | None = None


def get_engine() -> SelectionEngine:
    """Get or create the selection engine (lazy initialization)."""
    global _engine
    if _engine is None:
        _engine = SelectionEngine(load_catalog())
    return _engine


def reset_engine(engine: SelectionEngine | None = None) -> None:
    """Replace the server's engine; None forces a reload on next use."""
    global _engine
    _engine = engine


# =============================================================================
# TOOLS
# =============================================================================


@mcp.tool()
def list_catalog(role: str | None = None) -> dict | str:
    """
    List the generals available for each role, grouped by tier.

    Tiers run from T0 (strongest) to T4. A team takes one general per role,
    uses each tier at most once, and never repeats a general's name.

    Args:
        role: Optional role name to restrict the listing to.

    Returns:
        Mapping of role -> tier -> list of general names.
    """
    catalog = get_engine().catalog
    if role is not None and role not in catalog.roles:
        return f"Role '{role}' not found. Roles: {', '.join(catalog.roles)}"

    roles = [role] if role is not None else list(catalog.roles)
    return {
        "catalog": catalog.name,
        "tiers": {t.value: t.label for t in catalog.tiers},
        "roles": {
            r: {t.value: list(catalog.units(r, t)) for t in catalog.tiers if catalog.units(r, t)}
            for r in roles
        },
    }


@mcp.tool()
def get_status(role: str, tier: str, unit: str) -> dict | str:
    """
    Check whether a general can be picked for a role right now.

    Args:
        role: Role name, e.g. "主将".
        tier: Tier, "T0".."T4".
        unit: General name as listed by list_catalog.

    Returns:
        Status ("selected", "dimmed" or "available") and, when dimmed, why.
    """
    engine = get_engine()
    try:
        entry = engine.catalog.entry(role, tier.upper(), unit)
    except UnknownEntryError as e:
        return str(e)

    result = {"entry": entry.model_dump(mode="json"), "status": engine.status_of(entry).value}
    reason = engine.block_reason(entry)
    if reason is not None:
        result["blocked_by"] = reason.rule.value
        result["reason"] = reason.describe()
    return result


@mcp.tool()
def toggle_pick(role: str, tier: str, unit: str) -> dict | str:
    """
    Pick, unpick or swap a general.

    Picking an already selected general removes it. Picking a different
    general for an occupied role swaps it in. Blocked picks are ignored
    and reported with outcome "blocked".

    Args:
        role: Role name.
        tier: Tier, "T0".."T4".
        unit: General name.

    Returns:
        The outcome and the resulting team.
    """
    engine = get_engine()
    try:
        entry = engine.catalog.entry(role, tier.upper(), unit)
    except UnknownEntryError as e:
        return str(e)

    reason = engine.block_reason(entry)
    outcome = engine.toggle(entry)
    result = {"outcome": outcome.value, **engine.snapshot()}
    if reason is not None:
        result["reason"] = reason.describe()
    return result


@mcp.tool()
def clear_team() -> dict:
    """Remove every pick from the team."""
    engine = get_engine()
    engine.clear()
    return engine.snapshot()


@mcp.tool()
def get_team() -> dict:
    """Get the current team, its size and which tiers it already uses."""
    return get_engine().snapshot()


@mcp.tool()
def get_board() -> dict:
    """
    Get the status of every general in the catalog.

    Use this to see at a glance what can still be picked.
    """
    return get_engine().snapshot(include_board=True)


# =============================================================================
# SERVER ENTRY POINT
# =============================================================================


def run_mcp_server():
    """Run the MCP server with stdio transport."""
    # Note: No logging here - stdout is reserved for MCP protocol
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_mcp_server()
