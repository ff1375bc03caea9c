"""
Selection engine for the generals grid.

A team holds at most one pick per role. Across roles, no two picks may share
a tier or a unit name, and at most TEAM_SIZE roles may be filled. The rules
are evaluated across roles only, so a role can always re-pick or swap inside
its own row.

Statuses are re-derived from the selection set on every query; the set is
tiny, so nothing is cached.
"""

import logging
from collections.abc import Iterator, Sequence

from .catalog import Catalog
from .models import (
    TEAM_SIZE,
    BlockReason,
    BlockRule,
    CatalogEntry,
    Pick,
    Status,
    Tier,
    ToggleOutcome,
)

logger = logging.getLogger(__name__)


class SelectionSet:
    """
    The picks currently in the team, in insertion order.

    Owned by a SelectionEngine, which is the only caller of the mutators.
    """

    def __init__(self) -> None:
        self._picks: list[Pick] = []

    def __len__(self) -> int:
        return len(self._picks)

    def __iter__(self) -> Iterator[Pick]:
        return iter(tuple(self._picks))

    def picks(self) -> tuple[Pick, ...]:
        return tuple(self._picks)

    def find(self, entry: CatalogEntry) -> Pick | None:
        return next((p for p in self._picks if p.key == entry.key), None)

    def for_role(self, role: str) -> Pick | None:
        return next((p for p in self._picks if p.role == role), None)

    def put(self, pick: Pick) -> Pick | None:
        """Insert a pick, evicting the role's previous occupant. Returns the evicted pick."""
        evicted = self.for_role(pick.role)
        if evicted is not None:
            self._picks.remove(evicted)
        self._picks.append(pick)
        return evicted

    def remove(self, pick: Pick) -> None:
        self._picks.remove(pick)

    def clear(self) -> None:
        self._picks.clear()


class SelectionEngine:
    """
    Evaluates and applies picks against a catalog.

    Args:
        catalog: The catalog every queried entry must belong to.
        selection: Selection set to own. A fresh empty set if omitted.
        team_size: Maximum number of filled roles.
    """

    def __init__(
        self,
        catalog: Catalog,
        selection: SelectionSet | None = None,
        team_size: int = TEAM_SIZE,
    ):
        self.catalog = catalog
        self.selection = selection if selection is not None else SelectionSet()
        self.team_size = team_size

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def block_reason(self, entry: CatalogEntry) -> BlockReason | None:
        """
        Return the first rule that dims this entry, or None.

        Selected entries are never blocked.

        Raises:
            UnknownEntryError: If the entry is not in the catalog.
        """
        self.catalog.require(entry)
        if self.selection.find(entry) is not None:
            return None

        picks = self.selection.picks()
        others = [p for p in picks if p.role != entry.role]

        for pick in others:
            if pick.tier == entry.tier:
                return BlockReason(rule=BlockRule.TIER_TAKEN, blocker=pick)
        for pick in others:
            if pick.unit == entry.unit:
                return BlockReason(rule=BlockRule.NAME_TAKEN, blocker=pick)

        # A full team still allows swaps inside an occupied role
        if len(picks) >= self.team_size and self.selection.for_role(entry.role) is None:
            return BlockReason(rule=BlockRule.TEAM_FULL, limit=self.team_size)
        return None

    def status_of(self, entry: CatalogEntry) -> Status:
        self.catalog.require(entry)
        if self.selection.find(entry) is not None:
            return Status.SELECTED
        if self.block_reason(entry) is not None:
            return Status.DIMMED
        return Status.AVAILABLE

    def status(self, role: str, tier: Tier | str, unit: str) -> Status:
        return self.status_of(self.catalog.entry(role, tier, unit))

    def current_selections(self) -> Sequence[Pick]:
        return self.selection.picks()

    def count(self) -> int:
        return len(self.selection)

    def is_full(self) -> bool:
        return len(self.selection) == self.team_size

    def pick_for(self, role: str) -> Pick | None:
        return self.selection.for_role(role)

    def used_tiers(self) -> frozenset[Tier]:
        return frozenset(p.tier for p in self.selection)

    def board(self) -> dict[str, dict[Tier, list[tuple[str, Status]]]]:
        """Status of every catalog entry, nested as role -> tier -> [(unit, status)]."""
        grid: dict[str, dict[Tier, list[tuple[str, Status]]]] = {
            role: {tier: [] for tier in self.catalog.tiers} for role in self.catalog.roles
        }
        for entry in self.catalog.entries():
            grid[entry.role][entry.tier].append((entry.unit, self.status_of(entry)))
        return grid

    def snapshot(self, include_board: bool = False) -> dict:
        """Plain-data view of the team for JSON output."""
        result = {
            "count": self.count(),
            "team_size": self.team_size,
            "is_full": self.is_full(),
            "team": [p.model_dump(mode="json") for p in self.current_selections()],
            "used_tiers": sorted(t.value for t in self.used_tiers()),
        }
        if include_board:
            result["board"] = {
                role: {
                    tier.value: [{"unit": unit, "status": status.value} for unit, status in cells]
                    for tier, cells in row.items()
                }
                for role, row in self.board().items()
            }
        return result

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def toggle(self, entry: CatalogEntry) -> ToggleOutcome:
        """
        Select, deselect or swap in the given entry.

        A dimmed entry is ignored and reported as BLOCKED; that is a routine
        outcome, not an error.

        Raises:
            UnknownEntryError: If the entry is not in the catalog.
        """
        status = self.status_of(entry)

        if status == Status.SELECTED:
            self.selection.remove(self.selection.find(entry))
            logger.debug(f"Deselected {entry}")
            return ToggleOutcome.REMOVED

        if status == Status.DIMMED:
            logger.debug(f"Ignored {entry}: {self.block_reason(entry).rule.value}")
            return ToggleOutcome.BLOCKED

        evicted = self.selection.put(Pick.from_entry(entry))
        if evicted is not None:
            logger.debug(f"Swapped {evicted} -> {entry}")
            return ToggleOutcome.SWAPPED
        logger.debug(f"Selected {entry} ({self.count()}/{self.team_size})")
        return ToggleOutcome.ADDED

    def toggle_named(self, role: str, tier: Tier | str, unit: str) -> ToggleOutcome:
        return self.toggle(self.catalog.entry(role, tier, unit))

    def clear(self) -> None:
        self.selection.clear()
        logger.debug("Cleared selection")
