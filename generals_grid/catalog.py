"""
Read-only catalog of named units, organized by role and tier.
"""

import logging
from collections.abc import Sequence

from .models import TIER_ORDER, CatalogData, CatalogEntry, Tier

logger = logging.getLogger(__name__)


class UnknownEntryError(ValueError):
    """Raised when a role, tier or unit is not part of the catalog."""


class Catalog:
    """
    Immutable view over catalog data.

    Entries are materialised once, in authoring order: role order, then
    tier order, then unit order within the cell.
    """

    def __init__(self, data: CatalogData):
        self.name = data.name
        self._definitions = {d.role: d for d in data.roles}
        self._entries: tuple[CatalogEntry, ...] = tuple(
            CatalogEntry(role=d.role, tier=tier, unit=unit)
            for d in data.roles
            for tier, units in d.tiers.items()
            for unit in units
        )
        self._keys = frozenset(e.key for e in self._entries)
        logger.debug(f"Catalog '{self.name}': {len(self._definitions)} roles, {len(self._entries)} entries")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry: object) -> bool:
        return isinstance(entry, CatalogEntry) and entry.key in self._keys

    @property
    def roles(self) -> tuple[str, ...]:
        return tuple(self._definitions)

    @property
    def tiers(self) -> tuple[Tier, ...]:
        """Tiers that hold at least one unit, in rank order."""
        used = {e.tier for e in self._entries}
        return tuple(t for t in TIER_ORDER if t in used)

    def entries(self) -> Sequence[CatalogEntry]:
        return self._entries

    def entries_for(self, role: str) -> Sequence[CatalogEntry]:
        self._require_role(role)
        return tuple(e for e in self._entries if e.role == role)

    def units(self, role: str, tier: Tier | str) -> tuple[str, ...]:
        """Unit names of one (role, tier) cell, possibly empty."""
        definition = self._require_role(role)
        return tuple(definition.tiers.get(self._coerce_tier(tier), ()))

    def contains(self, entry: CatalogEntry) -> bool:
        return entry in self

    def entry(self, role: str, tier: Tier | str, unit: str) -> CatalogEntry:
        """
        Build a catalog entry from its parts.

        Raises:
            UnknownEntryError: If the triple is not in the catalog.
        """
        candidate = CatalogEntry(role=role, tier=self._coerce_tier(tier), unit=unit)
        self.require(candidate)
        return candidate

    def require(self, entry: CatalogEntry) -> None:
        if entry.key not in self._keys:
            raise UnknownEntryError(f"Not in catalog: {entry}")

    def role_icon(self, role: str) -> str | None:
        return self._require_role(role).icon

    @staticmethod
    def tier_label(tier: Tier | str) -> str:
        return Catalog._coerce_tier(tier).label

    def _require_role(self, role: str):
        try:
            return self._definitions[role]
        except KeyError:
            raise UnknownEntryError(f"Unknown role: {role}") from None

    @staticmethod
    def _coerce_tier(tier: Tier | str) -> Tier:
        try:
            return Tier(tier)
        except ValueError:
            raise UnknownEntryError(f"Unknown tier: {tier}") from None
