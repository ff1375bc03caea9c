"""
Pydantic models for the generals grid.

Catalog models mirror the human-curated YAML file. Selection models are
small immutable values compared structurally: a pick is identified by its
(role, tier, unit) triple, never by a concatenated string key.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TEAM_SIZE = 5

# =============================================================================
# ENUMS
# =============================================================================


class Tier(str, Enum):
    """Ranking buckets, strongest first."""

    T0 = "T0"
    T1 = "T1"
    T2 = "T2"
    T3 = "T3"
    T4 = "T4"

    @property
    def label(self) -> str:
        return TIER_LABELS[self]

    @property
    def rank(self) -> int:
        return TIER_ORDER.index(self)


TIER_ORDER: tuple[Tier, ...] = tuple(Tier)

TIER_LABELS: dict[Tier, str] = {
    Tier.T0: "传说",
    Tier.T1: "顶级",
    Tier.T2: "精英",
    Tier.T3: "卓越",
    Tier.T4: "过渡",
}


class Status(str, Enum):
    """How a catalog entry relates to the current team."""

    SELECTED = "selected"
    DIMMED = "dimmed"  # Blocked by another role's pick or a full team
    AVAILABLE = "available"  # Free to add, or to swap into an occupied role


class BlockRule(str, Enum):
    """Which exclusivity rule dims an entry (checked in this order)."""

    TIER_TAKEN = "tier_taken"
    NAME_TAKEN = "name_taken"
    TEAM_FULL = "team_full"


class ToggleOutcome(str, Enum):
    """What a toggle did to the selection set."""

    ADDED = "added"
    SWAPPED = "swapped"
    REMOVED = "removed"
    BLOCKED = "blocked"


# =============================================================================
# SELECTION MODELS
# =============================================================================


class CatalogEntry(BaseModel):
    """One (role, tier, unit) cell item of the catalog."""

    model_config = ConfigDict(frozen=True)

    role: str
    tier: Tier
    unit: str

    @property
    def key(self) -> tuple[str, Tier, str]:
        return (self.role, self.tier, self.unit)

    def __str__(self) -> str:
        return f"{self.role}/{self.tier.value}/{self.unit}"


class Pick(CatalogEntry):
    """A catalog entry chosen into the team."""

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> "Pick":
        return cls(role=entry.role, tier=entry.tier, unit=entry.unit)

    def to_entry(self) -> CatalogEntry:
        return CatalogEntry(role=self.role, tier=self.tier, unit=self.unit)


class BlockReason(BaseModel):
    """Why an entry is dimmed, and by which pick (None for a full team)."""

    model_config = ConfigDict(frozen=True)

    rule: BlockRule
    blocker: Pick | None = None
    limit: int = TEAM_SIZE  # Team size in force when a full team blocks

    def describe(self) -> str:
        if self.rule == BlockRule.TIER_TAKEN:
            return f"tier {self.blocker.tier.value} already used by {self.blocker.role} ({self.blocker.unit})"
        if self.rule == BlockRule.NAME_TAKEN:
            return f"{self.blocker.unit} already picked as {self.blocker.role}"
        return f"team is full ({self.limit}/{self.limit}); swap within an occupied role instead"


# =============================================================================
# CATALOG MODELS
# =============================================================================


class RoleDefinition(BaseModel):
    """
    One catalog row: a role and its units, grouped by tier.

    Tiers may be omitted; an omitted tier simply has no units for this role.
    """

    role: str = Field(min_length=1)
    icon: str | None = None
    description: str | None = None
    tiers: dict[Tier, list[str]] = Field(default_factory=dict)

    @field_validator("tiers")
    @classmethod
    def _unique_names_per_cell(cls, tiers: dict[Tier, list[str]]) -> dict[Tier, list[str]]:
        for tier, names in tiers.items():
            seen: set[str] = set()
            for name in names:
                if not name or not name.strip():
                    raise ValueError(f"empty unit name in tier {tier.value}")
                if name in seen:
                    raise ValueError(f"duplicate unit '{name}' in tier {tier.value}")
                seen.add(name)
        # Normalise to tier order regardless of authoring order
        return {tier: list(tiers[tier]) for tier in TIER_ORDER if tier in tiers}

    def unit_count(self) -> int:
        return sum(len(names) for names in self.tiers.values())


class CatalogData(BaseModel):
    """Top-level catalog document."""

    name: str = "Unnamed Catalog"
    roles: list[RoleDefinition] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_roles(self) -> "CatalogData":
        seen: set[str] = set()
        for definition in self.roles:
            if definition.role in seen:
                raise ValueError(f"duplicate role '{definition.role}'")
            seen.add(definition.role)
        return self
