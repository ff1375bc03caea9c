#!/usr/bin/env python3
"""
Import a catalog from a flat CSV export to the catalog YAML file.

The CSV needs the columns Role, Tier and Name; an optional Icon column sets
the role icon (first non-empty value wins). Row order is kept: roles appear
in the order they are first seen, names in the order they are listed.

Usage:
    python scripts/import_catalog_from_csv.py resources/generals.csv
    python scripts/import_catalog_from_csv.py resources/generals.csv --dry-run

The script will:
1. Read the CSV file
2. Group names by role and tier, dropping duplicates within a cell
3. Write generals_grid/data/catalog.yaml (unless --dry-run is passed)
"""

import argparse
import csv
import re
from pathlib import Path

import yaml

VALID_TIERS = ("T0", "T1", "T2", "T3", "T4")


def parse_tier(tier_str: str) -> str | None:
    """Normalize tier values like 't0', 'T 0' or '0'."""
    if not tier_str:
        return None
    digits = re.sub(r"[^0-9]", "", tier_str)
    tier = f"T{digits}" if digits else ""
    return tier if tier in VALID_TIERS else None


def build_catalog(rows: list[dict], name: str) -> tuple[dict, list[str]]:
    """
    Group CSV rows into the catalog document.

    Returns:
        Tuple of (catalog dict, list of warnings for skipped rows).
    """
    roles: dict[str, dict] = {}
    warnings = []

    for line_no, row in enumerate(rows, start=2):  # Header is line 1
        role = (row.get("Role") or "").strip()
        unit = (row.get("Name") or "").strip()
        tier = parse_tier((row.get("Tier") or "").strip())

        if not role or not unit:
            warnings.append(f"line {line_no}: missing role or name")
            continue
        if tier is None:
            warnings.append(f"line {line_no}: invalid tier '{row.get('Tier')}'")
            continue

        definition = roles.setdefault(role, {"role": role, "tiers": {}})
        icon = (row.get("Icon") or "").strip()
        if icon and "icon" not in definition:
            definition["icon"] = icon

        cell = definition["tiers"].setdefault(tier, [])
        if unit in cell:
            warnings.append(f"line {line_no}: duplicate {unit} in {role}/{tier}")
            continue
        cell.append(unit)

    for definition in roles.values():
        definition["tiers"] = {t: definition["tiers"][t] for t in VALID_TIERS if t in definition["tiers"]}

    return {"name": name, "roles": list(roles.values())}, warnings


def main():
    parser = argparse.ArgumentParser(description="Import catalog from CSV")
    parser.add_argument("csv_path", type=Path, help="CSV file with Role, Tier, Name columns")
    parser.add_argument("--name", default="三国志 · 战略名将录",
                        help="Catalog name")
    parser.add_argument("--output", type=Path, default=None,
                        help="Output YAML path (default: generals_grid/data/catalog.yaml)")
    parser.add_argument("--dry-run", action="store_true",
                        help="Print the YAML instead of writing it")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent
    output_path = args.output or project_root / "generals_grid" / "data" / "catalog.yaml"

    if not args.csv_path.exists():
        print(f"ERROR: CSV file not found: {args.csv_path}")
        return 1

    with open(args.csv_path, 'r', encoding='utf-8-sig') as f:
        rows = list(csv.DictReader(f))

    print(f"Found {len(rows)} rows in CSV")

    catalog, warnings = build_catalog(rows, args.name)
    for warning in warnings:
        print(f"  SKIP: {warning}")

    content = yaml.safe_dump(catalog, allow_unicode=True, sort_keys=False)

    if args.dry_run:
        print(content)
    else:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(content)
        print(f"  CREATED: {output_path}")

    print(f"\nSummary:")
    print(f"  Roles: {len(catalog['roles'])}")
    print(f"  Names: {sum(len(n) for d in catalog['roles'] for n in d['tiers'].values())}")
    print(f"  Skipped: {len(warnings)}")

    return 0


if __name__ == "__main__":
    exit(main())
