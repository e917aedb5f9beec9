"""
Catalog Builder - Loads and validates the tariff tables.

Reads the income bracket, flat tariff and bundle CSV tables once,
checks them for consistency and hands the engine immutable catalogs.
"""
import hashlib
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from ..config.settings import get_settings, Settings
from ..engine.errors import CatalogError
from ..engine.models import BundleOption, FlatTariff, IncomeBracket, MealCategory, TariffCatalogs

logger = logging.getLogger(__name__)

BRACKET_COLUMNS = ['min_exclusive', 'max_inclusive', 'scholarship_eligible'] + [c.value for c in MealCategory]
TARIFF_COLUMNS = ['id', 'name', 'meals_per_day', 'duration_months', 'price', 'max_income']
BUNDLE_COLUMNS = ['paid_meals', 'free_meals']


def get_file_hash(path: Path) -> str:
    """Get SHA256 hash of a file."""
    if not path.exists():
        return ""
    with open(path, 'rb') as f:
        return hashlib.sha256(f.read()).hexdigest()[:12]


def parse_bool(value: str) -> bool:
    """Parse a boolean from a CSV cell."""
    return str(value).strip().lower() in ('true', '1', 'yes', 'on')


def parse_optional_float(value) -> Optional[float]:
    """Parse optional float (empty/NaN = None)."""
    if pd.isna(value) or str(value).strip() == '':
        return None
    return float(value)


def _read_table(path: Path, columns: list[str]) -> pd.DataFrame:
    if not path.exists():
        raise CatalogError(f"Tariff table not found at {path}")

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [c.strip() for c in df.columns]

    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise CatalogError(f"{path.name} is missing columns", missing)

    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()
    return df


def read_income_brackets(path: Path) -> tuple[IncomeBracket, ...]:
    df = _read_table(path, BRACKET_COLUMNS)
    brackets = []
    for _, row in df.iterrows():
        brackets.append(IncomeBracket(
            min_exclusive=float(row['min_exclusive']),
            max_inclusive=parse_optional_float(row['max_inclusive']),
            scholarship_eligible=parse_bool(row['scholarship_eligible']),
            unit_prices={
                category: float(row[category.value])
                for category in MealCategory
                if row[category.value] != ''
            },
        ))
    return tuple(brackets)


def read_flat_tariffs(path: Path) -> tuple[FlatTariff, ...]:
    df = _read_table(path, TARIFF_COLUMNS)
    return tuple(
        FlatTariff(
            id=row['id'],
            name=row['name'],
            meals_per_day=int(row['meals_per_day']),
            duration_months=int(row['duration_months']),
            price=float(row['price']),
            max_income=parse_optional_float(row['max_income']),
        )
        for _, row in df.iterrows()
    )


def read_bundles(path: Path) -> tuple[BundleOption, ...]:
    df = _read_table(path, BUNDLE_COLUMNS)
    return tuple(
        BundleOption(
            paid_meals=int(row['paid_meals']),
            free_meals=int(row['free_meals'] or 0),
        )
        for _, row in df.iterrows()
    )


def validate_catalogs(catalogs: TariffCatalogs) -> list[str]:
    """
    Check the tables for consistency.

    Returns a list of problems; an empty list means the catalogs are usable.
    """
    problems = []

    scholarship = [b for b in catalogs.brackets if b.scholarship_eligible]
    if len(scholarship) != 1:
        problems.append(f"expected exactly one scholarship bracket, found {len(scholarship)}")

    regular = sorted(
        (b for b in catalogs.brackets if not b.scholarship_eligible),
        key=lambda b: b.min_exclusive,
    )
    if not regular:
        problems.append("no income brackets defined")
    else:
        if regular[0].min_exclusive != 0:
            problems.append(f"lowest income bracket starts at {regular[0].min_exclusive:g}, expected 0")

        for lower, upper in zip(regular, regular[1:]):
            if lower.max_inclusive is None:
                problems.append(f"bracket starting at {lower.min_exclusive:g} is unbounded but is not the last one")
            elif lower.max_inclusive != upper.min_exclusive:
                problems.append(
                    f"brackets ({lower.min_exclusive:g}, {lower.max_inclusive:g}] and "
                    f"({upper.min_exclusive:g}, ...] leave a gap or overlap"
                )

        if regular[-1].max_inclusive is not None:
            problems.append(f"highest income bracket ends at {regular[-1].max_inclusive:g}, expected no upper limit")

    for bracket in catalogs.brackets:
        if bracket.max_inclusive is not None and bracket.max_inclusive <= bracket.min_exclusive:
            problems.append(f"bracket starting at {bracket.min_exclusive:g} has an empty range")
        unpriced = [c.value for c in MealCategory if c not in bracket.unit_prices]
        if unpriced:
            problems.append(f"bracket starting at {bracket.min_exclusive:g} has no price for {', '.join(unpriced)}")

    seen_ids = set()
    for tariff in catalogs.flat_tariffs:
        if tariff.id in seen_ids:
            problems.append(f"duplicate flat tariff id {tariff.id}")
        seen_ids.add(tariff.id)
        if tariff.meals_per_day <= 0 or tariff.duration_months <= 0:
            problems.append(f"flat tariff {tariff.id} must cover a positive number of meals")
        if tariff.price < 0:
            problems.append(f"flat tariff {tariff.id} has a negative price")

    for bundle in catalogs.bundles:
        if bundle.paid_meals <= 0 or bundle.free_meals < 0:
            problems.append(f"bundle {bundle.label} must have paid meals > 0 and free meals >= 0")

    return problems


def load_catalogs(settings: Optional[Settings] = None) -> TariffCatalogs:
    """
    Load the tariff tables configured in settings.

    Raises:
        CatalogError: a table is missing, malformed or inconsistent
    """
    settings = settings or get_settings()

    try:
        brackets = read_income_brackets(settings.income_brackets_csv)
        tariffs = read_flat_tariffs(settings.flat_tariffs_csv)
        bundles = read_bundles(settings.bundles_csv)
    except CatalogError:
        raise
    except ValueError as e:
        raise CatalogError(f"Malformed tariff table in {settings.catalog_dir}", [str(e)]) from e

    digest = hashlib.sha256("".join(
        get_file_hash(p) for p in (settings.income_brackets_csv, settings.flat_tariffs_csv, settings.bundles_csv)
    ).encode()).hexdigest()[:12]

    catalogs = TariffCatalogs(brackets=brackets, flat_tariffs=tariffs, bundles=bundles, catalog_hash=digest)

    problems = validate_catalogs(catalogs)
    if problems:
        for problem in problems:
            logger.error("Tariff catalog problem: %s", problem)
        raise CatalogError("Inconsistent tariff tables", problems)

    logger.info(
        "Loaded %d income brackets, %d flat tariffs, %d bundles from %s",
        len(brackets), len(tariffs), len(bundles), settings.catalog_dir,
    )
    return catalogs


def build_catalog_report(settings: Optional[Settings] = None, verbose: bool = True, write: bool = True) -> dict:
    """
    Load the tariff tables and summarize them in a build report.

    Args:
        settings: Optional settings override
        verbose: Print progress messages
        write: Save the report as JSON at settings.build_report

    Returns:
        Build report dictionary
    """
    settings = settings or get_settings()

    report = {
        "timestamp": datetime.now().isoformat(),
        "status": "pending",
        "input_files": {},
        "metrics": {},
        "errors": []
    }

    for key, path in (
        ("income_brackets", settings.income_brackets_csv),
        ("flat_tariffs", settings.flat_tariffs_csv),
        ("bundles", settings.bundles_csv),
    ):
        report["input_files"][key] = {"path": str(path), "hash": get_file_hash(path)}

    try:
        catalogs = load_catalogs(settings)
    except CatalogError as e:
        report["status"] = "failed"
        report["errors"] = e.problems or [e.message]
        if verbose:
            print(f"CATALOG ERROR: {e}")
    else:
        report["status"] = "success"
        report["catalog_hash"] = catalogs.catalog_hash
        report["metrics"] = {
            "income_brackets": len(catalogs.brackets),
            "flat_tariffs": len(catalogs.flat_tariffs),
            "bundles": len(catalogs.bundles),
        }
        if verbose:
            print(f"Catalog OK ({catalogs.catalog_hash}): {report['metrics']}")

    if write:
        settings.build_report.parent.mkdir(parents=True, exist_ok=True)
        with open(settings.build_report, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2)

    return report
