"""
Centralized settings and path configuration for the tariff tool.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory.

    TARIFF_PROJECT_ROOT wins; otherwise the source checkout holding
    pyproject.toml, and the current working directory for installed copies.
    """
    env_root = os.environ.get('TARIFF_PROJECT_ROOT')
    if env_root:
        return Path(env_root)

    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists() and (parent / 'src' / 'tariff_tool').is_dir():
            return parent
    return Path.cwd()


def get_default_catalog_dir() -> Path:
    """Directory holding the standard tariff tables shipped with the package."""
    return Path(__file__).resolve().parent.parent / 'data'


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Tariff tables
    catalog_dir: Path
    income_brackets_csv: Path
    flat_tariffs_csv: Path
    bundles_csv: Path

    # Output files
    build_report: Path

    # Presentation
    currency_symbol: str = "€"

    # Flat tariff periods use a fixed month length
    days_per_month: int = 30

    # Cost curve sweep defaults
    curve_max_meals: int = 200
    curve_step: int = 10
    curve_max_points: int = 1000

    @classmethod
    def load(cls, project_root: Optional[Path] = None, catalog_dir: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure.

        The TARIFF_CATALOG_DIR environment variable overrides the directory
        the tariff tables are read from.
        """
        root = project_root or get_project_root()

        env_dir = os.environ.get('TARIFF_CATALOG_DIR')
        tables = Path(catalog_dir or env_dir or get_default_catalog_dir())

        return cls(
            project_root=root,
            catalog_dir=tables,
            income_brackets_csv=tables / 'income_brackets.csv',
            flat_tariffs_csv=tables / 'flat_tariffs.csv',
            bundles_csv=tables / 'bundles.csv',
            build_report=root / 'outputs' / 'build_report.json',
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
