import pytest

from tariff_tool.config.settings import Settings
from tariff_tool.data.build_catalog import load_catalogs
from tariff_tool.engine import (
    FlatTariff,
    IncomeBracket,
    MealCategory,
    OptionEngine,
    PriceResolver,
    TariffCatalogs,
)


@pytest.fixture(scope="session")
def settings(tmp_path_factory):
    return Settings.load(project_root=tmp_path_factory.mktemp("project"))


@pytest.fixture(scope="session")
def catalogs(settings):
    """The standard tariff tables shipped with the package."""
    return load_catalogs(settings)


@pytest.fixture
def resolver(catalogs):
    return PriceResolver(catalogs)


@pytest.fixture
def engine(settings):
    return OptionEngine(settings)


def flat_prices(price: float) -> dict:
    return {category: price for category in MealCategory}


@pytest.fixture
def single_bracket_catalogs():
    """One 2.00 bracket for every income and a 30-meal flat tariff at 20.00."""
    return TariffCatalogs(
        brackets=(
            IncomeBracket(0, None, flat_prices(0.0), scholarship_eligible=True),
            IncomeBracket(0, None, flat_prices(2.0)),
        ),
        flat_tariffs=(
            FlatTariff(
                id="flat-monthly",
                name="Flat 1 meal/day - 1 month",
                meals_per_day=1,
                duration_months=1,
                price=20.0,
            ),
        ),
    )
