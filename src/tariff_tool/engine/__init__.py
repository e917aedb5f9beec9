"""Engine subpackage - core tariff logic and option ranking."""
from .option_engine import OptionEngine
from .price_resolver import PriceResolver
from .cost_curve import cost_curve
from .errors import InvalidInputError, CatalogError
from .models import (
    BundleOption,
    CalculationResult,
    FlatTariff,
    HouseholdInput,
    IncomeBracket,
    MealCategory,
    OptionKind,
    PricingOption,
    TariffCatalogs,
)

__all__ = [
    'OptionEngine', 'PriceResolver', 'cost_curve',
    'InvalidInputError', 'CatalogError',
    'BundleOption', 'CalculationResult', 'FlatTariff', 'HouseholdInput',
    'IncomeBracket', 'MealCategory', 'OptionKind', 'PricingOption', 'TariffCatalogs',
]
