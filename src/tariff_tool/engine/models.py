"""
Data models for the tariff engine.

Uses frozen dataclasses so every value is built once per calculation
and never mutated afterwards.
"""
from dataclasses import asdict, dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class MealCategory(str, Enum):
    """Meal categories served by the canteen."""
    COMPLETE = "complete"
    REDUCED_A = "reducedA"
    REDUCED_B = "reducedB"
    REDUCED_C = "reducedC"


class OptionKind(str, Enum):
    """Kinds of pricing option the engine can emit."""
    PER_MEAL = "per-meal"
    FLAT = "flat"
    BUNDLE = "bundle"
    BUNDLE_MIX = "bundle-mix"


@dataclass(frozen=True)
class IncomeBracket:
    """An income range (min, max] with a unit price per meal category."""
    min_exclusive: float
    max_inclusive: Optional[float]  # None = no upper limit
    unit_prices: Mapping[MealCategory, float] = field(hash=False)
    scholarship_eligible: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'unit_prices', MappingProxyType(dict(self.unit_prices)))

    def contains(self, income: float) -> bool:
        """True when income falls in (min, max]."""
        if income <= self.min_exclusive:
            return False
        return self.max_inclusive is None or income <= self.max_inclusive

    def price_for(self, category: MealCategory) -> float:
        return float(self.unit_prices.get(category, 0.0))

    def to_dict(self) -> dict:
        return {
            "min_exclusive": self.min_exclusive,
            "max_inclusive": self.max_inclusive,
            "scholarship_eligible": self.scholarship_eligible,
            "unit_prices": {category.value: price for category, price in self.unit_prices.items()},
        }


@dataclass(frozen=True)
class FlatTariff:
    """A fixed-price subscription for meals_per_day over duration_months."""
    id: str
    name: str
    meals_per_day: int
    duration_months: int
    price: float
    max_income: Optional[float] = None  # None = open to every income

    def meals_per_period(self, days_per_month: int = 30) -> int:
        return self.meals_per_day * self.duration_months * days_per_month


@dataclass(frozen=True)
class BundleOption:
    """A prepaid pack: paid_meals at the unit price plus free_meals on top."""
    paid_meals: int
    free_meals: int = 0

    @property
    def size(self) -> int:
        return self.paid_meals + self.free_meals

    @property
    def label(self) -> str:
        return f"{self.paid_meals}+{self.free_meals}"


@dataclass(frozen=True)
class TariffCatalogs:
    """The three configuration tables the engine prices against."""
    brackets: tuple[IncomeBracket, ...]
    flat_tariffs: tuple[FlatTariff, ...] = ()
    bundles: tuple[BundleOption, ...] = ()
    catalog_hash: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'brackets', tuple(self.brackets))
        object.__setattr__(self, 'flat_tariffs', tuple(self.flat_tariffs))
        object.__setattr__(self, 'bundles', tuple(self.bundles))

    @property
    def scholarship_bracket(self) -> Optional[IncomeBracket]:
        return next((b for b in self.brackets if b.scholarship_eligible), None)

    def to_dict(self) -> dict:
        """Plain dict form of the tables, safe to serialize."""
        return {
            "brackets": [b.to_dict() for b in self.brackets],
            "flat_tariffs": [asdict(t) for t in self.flat_tariffs],
            "bundles": [asdict(b) for b in self.bundles],
            "catalog_hash": self.catalog_hash,
        }


@dataclass(frozen=True)
class HouseholdInput:
    """A pricing request describing the household and its meal needs."""
    income: float
    total_meals: int
    scholarship_eligible: bool
    preferred_category: MealCategory
    meals_per_day: Optional[int] = None  # 1 or 2; None = any flat tariff


@dataclass(frozen=True)
class BundleMixItem:
    """One bundle type inside a bundle mix."""
    bundle: BundleOption
    quantity: int
    meals_covered: int
    cost: float


@dataclass(frozen=True)
class BundleMix:
    """Greedy combination of bundles covering a meal total."""
    items: tuple[BundleMixItem, ...]
    remaining_meals: int  # bought at the per-meal price
    total_cost: float

    @property
    def meals_covered(self) -> int:
        return sum(item.meals_covered for item in self.items)


@dataclass(frozen=True)
class PricingOption:
    """A single way of paying for the requested meals."""
    id: str
    name: str
    description: str
    total_cost: float
    kind: OptionKind
    items: tuple[BundleMixItem, ...] = ()


@dataclass(frozen=True)
class TraceStep:
    """A single step in the option evaluation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class CalculationResult:
    """Complete result of a tariff calculation."""
    input: HouseholdInput
    options: tuple[PricingOption, ...]
    recommended: PricingOption
    trace: tuple[TraceStep, ...] = field(default_factory=tuple)

    # Metadata
    catalog_hash: Optional[str] = None

    def option_by_kind(self, kind: OptionKind) -> Optional[PricingOption]:
        """Cheapest option of the given kind, or None."""
        return next((o for o in self.options if o.kind == kind), None)

    def options_of_kind(self, kind: OptionKind) -> list[PricingOption]:
        return [o for o in self.options if o.kind == kind]

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)
