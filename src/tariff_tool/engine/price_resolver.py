"""
Price Resolver - Resolves unit prices and per-item costs for a household.

Used by the option engine once per catalog entry. Every method returns
None when the catalog entry does not apply to the household.
"""
import logging
import math
from dataclasses import dataclass
from typing import Optional

from .models import (
    BundleMix,
    BundleMixItem,
    BundleOption,
    FlatTariff,
    IncomeBracket,
    MealCategory,
    TariffCatalogs,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RankedBundle:
    """A bundle with its value-for-money figures for the greedy mix."""
    bundle: BundleOption
    efficiency: float  # meals per unit of currency
    bundle_cost: float


class PriceResolver:
    """
    Resolves prices for a single configuration item at a time.

    Resolution order for the unit price:
    1. Scholarship flag set → scholarship bracket price (income ignored)
    2. First non-scholarship bracket with min < income <= max
    3. Fall back to 0.0 when no bracket matches
    """

    def __init__(self, catalogs: TariffCatalogs):
        self.catalogs = catalogs

    def find_bracket(self, income: float) -> Optional[IncomeBracket]:
        """Return the non-scholarship bracket containing income, if any."""
        for bracket in self.catalogs.brackets:
            if not bracket.scholarship_eligible and bracket.contains(income):
                return bracket
        return None

    def resolve_unit_price(self, income: float, category: MealCategory, scholarship_eligible: bool) -> float:
        """Per-meal price for the household in the given meal category."""
        if scholarship_eligible:
            scholarship = self.catalogs.scholarship_bracket
            if scholarship is not None:
                return scholarship.price_for(category)

        bracket = self.find_bracket(income)
        if bracket is None:
            logger.debug("No income bracket matches income %s, using 0.00", income)
            return 0.0
        return bracket.price_for(category)

    def resolve_flat_tariff_cost(self, income: float, tariff: FlatTariff) -> Optional[float]:
        """Price of one tariff period, or None when income exceeds the cap."""
        if tariff.max_income is not None and income > tariff.max_income:
            return None
        return tariff.price

    def resolve_bundle_cost(
        self,
        income: float,
        category: MealCategory,
        bundle: BundleOption,
        total_meals: int
    ) -> Optional[float]:
        """
        Cost of covering total_meals with whole bundles of one type.

        Bundles ignore the scholarship flag. The meal count is rounded up to
        whole bundles, so surplus meals are paid in full bundle units.
        """
        if total_meals < bundle.size:
            return None

        unit_price = self.resolve_unit_price(income, category, False)
        bundles_needed = math.ceil(total_meals / bundle.size)
        return bundles_needed * bundle.paid_meals * unit_price

    def resolve_best_bundle_mix(self, income: float, category: MealCategory, total_meals: int) -> Optional[BundleMix]:
        """
        Greedy combination of bundle types covering total_meals.

        Bundles are taken best value first; meals no whole bundle can cover
        are bought at the per-meal price. Returns None when no bundle fits.
        """
        unit_price = self.resolve_unit_price(income, category, False)
        ranked = sorted(
            (self._rank_bundle(bundle, unit_price) for bundle in self.catalogs.bundles),
            key=lambda r: r.efficiency,
            reverse=True,
        )

        remaining = total_meals
        total_cost = 0.0
        items = []

        for entry in ranked:
            if remaining <= 0:
                break

            quantity = remaining // entry.bundle.size
            if quantity > 0:
                meals_covered = quantity * entry.bundle.size
                cost = quantity * entry.bundle_cost
                items.append(BundleMixItem(
                    bundle=entry.bundle,
                    quantity=quantity,
                    meals_covered=meals_covered,
                    cost=cost,
                ))
                remaining -= meals_covered
                total_cost += cost

        if not items:
            return None

        if remaining > 0:
            total_cost += remaining * unit_price

        return BundleMix(items=tuple(items), remaining_meals=remaining, total_cost=total_cost)

    def _rank_bundle(self, bundle: BundleOption, unit_price: float) -> _RankedBundle:
        bundle_cost = bundle.paid_meals * unit_price
        # Free bundles are always the best value
        efficiency = bundle.size / bundle_cost if bundle_cost > 0 else math.inf
        return _RankedBundle(bundle=bundle, efficiency=efficiency, bundle_cost=bundle_cost)
