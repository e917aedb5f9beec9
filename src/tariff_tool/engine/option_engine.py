"""
Option Engine - Enumerates and ranks every way to pay for a household's meals.

Resolution pipeline for a single request:
- Pay per meal at the income bracket price (always available)
- Flat tariffs the household is eligible for
- Single-type prepaid bundles
- Greedy bundle mix
The cheapest option is the recommendation.
"""
import logging
import math
from typing import Optional

from ..config.settings import get_settings, Settings
from .errors import InvalidInputError
from .models import (
    BundleMix,
    CalculationResult,
    FlatTariff,
    HouseholdInput,
    OptionKind,
    PricingOption,
    TariffCatalogs,
    TraceStep,
)
from .price_resolver import PriceResolver

logger = logging.getLogger(__name__)


class OptionEngine:
    """
    Stateless tariff engine.

    Catalogs are passed to every evaluate() call, so one engine can serve
    any number of independent calculations.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def evaluate(self, household: HouseholdInput, catalogs: TariffCatalogs) -> CalculationResult:
        """
        Price every applicable option and pick the cheapest.

        Args:
            household: The household request
            catalogs: Income brackets, flat tariffs and bundles to price against

        Returns:
            CalculationResult with options sorted by ascending cost

        Raises:
            InvalidInputError: total_meals is not positive
        """
        self._validate(household)

        resolver = PriceResolver(catalogs)
        trace = []
        options = []

        unit_price = resolver.resolve_unit_price(
            household.income,
            household.preferred_category,
            household.scholarship_eligible,
        )
        if household.scholarship_eligible and catalogs.scholarship_bracket is not None:
            trace.append(TraceStep("Unit Price", "Scholarship bracket applied", self._money(unit_price)))
        else:
            bracket = resolver.find_bracket(household.income)
            if bracket is None:
                trace.append(TraceStep("Unit Price", "No income bracket matched, using fallback", self._money(unit_price)))
            else:
                upper = "∞" if bracket.max_inclusive is None else f"{bracket.max_inclusive:g}"
                trace.append(TraceStep(
                    "Unit Price",
                    f"Income bracket ({bracket.min_exclusive:g}, {upper}]",
                    self._money(unit_price),
                ))

        options.append(PricingOption(
            id="per-meal",
            name="Pay per meal",
            description=f"{self._money(unit_price)} per {household.preferred_category.value} meal",
            total_cost=unit_price * household.total_meals,
            kind=OptionKind.PER_MEAL,
        ))

        for tariff in catalogs.flat_tariffs:
            option = self._flat_option(resolver, household, tariff)
            if option is None:
                trace.append(TraceStep("Flat Tariff", f"{tariff.id} not applicable"))
                continue
            options.append(option)
            trace.append(TraceStep("Flat Tariff", option.description, self._money(option.total_cost)))

        for index, bundle in enumerate(catalogs.bundles):
            cost = resolver.resolve_bundle_cost(
                household.income,
                household.preferred_category,
                bundle,
                household.total_meals,
            )
            if cost is None:
                trace.append(TraceStep("Bundle", f"Bundle {bundle.label} larger than {household.total_meals} meals"))
                continue
            options.append(PricingOption(
                id=f"bundle-{index}",
                name=f"Bundle {bundle.paid_meals} + {bundle.free_meals} free",
                description=f"Buy {bundle.paid_meals} meals, get {bundle.free_meals} free",
                total_cost=cost,
                kind=OptionKind.BUNDLE,
            ))
            trace.append(TraceStep("Bundle", f"Bundle {bundle.label}", self._money(cost)))

        mix = resolver.resolve_best_bundle_mix(
            household.income,
            household.preferred_category,
            household.total_meals,
        )
        if mix is not None and mix.items:
            option = self._mix_option(mix)
            options.append(option)
            trace.append(TraceStep("Bundle Mix", option.description, self._money(option.total_cost)))

        # sorted() is stable, so equal costs keep generation order
        ranked = tuple(sorted(options, key=lambda o: o.total_cost))
        recommended = ranked[0]
        trace.append(TraceStep("Recommendation", recommended.name, self._money(recommended.total_cost)))

        logger.debug(
            "Recommended %s (%s) out of %d options for %d meals",
            recommended.id, self._money(recommended.total_cost), len(ranked), household.total_meals,
        )

        return CalculationResult(
            input=household,
            options=ranked,
            recommended=recommended,
            trace=tuple(trace),
            catalog_hash=catalogs.catalog_hash,
        )

    def _validate(self, household: HouseholdInput):
        if household.total_meals <= 0:
            raise InvalidInputError(
                "total_meals must be a positive number of meals",
                details={"total_meals": household.total_meals},
            )

    def _flat_option(
        self,
        resolver: PriceResolver,
        household: HouseholdInput,
        tariff: FlatTariff
    ) -> Optional[PricingOption]:
        """Build the option for one flat tariff, or None when it does not apply."""
        period_price = resolver.resolve_flat_tariff_cost(household.income, tariff)
        if period_price is None:
            return None
        if household.meals_per_day is not None and tariff.meals_per_day != household.meals_per_day:
            return None

        meals_per_period = tariff.meals_per_period(self.settings.days_per_month)
        periods = math.ceil(household.total_meals / meals_per_period)

        if periods == 1:
            description = (
                f"{self._money(period_price)} for {tariff.meals_per_day} meals/day "
                f"for {tariff.duration_months} months"
            )
        else:
            description = (
                f"{self._money(period_price)} × {periods} periods ({tariff.meals_per_day} meals/day "
                f"for {tariff.duration_months} months each)"
            )

        return PricingOption(
            id=tariff.id,
            name=tariff.name,
            description=description,
            total_cost=period_price * periods,
            kind=OptionKind.FLAT,
        )

    def _mix_option(self, mix: BundleMix) -> PricingOption:
        parts = ", ".join(f"{item.quantity}x Bundle {item.bundle.label}" for item in mix.items)
        description = f"Best mix: {parts}"
        if mix.remaining_meals > 0:
            description += f" + {mix.remaining_meals} individual meals"

        return PricingOption(
            id="bundle-mix",
            name="Best Bundle Mix",
            description=description,
            total_cost=mix.total_cost,
            kind=OptionKind.BUNDLE_MIX,
            items=mix.items,
        )

    def _money(self, amount: float) -> str:
        return f"{self.settings.currency_symbol}{amount:.2f}"
