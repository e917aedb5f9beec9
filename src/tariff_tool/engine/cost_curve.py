"""
Cost Curve - Sweeps the option engine across meal counts.

Produces the data series behind the cost-comparison chart: for each meal
count, the cheapest option of every kind and the recommended kind.
"""
import dataclasses
from typing import Optional

import pandas as pd

from .errors import InvalidInputError
from .models import HouseholdInput, OptionKind, TariffCatalogs
from .option_engine import OptionEngine

CURVE_COLUMNS = ['meals', 'per_meal', 'flat', 'bundle', 'bundle_mix', 'recommended']

_KIND_COLUMNS = {
    OptionKind.PER_MEAL: 'per_meal',
    OptionKind.FLAT: 'flat',
    OptionKind.BUNDLE: 'bundle',
    OptionKind.BUNDLE_MIX: 'bundle_mix',
}


def cost_curve(
    engine: OptionEngine,
    base_input: HouseholdInput,
    catalogs: TariffCatalogs,
    max_meals: Optional[int] = None,
    step: Optional[int] = None
) -> pd.DataFrame:
    """
    Evaluate base_input at meal counts step, 2*step, ... up to max_meals.

    The total_meals of base_input is ignored. Kinds with no applicable
    option at a given count are NaN.
    """
    max_meals = max_meals if max_meals is not None else engine.settings.curve_max_meals
    step = step if step is not None else engine.settings.curve_step

    if step <= 0:
        raise InvalidInputError("step must be positive", details={"step": step})

    points = max_meals // step
    if points > engine.settings.curve_max_points:
        raise InvalidInputError(
            f"cost curve limited to {engine.settings.curve_max_points} points",
            details={"max_meals": max_meals, "step": step, "points": points},
        )

    rows = []
    for meals in range(step, max_meals + 1, step):
        result = engine.evaluate(dataclasses.replace(base_input, total_meals=meals), catalogs)

        row = {'meals': meals, 'recommended': result.recommended.kind.value}
        for kind, column in _KIND_COLUMNS.items():
            option = result.option_by_kind(kind)
            row[column] = option.total_cost if option else float('nan')
        rows.append(row)

    return pd.DataFrame(rows, columns=CURVE_COLUMNS)
