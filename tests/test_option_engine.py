import pytest

from tariff_tool.engine import (
    HouseholdInput,
    InvalidInputError,
    MealCategory,
    OptionKind,
    TariffCatalogs,
)


def household(income, total_meals, meals_per_day=None, scholarship=False, category=MealCategory.COMPLETE):
    return HouseholdInput(
        income=income,
        total_meals=total_meals,
        scholarship_eligible=scholarship,
        preferred_category=category,
        meals_per_day=meals_per_day,
    )


def test_recommends_cheapest_for_low_income(engine, catalogs):
    """25000 income, 60 meals at 2 meals/day: the bundle mix wins."""
    result = engine.evaluate(household(25000, 60, meals_per_day=2), catalogs)

    assert result.options, "At least the per-meal option must exist"
    assert result.recommended.total_cost == min(o.total_cost for o in result.options)
    assert result.recommended.kind == OptionKind.BUNDLE_MIX
    assert result.recommended.total_cost == pytest.approx(137.2)
    assert result.recommended.description == "Best mix: 2x Bundle 20+5, 1x Bundle 5+1 + 4 individual meals"
    assert len(result.recommended.items) == 2


def test_options_sorted_with_single_per_meal(engine, catalogs):
    for meals in (1, 6, 30, 90, 365):
        result = engine.evaluate(household(42000, meals), catalogs)
        costs = [o.total_cost for o in result.options]

        assert costs == sorted(costs)
        assert len(result.options_of_kind(OptionKind.PER_MEAL)) == 1
        assert result.recommended is result.options[0]


def test_per_meal_option(engine, catalogs):
    result = engine.evaluate(household(25000, 60), catalogs)
    per_meal = result.option_by_kind(OptionKind.PER_MEAL)

    assert per_meal.id == "per-meal"
    assert per_meal.total_cost == pytest.approx(2.80 * 60)
    assert per_meal.description == "€2.80 per complete meal"


def test_scholarship_household_pays_nothing(engine, catalogs):
    result = engine.evaluate(household(25000, 30, meals_per_day=1, scholarship=True), catalogs)
    per_meal = result.option_by_kind(OptionKind.PER_MEAL)

    assert per_meal.total_cost == 0
    assert result.recommended.kind == OptionKind.PER_MEAL
    assert result.recommended.total_cost == 0


def test_flat_tariffs_for_eligible_income(engine, catalogs):
    """50000 income, 90 meals at 1/day: the under-75k tariff covers one period."""
    result = engine.evaluate(household(50000, 90, meals_per_day=1), catalogs)
    flat = {o.id: o for o in result.options_of_kind(OptionKind.FLAT)}

    assert "flat-1meal-3months-under75k" in flat
    assert flat["flat-1meal-3months-under75k"].total_cost == 200
    assert flat["flat-1meal-3months-under75k"].description == "€200.00 for 1 meals/day for 3 months"
    # Only 1 meal/day tariffs are offered
    assert all(t.startswith("flat-1meal") for t in flat)
    assert result.recommended.id == "flat-1meal-3months-under75k"


def test_flat_tariffs_above_income_cap(engine, catalogs):
    """90000 income is over the 75k cutoff: only the uncapped tariff applies."""
    result = engine.evaluate(household(90000, 90, meals_per_day=1), catalogs)
    flat = result.options_of_kind(OptionKind.FLAT)

    assert [o.id for o in flat] == ["flat-1meal-3months-over75k"]
    assert flat[0].total_cost == 280
    assert "Over 75k" in flat[0].name


def test_flat_tariff_multiple_periods(engine, catalogs):
    """200 meals at 1/day need three 90-meal periods."""
    result = engine.evaluate(household(50000, 200, meals_per_day=1), catalogs)
    flat = next(o for o in result.options if o.id == "flat-1meal-3months-under75k")

    assert flat.total_cost == 600
    assert "× 3 periods" in flat.description


def test_flat_tariffs_without_meals_per_day(engine, catalogs):
    """No meals/day preference: every eligible tariff is offered."""
    result = engine.evaluate(household(50000, 90), catalogs)
    ids = {o.id for o in result.options_of_kind(OptionKind.FLAT)}

    assert ids == {
        "flat-2meals-3months-under75k",
        "flat-1meal-3months-under75k",
        "flat-2meals-3months-over75k",
        "flat-1meal-3months-over75k",
    }


def test_bundle_options(engine, catalogs):
    result = engine.evaluate(household(25000, 60), catalogs)
    bundles = {o.id: o for o in result.options_of_kind(OptionKind.BUNDLE)}

    assert set(bundles) == {"bundle-0", "bundle-1", "bundle-2"}
    assert bundles["bundle-0"].name == "Bundle 5 + 1 free"
    assert bundles["bundle-0"].total_cost == pytest.approx(140.0)
    assert bundles["bundle-2"].total_cost == pytest.approx(3 * 20 * 2.80)


def test_small_request_has_no_bundles(engine, catalogs):
    """5 meals is below every bundle size: per-meal and flat options only."""
    result = engine.evaluate(household(25000, 5), catalogs)
    kinds = {o.kind for o in result.options}

    assert OptionKind.BUNDLE not in kinds
    assert OptionKind.BUNDLE_MIX not in kinds
    assert result.recommended.kind == OptionKind.PER_MEAL


def test_empty_catalogs_yield_per_meal_only(engine, catalogs):
    bare = TariffCatalogs(brackets=catalogs.brackets)
    result = engine.evaluate(household(25000, 60), bare)

    assert [o.kind for o in result.options] == [OptionKind.PER_MEAL]
    assert result.recommended.id == "per-meal"


def test_ties_keep_generation_order(engine, single_bracket_catalogs):
    """Per-meal (10 × 2.00) and one flat period (20.00) cost the same."""
    result = engine.evaluate(household(30000, 10, meals_per_day=1), single_bracket_catalogs)

    assert [o.id for o in result.options] == ["per-meal", "flat-monthly"]
    assert result.recommended.id == "per-meal"


@pytest.mark.parametrize("meals", [0, -3])
def test_non_positive_meals_rejected(engine, catalogs, meals):
    with pytest.raises(InvalidInputError) as exc_info:
        engine.evaluate(household(25000, meals), catalogs)

    assert exc_info.value.details == {"total_meals": meals}
    assert exc_info.value.to_dict()["message"].startswith("total_meals")


def test_result_keeps_input_and_metadata(engine, catalogs):
    request = household(60000, 45, meals_per_day=2, category=MealCategory.REDUCED_C)
    result = engine.evaluate(request, catalogs)

    assert result.input == request
    assert result.catalog_hash == catalogs.catalog_hash


def test_trace_explains_recommendation(engine, catalogs):
    result = engine.evaluate(household(25000, 60, meals_per_day=2), catalogs)
    text = result.get_trace_text()

    assert "Income bracket (0, 27000]" in text
    assert "flat-1meal-3months-under75k not applicable" in text
    assert result.trace[-1].step == "Recommendation"
    assert result.trace[-1].description == "Best Bundle Mix"


def test_evaluate_is_repeatable(engine, catalogs):
    request = household(80000, 120, meals_per_day=1, category=MealCategory.REDUCED_B)
    assert engine.evaluate(request, catalogs) == engine.evaluate(request, catalogs)


def test_trace_scholarship_bracket(engine, catalogs):
    result = engine.evaluate(household(25000, 10, scholarship=True), catalogs)
    assert result.trace[0].description == "Scholarship bracket applied"


def test_trace_scholarship_without_bracket(engine, catalogs):
    """No scholarship bracket configured: the income bracket prices the meals."""
    no_scholarship = TariffCatalogs(brackets=tuple(b for b in catalogs.brackets if not b.scholarship_eligible))
    result = engine.evaluate(household(25000, 10, scholarship=True), no_scholarship)

    assert result.trace[0].description == "Income bracket (0, 27000]"
    assert result.option_by_kind(OptionKind.PER_MEAL).total_cost == pytest.approx(28.0)


def test_catalog_prices_cannot_change_later_quotes(engine, catalogs):
    request = household(25000, 10)
    before = engine.evaluate(request, catalogs)

    with pytest.raises(TypeError):
        catalogs.brackets[1].unit_prices[MealCategory.COMPLETE] = 0.01

    assert engine.evaluate(request, catalogs) == before
