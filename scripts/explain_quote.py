#!/usr/bin/env python
"""
Print every pricing option for a household, with the resolution trace.

Usage:
    python scripts/explain_quote.py 25000 60 --category complete --meals-per-day 2
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from tariff_tool.data.build_catalog import load_catalogs
from tariff_tool.engine import HouseholdInput, MealCategory, OptionEngine


def main():
    parser = argparse.ArgumentParser(description="Explain the cheapest way to pay for meals")
    parser.add_argument("income", type=float, help="Household income (ISEE)")
    parser.add_argument("total_meals", type=int, help="Number of meals to pay for")
    parser.add_argument("--category", choices=[c.value for c in MealCategory], default=MealCategory.COMPLETE.value)
    parser.add_argument("--meals-per-day", type=int, choices=[1, 2], default=None)
    parser.add_argument("--scholarship", action="store_true", help="Household holds a scholarship")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    engine = OptionEngine()
    catalogs = load_catalogs(engine.settings)
    household = HouseholdInput(
        income=args.income,
        total_meals=args.total_meals,
        scholarship_eligible=args.scholarship,
        preferred_category=MealCategory(args.category),
        meals_per_day=args.meals_per_day,
    )
    result = engine.evaluate(household, catalogs)

    symbol = engine.settings.currency_symbol
    print("Options (cheapest first):")
    for option in result.options:
        marker = "*" if option is result.recommended else " "
        print(f" {marker} {option.name:<50} {symbol}{option.total_cost:>9.2f}  {option.description}")

    print("\nTrace:")
    print(result.get_trace_text())


if __name__ == "__main__":
    main()
