"""
Meal Tariff Tool Package

Recommends the cheapest way to pay for a series of canteen meals.
Resolves Income Bracket → Unit Price → Options pipeline across per-meal,
flat tariff and prepaid bundle pricing.
"""

__version__ = "1.0.0"
