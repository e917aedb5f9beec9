"""Tariff tables and the loader that turns them into engine catalogs."""
