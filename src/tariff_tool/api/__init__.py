"""HTTP API for the tariff tool."""
