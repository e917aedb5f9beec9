"""
Shared API state - settings, loaded catalogs and the engine.

Catalogs are loaded once at import time and reused by every request.
"""
from ..config.settings import get_settings
from ..data.build_catalog import load_catalogs
from ..engine import OptionEngine

settings = get_settings()
catalogs = load_catalogs(settings)
engine = OptionEngine(settings)
