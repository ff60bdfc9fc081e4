"""Test helper utilities for Sponsor Job Scanner tests."""

from .factories import FIXED_NOW, make_item, make_record
from .fixture_adapter import ScriptedSearchProvider

__all__ = ["FIXED_NOW", "ScriptedSearchProvider", "make_item", "make_record"]
