"""Wizard state storage."""

from live_grouping.store.hierarchy import PropertyTypeStore, TowerKey

__all__ = ["PropertyTypeStore", "TowerKey"]
