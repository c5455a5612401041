"""Pytest configuration and fixtures."""

from decimal import Decimal

import pytest

from live_grouping.backends import InMemoryBackend
from live_grouping.generators import TowerPopulator, UnitRecordBuilder
from live_grouping.models import GlobalUnitDefaults, LocalFile
from live_grouping.store import PropertyTypeStore
from live_grouping.wizard import WizardController


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def defaults() -> GlobalUnitDefaults:
    """Defaults with round numbers: 1000 sqft at 5000, discounted to 4500."""
    return GlobalUnitDefaults(
        unit_type="Flat",
        area=Decimal("1000"),
        carpet_area=Decimal("800"),
        base_rate=Decimal("5000"),
        discount_rate=Decimal("4500"),
    )


@pytest.fixture
def builder(defaults: GlobalUnitDefaults) -> UnitRecordBuilder:
    return UnitRecordBuilder(defaults)


@pytest.fixture
def populator(builder: UnitRecordBuilder) -> TowerPopulator:
    return TowerPopulator(builder)


@pytest.fixture
def store() -> PropertyTypeStore:
    """Create a fresh store for each test."""
    return PropertyTypeStore()


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def wizard(backend: InMemoryBackend, defaults: GlobalUnitDefaults) -> WizardController:
    return WizardController(backend, defaults=defaults)


@pytest.fixture
def image_file() -> LocalFile:
    """Small fake PNG picked in the UI."""
    return LocalFile(filename="unit.png", content=b"\x89PNG\r\n", content_type="image/png")
