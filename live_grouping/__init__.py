"""Live Grouping: project hierarchy wizard for group-buying real estate."""

from live_grouping.compiler import HierarchyCompiler
from live_grouping.gateway import AdminGateway
from live_grouping.store import PropertyTypeStore
from live_grouping.wizard import WizardController

__version__ = "0.1.0"

__all__ = ["AdminGateway", "HierarchyCompiler", "PropertyTypeStore", "WizardController"]
