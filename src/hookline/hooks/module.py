"""
Base class for pluggable application modules.

A module owns its own hook bus and declares which optional capabilities it
provides. The application only calls capability methods that a module has
declared.
"""

from enum import Enum
from typing import FrozenSet, Optional

from .hook_bus import HookBus


class Capability(str, Enum):
    LIFECYCLE = "lifecycle"  # on_load(app)
    SCHEMA = "schema"  # get_type_defs()


class AppModule(HookBus):
    """
    A named, independently authored module.

    Subclasses set ``name`` and ``capabilities`` and override the methods
    matching the capabilities they declare.
    """

    name: str = ""
    capabilities: FrozenSet[Capability] = frozenset()

    def __init__(self, name: Optional[str] = None, type_defs: Optional[str] = None):
        super().__init__()
        if name:
            self.name = name
        self.type_defs = type_defs
        self.app = None

    def provides(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def get_type_defs(self) -> Optional[str]:
        return self.type_defs

    def on_load(self, app) -> None:
        """Wires the module into ``app``. Override in subclasses."""
        self.app = app
