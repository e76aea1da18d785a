"""
Hook bus and module base classes.
"""

from .hook_bus import HookBus, HookRegistration, filter_until_error, is_error
from .module import AppModule, Capability

__all__ = [
    'HookBus',
    'HookRegistration',
    'filter_until_error',
    'is_error',
    'AppModule',
    'Capability'
]
