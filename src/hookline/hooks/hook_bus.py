#
# SPDX-License-Identifier: AGPL-3.0-only
# Copyright (c) 2026 m2-eng
# Author: m2-eng
# Co-Author: GitHub Copilot
# License: GNU Affero General Public License v3.0 (AGPL-3.0-only)
# Purpose: Named event/filter hooks shared between modules.
#
"""
Named event/filter hooks shared between modules.

``trigger`` broadcasts to every handler and discards results. ``filter``
threads one value through every handler. Neither stops early; flows that
must stop on the first error use ``filter_until_error``.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List


logger = logging.getLogger(__name__)


def is_error(value: Any) -> bool:
    """True when a hook result is error-shaped."""
    return isinstance(value, Exception)


@dataclass(eq=False)
class HookRegistration:
    handler: Callable
    once: bool = False


async def _call(handler: Callable, *args) -> Any:
    result = handler(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class HookBus:
    """
    Registry of named, ordered handler lists.

    Handlers run sequentially in registration order, never concurrently.
    Exceptions raised by a handler propagate to the caller unchanged.
    """

    def __init__(self):
        self.hooks: Dict[str, List[HookRegistration]] = {}

    def reset(self) -> None:
        self.hooks = {}

    def get_hooks(self, name: str) -> List[HookRegistration]:
        """Snapshot of the registrations for ``name``."""
        return list(self.hooks.get(name, []))

    def on(self, name: str, handler: Callable, once: bool = False) -> None:
        self.hooks.setdefault(name, []).append(HookRegistration(handler, once))

    def off(self, name: str, handler: Callable) -> None:
        """Removes the first registration of ``handler``."""
        registrations = self.hooks.get(name)
        if not registrations:
            return

        for pos, registration in enumerate(registrations):
            if registration.handler == handler:
                del registrations[pos]
                return

    def discard(self, name: str, consumed: List[HookRegistration]) -> None:
        """Drops fired ``once`` registrations from the live list."""
        if not consumed or name not in self.hooks:
            return

        self.hooks[name] = [r for r in self.hooks[name] if not any(r is c for c in consumed)]

    async def trigger(self, name: str, *args) -> None:
        registrations = self.get_hooks(name)
        if not registrations:
            return

        consumed = []
        try:
            for registration in registrations:
                if registration.once:
                    consumed.append(registration)
                await _call(registration.handler, *args)
        finally:
            self.discard(name, consumed)

    async def filter(self, name: str, value: Any, *args) -> Any:
        registrations = self.get_hooks(name)
        if not registrations:
            return value

        consumed = []
        try:
            for registration in registrations:
                if registration.once:
                    consumed.append(registration)
                value = await _call(registration.handler, value, *args)
        finally:
            self.discard(name, consumed)

        return value


async def filter_until_error(bus: HookBus, name: str, value: Any, *args) -> Any:
    """
    Like ``HookBus.filter`` but returns the first error-shaped value.

    Handlers after the failing one are not called.
    """
    registrations = bus.get_hooks(name)
    consumed = []

    try:
        for registration in registrations:
            if registration.once:
                consumed.append(registration)

            value = await _call(registration.handler, value, *args)

            if is_error(value):
                logger.debug("Hook '%s' stopped by %s", name, type(value).__name__)
                return value
    finally:
        bus.discard(name, consumed)

    return value
