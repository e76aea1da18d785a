"""
Application orchestrator.

Constructed once at process start and handed to every module. Owns the
server level hook bus, the scheduler, settings and the module registry.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from hookline.hooks import AppModule, Capability, HookBus
from hookline.infrastructure.scheduler import DEFAULT_TICK_SECONDS, Scheduler


logger = logging.getLogger(__name__)


class Application:
    def __init__(
        self,
        config: Optional[dict] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            config: Parsed configuration (see cfg/config.yaml)
            scheduler: Scheduler to use instead of a new one
            clock: Returns the current epoch time in seconds
        """
        self.config: Dict[str, Any] = config or {}
        app_config = self.config.get("app") or {}
        scheduler_config = self.config.get("scheduler") or {}

        self.name = app_config.get("name", "Hookline")
        self.mode = app_config.get("mode", "development")
        self.login_attempt = app_config.get("login_attempt")
        self.clock = clock

        self.hooks = HookBus()
        self.scheduler = scheduler or Scheduler(
            tick_seconds=scheduler_config.get("tick_seconds", DEFAULT_TICK_SECONDS),
            clock=clock,
        )
        self.modules: Dict[str, AppModule] = {}
        self.loaded = False

    def is_production(self) -> bool:
        return "production" == self.mode

    def add_module(self, *modules: AppModule) -> None:
        for module in modules:
            if not module.name:
                raise ValueError(f"Module {type(module).__name__} has no name")
            self.modules[module.name] = module

    def get_module(self, name: str) -> Optional[AppModule]:
        return self.modules.get(name)

    def load(self) -> None:
        """Calls ``on_load`` on every module declaring the lifecycle capability."""
        if self.loaded:
            return

        for module in self.modules.values():
            if module.provides(Capability.LIFECYCLE):
                module.on_load(self)
                logger.debug("Module '%s' loaded", module.name)

        self.loaded = True

    def get_type_defs(self) -> List[str]:
        return [
            module.get_type_defs()
            for module in self.modules.values()
            if module.provides(Capability.SCHEMA) and module.get_type_defs()
        ]

    def cron_job(self, id: str = None, interval: int = 0, callback: Callable = None, args=()) -> bool:
        return self.scheduler.cron_job(id=id, interval=interval, callback=callback, args=args)

    def remove_cron_job(self, id: str) -> None:
        self.scheduler.remove_cron_job(id)

    def start(self) -> None:
        """Loads modules and arms the scheduler. Needs a running event loop."""
        self.load()
        self.scheduler.start()
        logger.info("%s started with modules: %s", self.name, ", ".join(self.modules) or "-")

    def close(self) -> None:
        self.scheduler.close()
