"""
plugins/custom_hats_plugin/__init__.py
Custom Hats plugin.
Loads extra hats from a bundle and merges them into the running game, retrying
until the host has finished setting up its customization catalog and rigs.
"""
import os
import threading
from typing import Optional, Tuple

from engine.customization.character import Character
from engine.utils.logger import Logger
from plugins.broadcast import broadcast_handler
from plugins.plugin_system import PluginBase
from plugins.service_locator import get_service_locator

from .bundle import BundleLoadError, BundleNotFoundError, Hat, HatBundleLoader
from .integration import HatIntegrator
from .scheduler import RetryScheduler

__version__ = "1.0.0"


class CustomHatsPlugin(PluginBase):
    plugin_id = "custom_hats_plugin"
    plugin_name = "Custom Hats"

    def __init__(self, event_system=None, service_locator=None):
        super().__init__(event_system, service_locator or get_service_locator())
        self.integrator = HatIntegrator(self.service_locator, self.config)

        # Share the host's exit signal when it has one, so shutdown stops the retries
        cancel_event = self.service_locator.find_service("exit_event") or threading.Event()
        self.scheduler = RetryScheduler(
            self.integrator.attempt,
            success_delay=float(self.config["retry_success_delay"]),
            failure_delay=float(self.config["retry_failure_delay"]),
            cancel_event=cancel_event,
            name=self.plugin_name,
        )
        self.loader: Optional[HatBundleLoader] = None

    @property
    def hats(self) -> Tuple[Hat, ...]:
        return self.integrator.hats

    def bundle_path(self) -> str:
        path = self.config["bundle_file"]
        if os.path.isabs(path):
            return path
        return os.path.join(self.plugin_dir(), path)

    def initialize(self):
        Logger.info(self.plugin_name, f"Plugin v{__version__} is starting up.")
        if self.event_system:
            self.event_system.subscribe("on_tick", self._on_tick)
        else:
            Logger.warning(self.plugin_name, "Event system not available, hats will only load on demand.")
        self.start_loading()

    def start_loading(self) -> None:
        Logger.info(self.plugin_name, "Loading hats from bundle.")
        self.loader = HatBundleLoader(self.bundle_path())
        try:
            self.loader.start()
        except BundleNotFoundError as e:
            Logger.error(self.plugin_name, str(e))
            self.loader = None

    def _on_tick(self, event_type, data):
        now = data.get("current_time") if data else None
        if self.loader is not None:
            self._collect_bundle(now)
        self.scheduler.update(now)

    def _collect_bundle(self, now: Optional[float]) -> None:
        try:
            hats = self.loader.poll()
        except BundleLoadError as e:
            Logger.exception(self.plugin_name, "Failed to load hat bundle", e)
            self.loader = None
            return
        if hats is None:
            return
        self.loader = None
        self.on_hats_loaded(hats, now)

    def on_hats_loaded(self, hats, now: Optional[float] = None) -> None:
        """Publishes the hat catalog and starts the retry loop."""
        self.integrator.set_hats(hats)
        Logger.info(self.plugin_name, f"Bundle contains {len(self.hats)} hats.")
        self.scheduler.start(now)

    @broadcast_handler("OnAddHatsForCharacter", Character)
    def on_add_hats_for_character(self, character: Optional[Character]) -> None:
        if character is None:
            Logger.error(self.plugin_name, "OnAddHatsForCharacter called for null character.")
            return
        Logger.debug(self.plugin_name, f"OnAddHatsForCharacter called for {character.describe()}")
        self.integrator.add_hats_for_character(character)

    def cleanup(self):
        self.scheduler.stop()
        if self.event_system:
            self.event_system.unsubscribe("on_tick", self._on_tick)
