"""
plugins/plugin_system.py
Plugin system for the host game.
Discovers plugin packages, wires their dependencies and fans host events out to them.
"""
import importlib
import inspect
import json
import os
from typing import Any, Dict, List, Optional, Type

from engine.config import PLUGINS_DIR
from engine.utils.logger import Logger
from plugins.broadcast import EventDispatcher
from plugins.event_system import EventSystem
from plugins.service_locator import ServiceLocator, get_service_locator


class PluginManager:
    def __init__(self, service_locator: Optional[ServiceLocator] = None, plugin_path: str = PLUGINS_DIR,
                 package: str = "plugins"):
        self.plugins: Dict[str, Any] = {}  # Plugin ID to instance mapping, in load order
        self.plugin_path = plugin_path
        self.package = package

        self.service_locator = service_locator or get_service_locator()
        # Tick/event fan-out and cross-plugin broadcasts
        self.event_system = EventSystem()
        self.dispatcher = EventDispatcher()

        self.service_locator.register_service("event_system", self.event_system)
        self.service_locator.register_service("event_dispatcher", self.dispatcher)
        self.service_locator.register_service("plugin_manager", self)

    def discover_plugins(self) -> List[str]:
        """Package names under the plugin path that look like plugins (a directory with __init__.py)."""
        plugin_modules = []
        if not os.path.isdir(self.plugin_path):
            return plugin_modules

        for dirname in sorted(os.listdir(self.plugin_path)):
            full_dir_path = os.path.join(self.plugin_path, dirname)
            init_file = os.path.join(full_dir_path, "__init__.py")
            if dirname != "__pycache__" and os.path.isdir(full_dir_path) and os.path.exists(init_file):
                plugin_modules.append(dirname)

        Logger.debug("PluginManager", f"Discovered plugin modules: {plugin_modules}")
        return plugin_modules

    def load_plugin(self, plugin_name: str, force: bool = False) -> bool:
        """Imports and loads a plugin package. A plugin whose config says `enabled: False` is skipped unless forced."""
        try:
            module = importlib.import_module(f"{self.package}.{plugin_name}")
        except Exception as e:
            Logger.exception("PluginManager", f"Error importing plugin {plugin_name}", e)
            return False

        plugin_class = None
        for _, obj in inspect.getmembers(module, inspect.isclass):
            if issubclass(obj, PluginBase) and obj is not PluginBase and obj.__module__ == module.__name__:
                plugin_class = obj
                break

        if plugin_class is None:
            Logger.warning("PluginManager", f"No plugin class found in {plugin_name}")
            return False

        if not force and not plugin_class.load_config().get("enabled", True):
            Logger.info("PluginManager", f"Plugin {plugin_class.plugin_id} is disabled, not loading")
            return False

        return self.load_plugin_class(plugin_class) is not None

    def load_plugin_class(self, plugin_class: Type["PluginBase"]) -> Optional["PluginBase"]:
        """Instantiates, initializes and registers a plugin class. Returns the instance, or None on failure."""
        if plugin_class.plugin_id in self.plugins:
            Logger.info("PluginManager", f"Plugin {plugin_class.plugin_id} is already loaded")
            return self.plugins[plugin_class.plugin_id]

        # Inject only what the constructor asks for
        available = {
            "event_system": self.event_system,
            "dispatcher": self.dispatcher,
            "service_locator": self.service_locator,
            "plugin_manager": self,
        }
        params = inspect.signature(plugin_class.__init__).parameters
        kwargs = {name: value for name, value in available.items() if name in params}

        plugin = None
        try:
            plugin = plugin_class(**kwargs)
            # Registered before initialize() so plugins can detect each other while starting up
            self.plugins[plugin.plugin_id] = plugin
            self.service_locator.register_service(f"plugin:{plugin.plugin_id}", plugin)
            plugin.initialize()
        except Exception as e:
            Logger.exception("PluginManager", f"Error loading plugin {plugin_class.plugin_id}", e)
            if plugin is not None:
                # initialize() may have subscribed before failing
                self.event_system.unsubscribe_owner(plugin)
            self.plugins.pop(plugin_class.plugin_id, None)
            self.service_locator.unregister_service(f"plugin:{plugin_class.plugin_id}")
            return None

        handler_count = self.dispatcher.register_owner(plugin.plugin_id, plugin)
        Logger.info("PluginManager", f"Loaded plugin: {plugin.plugin_id} ({handler_count} broadcast handlers)")
        self.event_system.publish("plugin_loaded", {
            "plugin_id": plugin.plugin_id,
            "plugin_name": plugin.plugin_name,
        })
        return plugin

    def load_all_plugins(self) -> None:
        for plugin_name in self.discover_plugins():
            self.load_plugin(plugin_name)

    def unload_plugin(self, plugin_id: str) -> bool:
        plugin = self.plugins.get(plugin_id)
        if plugin is None:
            return False

        try:
            plugin.cleanup()
        except Exception as e:
            Logger.exception("PluginManager", f"Error cleaning up plugin {plugin_id}", e)

        self.event_system.unsubscribe_owner(plugin)
        self.dispatcher.unregister_owner(plugin_id)
        self.service_locator.unregister_service(f"plugin:{plugin_id}")
        self.plugins.pop(plugin_id)

        self.event_system.publish("plugin_unloaded", {"plugin_id": plugin_id})
        Logger.info("PluginManager", f"Unloaded plugin: {plugin_id}")
        return True

    def unload_all_plugins(self) -> None:
        for plugin_id in reversed(list(self.plugins.keys())):
            self.unload_plugin(plugin_id)

    def get_plugin(self, plugin_id: str) -> Optional[Any]:
        return self.plugins.get(plugin_id)

    def is_loaded(self, plugin_id: str) -> bool:
        return plugin_id in self.plugins

    def on_tick(self, current_time: float) -> None:
        self.event_system.publish("on_tick", {"current_time": current_time})

    def broadcast(self, event_name: str, *args) -> List[str]:
        return self.dispatcher.broadcast(event_name, *args)


class PluginBase:
    plugin_id = "base_plugin"
    plugin_name = "Base Plugin"

    def __init__(self, event_system=None, service_locator=None):
        self.event_system = event_system
        self.service_locator = service_locator
        self.config = self.load_config()

    @classmethod
    def plugin_dir(cls) -> str:
        module = importlib.import_module(cls.__module__)
        return os.path.dirname(os.path.abspath(module.__file__))

    @classmethod
    def load_config(cls) -> Dict[str, Any]:
        """DEFAULT_CONFIG from the plugin package's config.py, overridden by a config.json beside it."""
        package = cls.__module__
        try:
            config_module = importlib.import_module(f"{package}.config")
            config = dict(getattr(config_module, "DEFAULT_CONFIG", {}))
        except ImportError:
            config = {}

        config_path = os.path.join(cls.plugin_dir(), "config.json")
        if os.path.exists(config_path):
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    user_config = json.load(f)
                config.update(user_config)
            except (OSError, ValueError) as e:
                Logger.error(cls.plugin_name, f"Error loading config for {cls.plugin_id}: {e}")

        return config

    def initialize(self):
        pass

    def cleanup(self):
        pass
