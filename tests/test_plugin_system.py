# tests/test_plugin_system.py
import tempfile
import unittest

import tests.fixtures  # noqa: F401  (puts the project root on sys.path)
from engine.config import PLUGINS_DIR
from engine.customization.character import Character
from engine.utils.logger import LogLevel, Logger
from plugins.broadcast import broadcast_handler
from plugins.custom_hats_plugin import CustomHatsPlugin
from plugins.custom_hats_plugin.config import DEFAULT_CONFIG
from plugins.event_system import EventSystem
from plugins.plugin_system import PluginBase, PluginManager
from plugins.service_locator import ServiceLocator, ServiceNotFoundException


class EchoPlugin(PluginBase):
    plugin_id = "echo"
    plugin_name = "Echo"

    def __init__(self, event_system=None):
        super().__init__(event_system)
        self.characters = []
        self.ticks = []
        self.cleaned_up = False

    def initialize(self):
        self.event_system.subscribe("on_tick", self._on_tick)

    def _on_tick(self, event_type, data):
        self.ticks.append(data["current_time"])

    @broadcast_handler("OnAddHatsForCharacter", Character)
    def on_character(self, character):
        self.characters.append(character)

    def cleanup(self):
        self.cleaned_up = True


class BrokenPlugin(PluginBase):
    plugin_id = "broken"

    def initialize(self):
        raise RuntimeError("cannot start")


class HalfStartedPlugin(PluginBase):
    plugin_id = "half_started"
    instances = []

    def __init__(self, event_system=None):
        super().__init__(event_system)
        self.ticks = []
        HalfStartedPlugin.instances.append(self)

    def initialize(self):
        self.event_system.subscribe("on_tick", self._on_tick)
        raise RuntimeError("failed after subscribing")

    def _on_tick(self, event_type, data):
        self.ticks.append(data["current_time"])


class TestPluginManager(unittest.TestCase):

    def setUp(self):
        Logger.set_level(LogLevel.CRITICAL)
        self.locator = ServiceLocator.initialize()
        self.tmp = tempfile.TemporaryDirectory()
        self.manager = PluginManager(self.locator, plugin_path=self.tmp.name)

    def tearDown(self):
        self.manager.unload_all_plugins()
        ServiceLocator.shutdown()
        self.tmp.cleanup()
        Logger.set_level(LogLevel.DEBUG)

    def test_registers_itself_as_services(self):
        self.assertIs(self.locator.get_service("plugin_manager"), self.manager)
        self.assertIs(self.locator.get_service("event_dispatcher"), self.manager.dispatcher)
        self.assertIs(self.locator.get_service("event_system"), self.manager.event_system)

    def test_load_injects_and_registers_handlers(self):
        plugin = self.manager.load_plugin_class(EchoPlugin)

        self.assertTrue(self.manager.is_loaded("echo"))
        self.assertIs(self.locator.get_service("plugin:echo"), plugin)
        character = Character("Scout")
        invoked = self.manager.broadcast("OnAddHatsForCharacter", character)
        self.assertEqual(plugin.characters, [character])
        self.assertEqual(len(invoked), 1)

        self.manager.on_tick(1.5)
        self.assertEqual(plugin.ticks, [1.5])

    def test_loading_twice_returns_same_instance(self):
        first = self.manager.load_plugin_class(EchoPlugin)
        self.assertIs(self.manager.load_plugin_class(EchoPlugin), first)

    def test_failed_initialize_is_not_kept(self):
        self.assertIsNone(self.manager.load_plugin_class(BrokenPlugin))
        self.assertFalse(self.manager.is_loaded("broken"))
        self.assertFalse(self.locator.has_service("plugin:broken"))

    def test_failed_initialize_drops_subscriptions(self):
        HalfStartedPlugin.instances = []
        self.assertIsNone(self.manager.load_plugin_class(HalfStartedPlugin))

        self.assertEqual(self.manager.event_system.publish("on_tick", {"current_time": 1.0}), 0)
        self.assertEqual(HalfStartedPlugin.instances[0].ticks, [])

    def test_unload_removes_handlers_and_subscriptions(self):
        plugin = self.manager.load_plugin_class(EchoPlugin)

        self.assertTrue(self.manager.unload_plugin("echo"))

        self.assertTrue(plugin.cleaned_up)
        self.assertEqual(self.manager.broadcast("OnAddHatsForCharacter", Character("Scout")), [])
        self.manager.on_tick(2.0)
        self.assertEqual(plugin.ticks, [])
        self.assertFalse(self.manager.unload_plugin("echo"))

    def test_discovers_bundled_plugins(self):
        manager = PluginManager(self.locator, plugin_path=PLUGINS_DIR)
        discovered = manager.discover_plugins()
        self.assertIn("custom_hats_plugin", discovered)
        self.assertIn("more_customizations_plugin", discovered)

        # Disabled by default; only loads when asked for explicitly
        self.assertFalse(manager.load_plugin("more_customizations_plugin"))
        self.assertFalse(manager.is_loaded("MoreCustomizations"))
        self.assertTrue(manager.load_plugin("more_customizations_plugin", force=True))
        self.assertTrue(manager.is_loaded("MoreCustomizations"))
        self.assertFalse(manager.load_plugin("no_such_plugin"))
        manager.unload_all_plugins()

    def test_load_all_skips_disabled_plugins(self):
        manager = PluginManager(self.locator, plugin_path=PLUGINS_DIR)
        manager.load_all_plugins()
        self.assertEqual(list(manager.plugins), ["custom_hats_plugin"])
        manager.unload_all_plugins()

    def test_plugin_config_defaults(self):
        plugin = self.manager.load_plugin_class(CustomHatsPlugin)
        self.assertEqual(plugin.config["hat_insert_index"], DEFAULT_CONFIG["hat_insert_index"])
        self.assertEqual(plugin.scheduler.success_delay, 3.0)
        self.assertEqual(plugin.scheduler.failure_delay, 12.0)
        self.assertTrue(plugin.bundle_path().endswith("bobacustomhats"))

    def test_plugin_without_config_module(self):
        plugin = self.manager.load_plugin_class(EchoPlugin)
        self.assertEqual(plugin.config, {})


class TestServiceLocator(unittest.TestCase):

    def tearDown(self):
        ServiceLocator.shutdown()

    def test_initialize_and_shutdown(self):
        locator = ServiceLocator.initialize()
        locator.register_service("network", object())
        self.assertIs(ServiceLocator.get_instance(), locator)

        ServiceLocator.shutdown()

        fresh = ServiceLocator.get_instance()
        self.assertIsNot(fresh, locator)
        self.assertFalse(fresh.has_service("network"))

    def test_lookups(self):
        locator = ServiceLocator.initialize()
        events = EventSystem()
        locator.register_service("event_system", events)

        self.assertIs(locator.get_service_by_type(EventSystem), events)
        self.assertIsNone(locator.find_service("customization"))
        with self.assertRaises(ServiceNotFoundException):
            locator.get_service("customization")


class TestEventSystem(unittest.TestCase):

    def setUp(self):
        Logger.set_level(LogLevel.CRITICAL)

    def tearDown(self):
        Logger.set_level(LogLevel.DEBUG)

    def test_failing_subscriber_does_not_block_others(self):
        events = EventSystem()
        seen = []

        def broken(event_type, data):
            raise ValueError("nope")

        events.subscribe("on_tick", broken)
        events.subscribe("on_tick", lambda event_type, data: seen.append(data))

        self.assertEqual(events.publish("on_tick", 1), 1)
        self.assertEqual(seen, [1])
        self.assertEqual(events.get_last_event_data("on_tick"), 1)

    def test_unsubscribe_owner(self):
        events = EventSystem()
        plugin = EchoPlugin(events)
        plugin.initialize()
        self.assertEqual(events.unsubscribe_owner(plugin), 1)
        self.assertEqual(events.publish("on_tick", {"current_time": 0.0}), 0)


if __name__ == '__main__':
    unittest.main()
