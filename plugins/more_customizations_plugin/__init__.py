"""
plugins/more_customizations_plugin/__init__.py
More Customizations: a third-party plugin that keeps its own registry of extra
cosmetics, grouped by category, and adds them to the game itself. Other plugins
contribute entries by replacing the registry with an extended copy.
"""
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

from engine.scene.scene_node import SceneNode
from engine.utils.logger import Logger
from engine.utils.rotation import IDENTITY, Quaternion
from plugins.plugin_system import PluginBase

from .config import DEFAULT_CONFIG


class CustomizationData:
    def __init__(self, name: str, icon=None, prefab: Optional[SceneNode] = None,
                 rotation_offset: Quaternion = IDENTITY,
                 position_offset: Tuple[float, float, float] = (0.0, 0.0, 0.0)):
        self.name = name
        self.icon = icon
        self.prefab = prefab
        self.rotation_offset = rotation_offset
        self.position_offset = position_offset

    def __repr__(self) -> str:
        return f"CustomizationData({self.name!r})"


Registry = Mapping[str, Tuple[CustomizationData, ...]]


def freeze_registry(categories: Mapping[str, Sequence[CustomizationData]]) -> Registry:
    return MappingProxyType({category: tuple(entries) for category, entries in categories.items()})


class MoreCustomizationsPlugin(PluginBase):
    plugin_id = "MoreCustomizations"
    plugin_name = "More Customizations"

    def __init__(self, event_system=None, service_locator=None):
        super().__init__(event_system, service_locator)
        # Read-only view; contributors replace the whole value
        self.customizations: Registry = freeze_registry({c: [] for c in self.config.get("categories", [])})

    def initialize(self):
        Logger.info(self.plugin_name, f"Registry ready with categories: {', '.join(self.customizations)}")

    def entries(self, category: str) -> Tuple[CustomizationData, ...]:
        return self.customizations.get(category, ())

    def count(self, category: str) -> int:
        return len(self.entries(category))
