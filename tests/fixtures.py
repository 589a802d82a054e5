# tests/fixtures.py
import io
import json
import os
import sys
import tempfile
import unittest
import zipfile
from typing import Dict, Iterable, List, Optional

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

# Get the absolute path to the project root (one level up from tests/)
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

# Insert root into sys.path so we can import 'engine' and 'plugins'
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pygame

from engine.core.game_manager import GameManager
from engine.scene.scene_node import SceneNode
from engine.utils.logger import LogLevel, Logger
from plugins.custom_hats_plugin import CustomHatsPlugin
from plugins.custom_hats_plugin.bundle import Hat
from plugins.custom_hats_plugin.compat import MoreCustomizationsCompat
from plugins.more_customizations_plugin import MoreCustomizationsPlugin


class Named:
    """Bare list entry with a name, for exercising the splice helpers."""

    def __init__(self, name: str):
        self.name = name

    def __repr__(self):
        return f"Named({self.name!r})"


def names(entries: Optional[Iterable]) -> List[str]:
    return [entry.name for entry in entries or []]


def make_hat(name: str, smoothness: float = 0.9, rotation_x: float = 0.0) -> Hat:
    data = {
        "name": name,
        "rotation": [rotation_x, 0.0, 0.0],
        "renderers": [{"kind": "mesh", "material": {"floats": {"_Smoothness": smoothness, "_HatOnly": 1.0}}}],
    }
    return Hat(name, SceneNode.from_dict(data), pygame.Surface((4, 4)))


def make_child_hat(name: str, child_active: bool = True) -> Hat:
    """A hat whose renderer sits on a child node ('Brim') rather than on the prefab root."""
    data = {
        "name": name,
        "children": [{
            "name": "Brim",
            "active": child_active,
            "renderers": [{"kind": "mesh", "material": {"floats": {"_HatOnly": 1.0}}}],
        }],
    }
    return Hat(name, SceneNode.from_dict(data), pygame.Surface((4, 4)))


def write_bundle(path: str, members: Dict[str, bytes]) -> str:
    with zipfile.ZipFile(path, "w") as archive:
        for member, payload in members.items():
            archive.writestr(member, payload)
    return path


def prefab_bytes(name: str) -> bytes:
    return json.dumps({"name": name, "renderers": [{"kind": "mesh"}]}).encode("utf-8")


def png_bytes(size=(4, 4), color=(255, 0, 0)) -> bytes:
    surface = pygame.Surface(size)
    surface.fill(color)
    buffer = io.BytesIO()
    pygame.image.save(surface, buffer, "icon.png")
    return buffer.getvalue()


class HostTestBase(unittest.TestCase):
    """Base class for tests that need a running host and the Custom Hats plugin."""

    hat_names = ("top", "crown")

    def setUp(self):
        """Runs before EVERY test function."""
        Logger.set_level(LogLevel.CRITICAL)
        MoreCustomizationsCompat.reset()

        # 1. Headless host, no plugin discovery
        self.tmp = tempfile.TemporaryDirectory()
        self.game = GameManager(plugin_path=self.tmp.name)
        self.plugin_manager = self.game.plugin_manager

        # 2. Load the plugin directly; its bundle file doesn't exist, so hats are handed over below
        self.plugin = self.plugin_manager.load_plugin_class(CustomHatsPlugin)
        if self.plugin is None:
            self.fail("Custom Hats plugin failed to load.")
        # Ignore any bundle on disk; tests hand hats over directly
        self.plugin.loader = None
        self.integrator = self.plugin.integrator
        self.hats = [make_hat(name) for name in self.hat_names]

    def tearDown(self):
        self.game.shutdown()
        self.tmp.cleanup()
        MoreCustomizationsCompat.reset()
        Logger.set_level(LogLevel.DEBUG)

    def deliver_hats(self):
        self.plugin.on_hats_loaded(self.hats, now=self.game.elapsed)

    def load_bridge(self) -> MoreCustomizationsPlugin:
        bridge = self.plugin_manager.load_plugin_class(MoreCustomizationsPlugin)
        if bridge is None:
            self.fail("More Customizations plugin failed to load.")
        return bridge

    def tick(self, seconds: float, step: float = 0.1):
        """Advances the host clock in steps no larger than the frame clamp."""
        steps = int(round(seconds / step))
        for _ in range(steps):
            self.game.update(step)

