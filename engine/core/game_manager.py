# engine/core/game_manager.py
import threading
from typing import Callable, List, Optional, Tuple

import pygame

from engine.config import (
    BASE_HAT_COUNT, CHARACTER_MATERIAL_DEFAULTS, CHARACTER_SHADER_NAME, MAX_FRAME_DELTA,
    PASSPORT_DUMMY_LAYER, PLUGINS_DIR, TARGET_FPS
)
from engine.customization.character import (
    Character, CharacterCustomization, CharacterRefs, CharacterRegistry, PhotonView, build_character_rig
)
from engine.customization.customization import Customization, CustomizationOption, CustomizationType
from engine.customization.passport import PassportManager
from engine.network import NetworkSession
from engine.scene.scene_node import Material, MeshRenderer, Renderer, SceneNode, ShaderLibrary
from engine.utils.logger import Logger
from plugins.plugin_system import PluginManager
from plugins.service_locator import ServiceLocator

NEW_CHARACTER_EVENT = "OnAddHatsForCharacter"


def base_hat_name(index: int) -> str:
    return f"BaseHat{index:02d}"


class GameManager:
    """
    Headless host: owns the customization catalog, the passport dummy and the
    characters, and ticks plugins. Nothing here knows about any specific plugin.
    """

    def __init__(self, plugin_path: str = PLUGINS_DIR, base_hat_count: int = BASE_HAT_COUNT,
                 local_actor_number: int = 1):
        self.service_locator = ServiceLocator.initialize()
        self.exit_event = threading.Event()
        self.base_hat_count = base_hat_count

        self.shader_library = ShaderLibrary()
        self.character_shader = self.shader_library.register(CHARACTER_SHADER_NAME)
        self.network = NetworkSession(local_actor_number)
        self.characters = CharacterRegistry()

        # Booted later, like the real catalog scene
        self.customization: Optional[Customization] = None
        self.passport_manager: Optional[PassportManager] = None

        self.service_locator.register_service("exit_event", self.exit_event)
        self.service_locator.register_service("shader_library", self.shader_library)
        self.service_locator.register_service("network", self.network)
        self.service_locator.register_service("character_registry", self.characters)

        self.plugin_manager = PluginManager(self.service_locator, plugin_path)

        self.elapsed = 0.0
        self._timers: List[Tuple[float, Callable[[], None]]] = []

    # --- Plugins ---

    def load_plugins(self) -> None:
        self.plugin_manager.load_all_plugins()

    # --- Scene setup ---

    def _make_hat_renderers(self, layer: int = 0) -> List[Renderer]:
        renderers: List[Renderer] = []
        for index in range(self.base_hat_count):
            node = SceneNode(base_hat_name(index), layer=layer, active=(index == 0))
            material = Material(self.character_shader, CHARACTER_MATERIAL_DEFAULTS)
            renderers.append(node.add_renderer(MeshRenderer(material)))
        return renderers

    def boot_customization(self) -> Customization:
        """Populates the hat catalog and the passport dummy and publishes them to plugins."""
        customization = Customization()
        customization.hats = [
            CustomizationOption(base_hat_name(i), CustomizationType.HAT) for i in range(self.base_hat_count)
        ]
        self.customization = customization

        dummy_hats = self._make_hat_renderers(layer=PASSPORT_DUMMY_LAYER)
        dummy = CharacterCustomization(build_character_rig("PassportDummy", dummy_hats), dummy_hats)
        self.passport_manager = PassportManager(dummy)

        self.service_locator.register_service("customization", customization)
        self.service_locator.register_service("passport_manager", self.passport_manager)
        Logger.info("GameManager", f"Customization booted with {len(customization.hats)} hats.")
        return customization

    def spawn_character(self, name: str, actor_number: int, is_local: bool = False) -> Character:
        """Spawns a character and announces it so plugins can dress it."""
        hats = self._make_hat_renderers()
        char_customization = CharacterCustomization(build_character_rig(name, hats), hats)
        owner = self.network.join(actor_number)
        character = Character(name, CharacterRefs(char_customization), PhotonView(owner))
        self.characters.add(character, is_local=is_local)
        Logger.info("GameManager", f"Spawned {character.describe()}")

        self.plugin_manager.broadcast(NEW_CHARACTER_EVENT, character)
        return character

    # --- Loop ---

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        """Runs `callback` once, `delay` host seconds from now."""
        self._timers.append((self.elapsed + delay, callback))

    def update(self, dt: float) -> None:
        self.elapsed += min(max(dt, 0.0), MAX_FRAME_DELTA)

        due = [t for t in self._timers if t[0] <= self.elapsed]
        self._timers = [t for t in self._timers if t[0] > self.elapsed]
        for _, callback in due:
            callback()

        self.plugin_manager.on_tick(self.elapsed)

    def run(self, duration: Optional[float] = None) -> None:
        pygame.init()
        clock = pygame.time.Clock()
        try:
            while not self.exit_event.is_set():
                dt = clock.tick(TARGET_FPS) / 1000.0
                self.update(dt)
                if duration is not None and self.elapsed >= duration:
                    break
        finally:
            pygame.quit()

    def shutdown(self) -> None:
        self.exit_event.set()
        self.plugin_manager.unload_all_plugins()
        ServiceLocator.shutdown()
