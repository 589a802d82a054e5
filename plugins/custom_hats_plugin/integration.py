"""
plugins/custom_hats_plugin/integration.py
Merging the loaded hats into the host.

Three kinds of hat lists need the same hats at the same index: the customization
catalog (options shown in the picker), the passport dummy's renderers and every
character's renderers. Each attempt walks those in order and bails out at the
first thing the host hasn't set up yet; the retry scheduler comes back later.
"""
from typing import Dict, FrozenSet, List, Optional, Sequence

from engine.customization.character import Character
from engine.customization.customization import WHITE, Achievement, CustomizationOption, CustomizationType
from engine.scene.scene_node import MeshRenderer, Renderer, SceneNode, Shader, instantiate
from engine.utils.logger import Logger
from plugins.custom_hats_plugin.bundle import Hat
from plugins.custom_hats_plugin.compat import MoreCustomizationsCompat
from plugins.custom_hats_plugin.insertion import array_insert, tail_has_hats
from plugins.service_locator import ServiceLocator

LOG_SOURCE = "CustomHats"


def create_hat_option(hat: Hat) -> CustomizationOption:
    return CustomizationOption(
        name=hat.name,
        option_type=CustomizationType.HAT,
        texture=hat.icon,
        color=WHITE,
        required_achievement=Achievement.NONE,
    )


def material_float_props(renderers: Optional[Sequence[Renderer]]) -> Optional[Dict[str, float]]:
    """Float properties of the first mesh material found under the first existing hat."""
    if not renderers or renderers[0] is None or renderers[0].node is None:
        return None
    mesh_renderer = renderers[0].node.get_component_in_children(MeshRenderer, include_inactive=True)
    if mesh_renderer is None:
        return None
    material = mesh_renderer.material
    return {name: material.get_float(name) for name in material.get_float_property_names()}


class HatIntegrator:
    def __init__(self, service_locator: ServiceLocator, config: Dict, hats: Sequence[Hat] = ()):
        self.service_locator = service_locator
        self.config = config
        self.hats: tuple = tuple(hats)
        self.hat_names: FrozenSet[str] = frozenset(hat.name for hat in self.hats)
        # Set once the catalog has our options; later steps depend on it
        self.hats_inserted = False
        self._character_shader: Optional[Shader] = None

    @property
    def insert_index(self) -> int:
        return int(self.config["hat_insert_index"])

    @property
    def character_shader(self) -> Optional[Shader]:
        if self._character_shader is None:
            shaders = self.service_locator.find_service("shader_library")
            if shaders is not None:
                self._character_shader = shaders.find(self.config["character_shader"])
        return self._character_shader

    def set_hats(self, hats: Sequence[Hat]) -> None:
        self.hats = tuple(hats)
        self.hat_names = frozenset(hat.name for hat in self.hats)

    # --- Host lookups ---

    def get_bridge(self):
        plugin_manager = self.service_locator.find_service("plugin_manager")
        if plugin_manager is None:
            return None
        return plugin_manager.get_plugin(self.config["more_customizations_id"])

    def get_local_character(self) -> Optional[Character]:
        registry = self.service_locator.find_service("character_registry")
        if registry is None:
            return None
        if registry.local_character is not None:
            return registry.local_character
        network = self.service_locator.find_service("network")
        if network is None:
            return None
        return registry.get_by_actor_number(network.local_player.actor_number)

    # --- Attempt ---

    def attempt(self) -> None:
        """One integration pass. Returns early whenever the host isn't ready; raises on real errors."""
        if not self.hats:
            Logger.error(LOG_SOURCE, "No hats loaded, skipping instantiation!")
            return

        bridge = self.get_bridge()
        if bridge is not None:
            Logger.info(LOG_SOURCE, "More Customizations detected, loading compatibility.")
            MoreCustomizationsCompat.load_hats(
                bridge, self.hats,
                category=self.config["bridge_category"],
                rotation_axis=self.config["bridge_rotation_axis"],
                rotation_degrees=float(self.config["bridge_rotation_degrees"]),
            )
            return
        Logger.debug(LOG_SOURCE, "More Customizations not detected, skipping compatibility loading.")

        customization = self.service_locator.find_service("customization")
        if customization is None:
            Logger.error(LOG_SOURCE, "Customization component not instantiated yet!")
            return

        if not customization.hats:
            Logger.error(LOG_SOURCE, "Customization.hats is not populated yet, not adding hats!")
            return

        if tail_has_hats(customization.hats, self.insert_index, self.hat_names):
            self.hats_inserted = True
        else:
            Logger.debug(LOG_SOURCE, "Adding hat customization options.")
            new_options = [create_hat_option(hat) for hat in self.hats]
            customization.hats = array_insert(customization.hats, self.insert_index, new_options)
            self.hats_inserted = True
            Logger.debug(LOG_SOURCE, f"Completed adding {len(new_options)} hats to customization options.")

        if not self.add_hats_for_dummy():
            return

        self.add_hats_for_character(self.get_local_character())

    def add_hats_for_dummy(self) -> bool:
        """Merges hats into the passport dummy. Returns False if the attempt should stop here."""
        passport = self.service_locator.find_service("passport_manager")
        dummy = passport.dummy if passport is not None else None
        if dummy is None:
            Logger.error(LOG_SOURCE, "Passport dummy not available yet, cannot instantiate hats for dummy.")
            return False

        container = dummy.transform.find_child_recursive(self.config["hat_container_name"])
        if container is None:
            Logger.error(LOG_SOURCE, "Dummy hat container not found, cannot instantiate hats for dummy.")
            return False

        if not self.hats_inserted:
            Logger.error(LOG_SOURCE, "Hats are not inserted yet, not instantiating hats!")
            return False

        dummy_hats = dummy.refs.player_hats
        if tail_has_hats(dummy_hats, self.insert_index, self.hat_names):
            return True

        first_dummy_hat = dummy_hats[0] if dummy_hats else None
        if first_dummy_hat is None or first_dummy_hat.node is None:
            Logger.debug(LOG_SOURCE, "Dummy is missing hats - something is wrong, aborting...")
            return False

        Logger.debug(LOG_SOURCE, f"Instantiating hats for dummy as children of {container}.")
        new_renderers = self.instantiate_hats(container, material_float_props(dummy_hats),
                                              layer=first_dummy_hat.node.layer)
        dummy.refs.player_hats = array_insert(dummy_hats, self.insert_index, new_renderers)
        Logger.debug(LOG_SOURCE, "Completed adding hats to passport dummy.")
        return True

    # --- Per character ---

    def add_hats_for_character(self, character: Optional[Character]) -> bool:
        """
        Merges hats into one character's rig.

        Returns:
            True if hats were added by this call. Missing prerequisites are logged
            and leave the character for a later tick or broadcast.
        """
        if not self.hats:
            Logger.error(LOG_SOURCE, "Hats not loaded yet, cannot instantiate hats!")
            return False

        if not self.hats_inserted:
            Logger.error(LOG_SOURCE, "Hats are not inserted yet, not instantiating hats!")
            return False

        if character is None:
            Logger.error(LOG_SOURCE, "Local character not found, cannot instantiate hats!")
            return False

        if character.refs is None:
            Logger.error(LOG_SOURCE, f"{character.describe()} is missing refs!")
            return False

        char_customization = character.refs.customization
        if char_customization is None:
            Logger.error(LOG_SOURCE, f"{character.describe()} is missing a customization component!")
            return False

        customization_hats = char_customization.refs.player_hats
        if customization_hats is None:
            Logger.error(LOG_SOURCE, f"{character.describe()} is missing hats on the customization component!")
            return False

        if tail_has_hats(customization_hats, self.insert_index, self.hat_names):
            Logger.debug(LOG_SOURCE, f"{character.describe()} already has hats, skipping.")
            return False

        container = char_customization.transform.find_child_recursive(self.config["hat_container_name"])
        if container is None:
            Logger.error(LOG_SOURCE, "Hats container not found, cannot instantiate hats.")
            return False

        Logger.debug(LOG_SOURCE, f"Adding hats to {character.describe()} as children of {container}")
        new_renderers = self.instantiate_hats(container, material_float_props(customization_hats))
        char_customization.refs.player_hats = array_insert(customization_hats, self.insert_index, new_renderers)
        Logger.debug(LOG_SOURCE, f"Completed adding hats to {character.describe()}")
        return True

    def instantiate_hats(self, container: SceneNode, float_props: Optional[Dict[str, float]],
                         layer: Optional[int] = None) -> List[Renderer]:
        """Clones every hat prefab under `container`, matching shading to the rig's own hats. All start hidden."""
        shader = self.character_shader
        new_renderers: List[Renderer] = []
        for hat in self.hats:
            if hat.prefab is None:
                Logger.error(LOG_SOURCE, f"Hat prefab for '{hat.name}' is null, skipping instantiation.")
                continue

            new_hat = instantiate(hat.prefab, container)
            new_hat.name = hat.name
            if layer is not None:
                new_hat.set_layer_recursive(layer)

            for mesh_renderer in new_hat.get_components_in_children(MeshRenderer, include_inactive=True):
                material = mesh_renderer.material
                material.enable_instancing = True
                material.keep_loaded = True
                material.shader = shader
                if float_props is None:
                    continue
                for prop, value in float_props.items():
                    material.set_float(prop, value)

            renderer = new_hat.get_component_in_children(Renderer, include_inactive=True)
            if renderer is None:
                Logger.error(LOG_SOURCE, f"Hat prefab for '{hat.name}' has no renderer, skipping.")
                container.children.remove(new_hat)
                continue
            # Hat lists are matched by name, so the renderer's node carries the hat's name
            renderer.node.name = hat.name
            renderer.node.set_active(False)
            new_renderers.append(renderer)

        return new_renderers
