# engine/customization/character.py
"""
Characters and their cosmetic rigs. Each character owns a CharacterCustomization
whose `refs.player_hats` lists one renderer per hat option, index-aligned with
Customization.hats, parented under the rig's "Hat" node.
"""
from typing import List, Optional

from engine.config import HAT_CONTAINER_NAME
from engine.scene.scene_node import Renderer, SceneNode


class CustomizationRefs:
    def __init__(self, player_hats: Optional[List[Renderer]] = None):
        self.player_hats: Optional[List[Renderer]] = player_hats


class CharacterCustomization:
    def __init__(self, transform: SceneNode, player_hats: Optional[List[Renderer]] = None):
        self.transform = transform
        self.refs = CustomizationRefs(player_hats)

    def equip_hat(self, index: int) -> bool:
        """Shows the hat at `index` and hides every other one."""
        hats = self.refs.player_hats or []
        if index < 0 or index >= len(hats):
            return False
        for i, renderer in enumerate(hats):
            if renderer.node is not None:
                renderer.node.set_active(i == index)
        return True

    def equipped_hat(self) -> Optional[Renderer]:
        for renderer in self.refs.player_hats or []:
            if renderer.node is not None and renderer.node.active:
                return renderer
        return None


class CharacterRefs:
    def __init__(self, customization: Optional[CharacterCustomization] = None):
        self.customization = customization


class PhotonView:
    """Network identity of a spawned object. `owner` is the owning NetworkPlayer."""

    def __init__(self, owner=None):
        self.owner = owner


class Character:
    def __init__(self, name: str, refs: Optional[CharacterRefs] = None, photon_view: Optional[PhotonView] = None):
        self.name = name
        self.refs = refs
        self.photon_view = photon_view

    @property
    def actor_number(self) -> Optional[int]:
        if self.photon_view is None or self.photon_view.owner is None:
            return None
        return self.photon_view.owner.actor_number

    def describe(self) -> str:
        return f"Character #{self.actor_number} '{self.name}'"


class CharacterRegistry:
    """Every live character in the scene, plus the one this client controls."""

    def __init__(self):
        self.all_characters: List[Character] = []
        self.local_character: Optional[Character] = None

    def add(self, character: Character, is_local: bool = False) -> None:
        self.all_characters.append(character)
        if is_local:
            self.local_character = character

    def remove(self, character: Character) -> None:
        if character in self.all_characters:
            self.all_characters.remove(character)
        if self.local_character is character:
            self.local_character = None

    def get_by_actor_number(self, actor_number: int) -> Optional[Character]:
        for character in self.all_characters:
            if character.actor_number == actor_number:
                return character
        return None


def build_character_rig(name: str, hat_renderers: List[Renderer]) -> SceneNode:
    """Creates Root/Body/Head/<container> and parents the given hat renderers' nodes under the container."""
    root = SceneNode(name)
    body = root.add_child(SceneNode("Body"))
    head = body.add_child(SceneNode("Head"))
    container = head.add_child(SceneNode(HAT_CONTAINER_NAME))
    for renderer in hat_renderers:
        if renderer.node is not None:
            container.add_child(renderer.node)
    return root
