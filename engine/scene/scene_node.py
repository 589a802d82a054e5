# engine/scene/scene_node.py
"""
Minimal scene graph used by the host: named nodes with children, a layer,
an active flag, an orientation and attached renderers.
"""
import copy
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar

from engine.utils.rotation import IDENTITY, Quaternion, from_euler

T = TypeVar("T", bound="Renderer")


class Shader:
    def __init__(self, name: str):
        self.name = name

    def __deepcopy__(self, memo):
        # Shaders are shared assets, never cloned with a prefab
        return self

    def __repr__(self) -> str:
        return f"Shader({self.name!r})"


class ShaderLibrary:
    """Registry of shaders the host has compiled. Lookups by name, like Shader.Find."""

    def __init__(self):
        self._shaders: Dict[str, Shader] = {}

    def register(self, name: str) -> Shader:
        shader = self._shaders.get(name)
        if shader is None:
            shader = Shader(name)
            self._shaders[name] = shader
        return shader

    def find(self, name: str) -> Optional[Shader]:
        return self._shaders.get(name)


class Material:
    def __init__(self, shader: Optional[Shader] = None, floats: Optional[Dict[str, float]] = None):
        self.shader = shader
        self.floats: Dict[str, float] = dict(floats or {})
        self.enable_instancing = False
        self.keep_loaded = False  # survives unused-asset sweeps

    def get_float(self, name: str) -> float:
        return self.floats.get(name, 0.0)

    def set_float(self, name: str, value: float) -> None:
        self.floats[name] = float(value)

    def get_float_property_names(self) -> List[str]:
        return list(self.floats.keys())


class Renderer:
    """A component that draws its node. `name` mirrors the owning node's name."""

    def __init__(self, material: Optional[Material] = None):
        self.material = material or Material()
        self.node: Optional["SceneNode"] = None

    @property
    def name(self) -> str:
        return self.node.name if self.node else ""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


class MeshRenderer(Renderer):
    pass


class SkinnedMeshRenderer(Renderer):
    pass


RENDERER_KINDS: Dict[str, Type[Renderer]] = {
    "mesh": MeshRenderer,
    "skinned": SkinnedMeshRenderer,
}


class SceneNode:
    def __init__(self, name: str = "Node", layer: int = 0, active: bool = True,
                 rotation: Quaternion = IDENTITY):
        self.name = name
        self.layer = layer
        self.active = active
        self.rotation: Quaternion = rotation
        self.parent: Optional["SceneNode"] = None
        self.children: List["SceneNode"] = []
        self.renderers: List[Renderer] = []

    def __repr__(self) -> str:
        return f"SceneNode({self.name!r})"

    # --- Hierarchy ---

    def add_child(self, child: "SceneNode") -> "SceneNode":
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def add_renderer(self, renderer: Renderer) -> Renderer:
        renderer.node = self
        self.renderers.append(renderer)
        return renderer

    def walk(self) -> Iterator["SceneNode"]:
        """Depth-first, self first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find_child_recursive(self, name: str) -> Optional["SceneNode"]:
        for node in self.walk():
            if node is not self and node.name == name:
                return node
        return None

    def set_active(self, active: bool) -> None:
        self.active = active

    def set_layer_recursive(self, layer: int) -> None:
        for node in self.walk():
            node.layer = layer

    # --- Components ---

    def get_components_in_children(self, kind: Type[T] = Renderer, include_inactive: bool = False) -> List[T]:
        found: List[T] = []
        for node in self.walk():
            if not include_inactive and not node.active:
                continue
            found.extend(r for r in node.renderers if isinstance(r, kind))
        return found

    def get_component_in_children(self, kind: Type[T] = Renderer, include_inactive: bool = False) -> Optional[T]:
        components = self.get_components_in_children(kind, include_inactive)
        return components[0] if components else None

    # --- Serialization ---

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SceneNode":
        """Builds a node tree from a prefab description."""
        euler = data.get("rotation", [0.0, 0.0, 0.0])
        node = cls(
            name=data.get("name", "Node"),
            layer=int(data.get("layer", 0)),
            active=bool(data.get("active", True)),
            rotation=from_euler(*euler),
        )
        for renderer_data in data.get("renderers", []):
            kind = RENDERER_KINDS.get(renderer_data.get("kind", "mesh"), MeshRenderer)
            material_data = renderer_data.get("material", {})
            material = Material(floats=material_data.get("floats", {}))
            node.add_renderer(kind(material))
        for child_data in data.get("children", []):
            node.add_child(cls.from_dict(child_data))
        return node


def instantiate(prefab: SceneNode, parent: Optional[SceneNode] = None) -> SceneNode:
    """Clones a prefab tree (materials included) and optionally parents the clone."""
    detached_parent = prefab.parent
    prefab.parent = None
    try:
        clone = copy.deepcopy(prefab)
    finally:
        prefab.parent = detached_parent
    if parent is not None:
        parent.add_child(clone)
    return clone
