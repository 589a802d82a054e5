"""
plugins/custom_hats_plugin/compat.py
More Customizations compatibility.

When More Customizations is installed it owns hat handling, so instead of touching
the host's hat lists we hand our hats to its registry, once.
"""
from typing import Dict, List, Sequence

from engine.utils.logger import Logger
from engine.utils.rotation import rotate
from plugins.more_customizations_plugin import CustomizationData, freeze_registry


class MoreCustomizationsCompat:
    _loaded = False

    @classmethod
    def is_loaded(cls) -> bool:
        return cls._loaded

    @classmethod
    def reset(cls) -> None:
        cls._loaded = False

    @classmethod
    def load_hats(cls, bridge, hats: Sequence, category: str = "Hat",
                  rotation_axis: str = "x", rotation_degrees: float = -90.0) -> bool:
        """
        Appends one entry per hat to the bridge's `category` and swaps the registry in.

        Returns:
            True if the hats were added by this call.
        """
        if cls._loaded:
            return False

        registry = getattr(bridge, "customizations", None)
        if registry is None:
            Logger.error("CustomHats", "More Customizations registry is not available yet, retrying later.")
            return False

        Logger.info("CustomHats", f"Loading hats for More Customizations compatibility: {bridge.plugin_name}")

        categories: Dict[str, List[CustomizationData]] = {name: list(entries) for name, entries in registry.items()}
        target = categories.setdefault(category, [])
        for hat in hats:
            # More Customizations orients hats a quarter turn off from our prefabs
            offset = rotate(hat.prefab.rotation, rotation_axis, rotation_degrees)
            target.append(CustomizationData(hat.name, icon=hat.icon, prefab=hat.prefab, rotation_offset=offset))

        bridge.customizations = freeze_registry(categories)
        cls._loaded = True
        Logger.info("CustomHats", f"Added {len(hats)} hats to More Customizations '{category}' ({len(target)} total).")
        return True
