# engine/customization/customization.py
"""
The host's customization catalog: every cosmetic option a player can pick,
grouped by slot type. Populated once the customization scene has booted.
"""
from enum import Enum
from typing import List, Optional, Tuple

Color = Tuple[float, float, float, float]
WHITE: Color = (1.0, 1.0, 1.0, 1.0)


class CustomizationType(Enum):
    SKIN = "skin"
    ACCESSORY = "accessory"
    EYES = "eyes"
    MOUTH = "mouth"
    OUTFIT = "outfit"
    HAT = "hat"


class Achievement(Enum):
    NONE = "none"
    PEAK = "peak"
    NAPBERRY = "napberry"


class CustomizationOption:
    def __init__(self, name: str, option_type: CustomizationType, texture=None,
                 color: Color = WHITE, required_achievement: Achievement = Achievement.NONE):
        self.name = name
        self.type = option_type
        self.texture = texture
        self.color = color
        self.required_achievement = required_achievement

    def __repr__(self) -> str:
        return f"CustomizationOption({self.name!r}, {self.type.value})"


class Customization:
    """Host-owned option lists. Each list is replaced wholesale when extended."""

    def __init__(self):
        self.hats: Optional[List[CustomizationOption]] = None
