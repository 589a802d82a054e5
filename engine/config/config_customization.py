# engine/config/config_customization.py
"""
Configuration for the host's customization catalog and character rigs.
"""

# Number of hats the host ships with. Plugins splice their own hats in after these.
BASE_HAT_COUNT = 23

# Name of the child node every character rig parents its hats under.
HAT_CONTAINER_NAME = "Hat"

# Shader shared by every character-attached renderer.
CHARACTER_SHADER_NAME = "W/Character"

# Layer used by the passport preview dummy (rendered by its own camera).
PASSPORT_DUMMY_LAYER = 9

# Default float properties on the character material.
CHARACTER_MATERIAL_DEFAULTS = {
    "_Smoothness": 0.15,
    "_Metallic": 0.0,
    "_OutlineWidth": 0.02,
    "_ShadowStrength": 0.6,
}
