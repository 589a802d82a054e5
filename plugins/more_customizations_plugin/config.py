"""
plugins/more_customizations_plugin/config.py
Default configuration for the More Customizations plugin.
"""

DEFAULT_CONFIG = {
    # Off unless asked for (main.py --with-more-customizations, or "enabled": true in config.json).
    # While loaded, Custom Hats hands its hats to this registry instead of the host's lists.
    "enabled": False,
    "categories": ["Skin", "Accessory", "Eyes", "Mouth", "Fit", "Hat"],
}
