"""
plugins/custom_hats_plugin/config.py
Default configuration for the Custom Hats plugin.
A config.json next to this file overrides any of these keys.
"""

DEFAULT_CONFIG = {
    # Hat bundle archive, relative to the plugin directory (or absolute)
    "bundle_file": "bobacustomhats",

    # Position in every hat list where the custom hats are spliced in.
    # The host ships 23 hats; everything from here on belongs to plugins.
    "hat_insert_index": 23,

    # Retry pacing (real seconds)
    "retry_success_delay": 3.0,   # after an attempt that finished, ready or not
    "retry_failure_delay": 12.0,  # after an attempt that raised

    # Host rig conventions
    "hat_container_name": "Hat",
    "character_shader": "W/Character",

    # More Customizations compatibility
    "more_customizations_id": "MoreCustomizations",
    "bridge_category": "Hat",
    "bridge_rotation_axis": "x",
    "bridge_rotation_degrees": -90.0,
}
