# engine/config/config_game.py
"""
Configuration for core host systems, file paths, and debug settings.
"""
import os

# --- Directories and Files ---
# config_game.py is in engine/config/, so we go up two levels to get to root.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
PLUGINS_DIR = os.path.join(BASE_DIR, "plugins")

# --- Main Loop ---
TARGET_FPS = 30
MAX_FRAME_DELTA = 0.1  # Clamp long frames so a stall doesn't fast-forward the host

# --- Logging ---
LOG_LEVEL_NAME = "DEBUG"

# --- Demo Session Settings ---
# Seconds the host waits before its customization catalog becomes available.
DEMO_CUSTOMIZATION_BOOT_DELAY = 4.0
# Seconds before the local character spawns into the scene.
DEMO_CHARACTER_SPAWN_DELAY = 6.0
DEMO_SESSION_SECONDS = 20.0
