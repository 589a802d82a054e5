# tools/make_demo_bundle.py
"""
Builds a small hat bundle for trying the Custom Hats plugin against the demo host.
Each hat gets a flat-colored icon and a one-node prefab with a mesh renderer.
"""
import argparse
import io
import json
import os
import zipfile
from typing import Dict, Tuple

import pygame

DEFAULT_OUTPUT = os.path.join("plugins", "custom_hats_plugin", "bobacustomhats")
ICON_SIZE = (64, 64)

DEMO_HATS: Dict[str, Tuple[int, int, int]] = {
    "boba": (196, 140, 98),
    "crown": (240, 200, 40),
    "top": (30, 30, 30),
}


def prefab_for(name: str) -> Dict:
    return {
        "name": name,
        "rotation": [90.0, 0.0, 0.0],
        "renderers": [{"kind": "mesh", "material": {"floats": {"_Smoothness": 0.5}}}],
        "children": [],
    }


def icon_bytes(color: Tuple[int, int, int]) -> bytes:
    surface = pygame.Surface(ICON_SIZE)
    surface.fill(color)
    buffer = io.BytesIO()
    pygame.image.save(surface, buffer, "icon.png")
    return buffer.getvalue()


def write_bundle(path: str, hats: Dict[str, Tuple[int, int, int]]) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        for name, color in hats.items():
            archive.writestr(f"hats/{name}.json", json.dumps(prefab_for(name), indent=2))
            archive.writestr(f"hats/{name}.png", icon_bytes(color))


def main():
    parser = argparse.ArgumentParser(description="Build a demo hat bundle")
    parser.add_argument("--output", "-o", default=DEFAULT_OUTPUT, help="Where to write the bundle")
    args = parser.parse_args()

    write_bundle(args.output, DEMO_HATS)
    print(f"Wrote {len(DEMO_HATS)} hats to {args.output}")


if __name__ == "__main__":
    main()
