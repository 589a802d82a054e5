"""
plugins/custom_hats_plugin/bundle.py
Reading hats out of the hat bundle.

The bundle is a zip archive holding, for every hat, a prefab description
(`<name>.json`) and an icon image (`<name>.png`, `.bmp`, `.jpg` or `.tga`).
Only names that have both become hats; anything else in the archive is ignored.
Loading runs on a worker thread and the result is collected from the host tick.
"""
import io
import json
import os
import queue
import threading
import zipfile
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import pygame

from engine.scene.scene_node import SceneNode
from engine.utils.logger import Logger

PREFAB_EXTENSIONS = (".json",)
ICON_EXTENSIONS = (".png", ".bmp", ".jpg", ".jpeg", ".tga")


class BundleNotFoundError(FileNotFoundError):
    pass


class BundleLoadError(Exception):
    pass


@dataclass(frozen=True)
class Hat:
    name: str
    prefab: SceneNode
    icon: pygame.Surface


def _split_member(member: str) -> Tuple[str, str]:
    stem, ext = os.path.splitext(os.path.basename(member))
    return stem, ext.lower()


def load_hat_bundle(path: str) -> Tuple[Hat, ...]:
    """Reads every complete prefab + icon pair from the archive at `path`, ordered by name."""
    if not os.path.isfile(path):
        raise BundleNotFoundError(f"Hat bundle not found at {path}")

    prefabs: Dict[str, SceneNode] = {}
    icons: Dict[str, pygame.Surface] = {}
    try:
        with zipfile.ZipFile(path) as archive:
            for member in archive.namelist():
                if member.endswith("/"):
                    continue
                stem, ext = _split_member(member)
                if not stem:
                    continue
                if ext in PREFAB_EXTENSIONS:
                    data = json.loads(archive.read(member).decode("utf-8"))
                    prefab = SceneNode.from_dict(data)
                    prefab.name = stem
                    prefabs[stem] = prefab
                elif ext in ICON_EXTENSIONS:
                    icons[stem] = pygame.image.load(io.BytesIO(archive.read(member)), os.path.basename(member))
                Logger.debug("HatBundle", f"Asset: {member}")
    except (zipfile.BadZipFile, ValueError, pygame.error) as e:
        raise BundleLoadError(f"Could not read hat bundle {path}: {e}") from e

    names = sorted(set(prefabs) & set(icons))
    dropped = sorted(set(prefabs) ^ set(icons))
    if dropped:
        Logger.debug("HatBundle", f"Ignoring incomplete assets: {dropped}")

    return tuple(Hat(name, prefabs[name], icons[name]) for name in names)


class HatBundleLoader:
    """Loads a hat bundle off the main thread. Poll from the tick to collect the result."""

    def __init__(self, path: str):
        self.path = path
        self.result_queue: "queue.Queue" = queue.Queue()
        self.load_thread: Optional[threading.Thread] = None

    @property
    def is_loading(self) -> bool:
        return self.load_thread is not None and self.load_thread.is_alive()

    def start(self) -> None:
        if not os.path.isfile(self.path):
            raise BundleNotFoundError(f"Hat bundle not found at {self.path}. Please ensure the file exists.")
        Logger.debug("HatBundle", f"Path to hat bundle: {self.path}")
        self.load_thread = threading.Thread(target=self._worker_load, name="HatBundleLoader", daemon=True)
        self.load_thread.start()

    def _worker_load(self) -> None:
        """Worker function (runs in a separate thread)."""
        try:
            self.result_queue.put((load_hat_bundle(self.path), None))
        except Exception as e:
            self.result_queue.put((None, e))

    def poll(self) -> Optional[Tuple[Hat, ...]]:
        """
        Returns the loaded hats once the worker is done, else None.

        Raises:
            BundleLoadError: if the worker failed.
        """
        try:
            hats, error = self.result_queue.get_nowait()
        except queue.Empty:
            return None
        if error is not None:
            if isinstance(error, BundleLoadError):
                raise error
            raise BundleLoadError(str(error)) from error
        return hats

    def wait(self, timeout: Optional[float] = None) -> Optional[Tuple[Hat, ...]]:
        """Blocks until the worker finishes (used by tests and tools), then polls."""
        if self.load_thread is not None:
            self.load_thread.join(timeout)
        return self.poll()
