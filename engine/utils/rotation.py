# engine/utils/rotation.py
"""
Quaternion helpers for node orientation.
Quaternions are plain (w, x, y, z) tuples.
"""
import math
from typing import Sequence, Tuple

Quaternion = Tuple[float, float, float, float]

IDENTITY: Quaternion = (1.0, 0.0, 0.0, 0.0)

AXES = {
    "x": (1.0, 0.0, 0.0),
    "y": (0.0, 1.0, 0.0),
    "z": (0.0, 0.0, 1.0),
}


def axis_angle(axis: Sequence[float], degrees: float) -> Quaternion:
    """Rotation of `degrees` about a (not necessarily unit) axis."""
    ax, ay, az = axis
    length = math.sqrt(ax * ax + ay * ay + az * az)
    if length == 0:
        return IDENTITY
    half = math.radians(degrees) / 2.0
    s = math.sin(half) / length
    return (math.cos(half), ax * s, ay * s, az * s)


def multiply(a: Quaternion, b: Quaternion) -> Quaternion:
    """Hamilton product a * b (apply b first, then a)."""
    aw, ax, ay, az = a
    bw, bx, by, bz = b
    return (
        aw * bw - ax * bx - ay * by - az * bz,
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
    )


def from_euler(x: float, y: float, z: float) -> Quaternion:
    """Euler angles in degrees, applied Z then X then Y."""
    qx = axis_angle(AXES["x"], x)
    qy = axis_angle(AXES["y"], y)
    qz = axis_angle(AXES["z"], z)
    return multiply(qy, multiply(qx, qz))


def rotate(rotation: Quaternion, axis: str, degrees: float) -> Quaternion:
    """Rotates an orientation about one of the local axes ('x', 'y' or 'z')."""
    return multiply(rotation, axis_angle(AXES[axis.lower()], degrees))


def is_close(a: Quaternion, b: Quaternion, tolerance: float = 1e-6) -> bool:
    # q and -q describe the same orientation
    same = all(abs(p - q) <= tolerance for p, q in zip(a, b))
    flipped = all(abs(p + q) <= tolerance for p, q in zip(a, b))
    return same or flipped
