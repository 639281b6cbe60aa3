"""
JAX-based transforms for placing robot links in the scene.

- SO(3) rotations (so3 module)
- Transform: translation, rotation and scale with composition
"""

from . import so3
from .transform import Transform

__all__ = [
    "so3",
    "Transform",
]
