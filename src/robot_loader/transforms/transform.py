"""Scene transforms: translation, rotation and non-uniform scale."""

from __future__ import annotations

from typing import Sequence

import jax
import jax.numpy as jnp
from flax import struct

from . import so3

Array = jax.Array


def _vec3(values) -> Array:
    return jnp.asarray(values, dtype=jnp.float32).reshape(3)


@struct.dataclass
class Transform:
    """Immutable placement of an entity, in single precision.

    Attributes:
        translation: (3,) position
        rotation: (3, 3) rotation matrix
        scale: (3,) per-axis scale
    """
    translation: Array
    rotation: Array
    scale: Array

    # Constructors
    @classmethod
    def identity(cls) -> "Transform":
        return cls(
            translation=jnp.zeros(3, dtype=jnp.float32),
            rotation=jnp.eye(3, dtype=jnp.float32),
            scale=jnp.ones(3, dtype=jnp.float32),
        )

    @classmethod
    def from_xyz(cls, x: float, y: float, z: float) -> "Transform":
        return cls.identity().replace(translation=_vec3([x, y, z]))

    @classmethod
    def from_xyz_rpy(
        cls,
        xyz: Sequence[float],
        rpy: Sequence[float],
        scale: Sequence[float] = (1.0, 1.0, 1.0),
    ) -> "Transform":
        """Build a transform from a description-file origin."""
        return cls(
            translation=_vec3(xyz),
            rotation=so3.from_rpy(rpy),
            scale=_vec3(scale),
        )

    # Basic operations
    def compose(self, other: "Transform") -> "Transform":
        """Self ∘ other: place *other*, expressed in this frame, in the parent frame."""
        return Transform(
            translation=self.translation + so3.apply(self.rotation, self.scale * other.translation),
            rotation=so3.multiply(self.rotation, other.rotation),
            scale=self.scale * other.scale,
        )
