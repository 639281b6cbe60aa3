"""SO(3) rotation helpers in JAX.

Rotations are represented as 3x3 matrices. Description files express
orientations as fixed-axis roll-pitch-yaw angles, so the main entry point
here is `from_rpy`. All functions are pure and operate on JAX arrays.
"""

import jax
import jax.numpy as jnp

Array = jax.Array


def rot_x(angle) -> Array:
    """Rotation matrix about the X axis."""
    c, s = jnp.cos(angle), jnp.sin(angle)
    return jnp.array([
        [1.0, 0.0, 0.0],
        [0.0, c, -s],
        [0.0, s, c],
    ], dtype=jnp.float32)


def rot_y(angle) -> Array:
    """Rotation matrix about the Y axis."""
    c, s = jnp.cos(angle), jnp.sin(angle)
    return jnp.array([
        [c, 0.0, s],
        [0.0, 1.0, 0.0],
        [-s, 0.0, c],
    ], dtype=jnp.float32)


def rot_z(angle) -> Array:
    """Rotation matrix about the Z axis."""
    c, s = jnp.cos(angle), jnp.sin(angle)
    return jnp.array([
        [c, -s, 0.0],
        [s, c, 0.0],
        [0.0, 0.0, 1.0],
    ], dtype=jnp.float32)


def from_rpy(rpy) -> Array:
    """
    Convert roll-pitch-yaw angles to a rotation matrix.

    Follows the URDF convention: roll about X, then pitch about Y, then yaw
    about Z, all about the fixed parent axes.

    Args:
        rpy: sequence of [roll, pitch, yaw] angles in radians

    Returns:
        (3, 3) float32 rotation matrix
    """
    roll, pitch, yaw = (float(a) for a in rpy)

    # Combined rotation: R = R_z * R_y * R_x
    return rot_z(yaw) @ rot_y(pitch) @ rot_x(roll)


def multiply(R1: Array, R2: Array) -> Array:
    """Compose two rotation matrices (R1 @ R2)."""
    return jnp.matmul(R1, R2)



def apply(R: Array, v: Array) -> Array:
    """
    Rotate vector(s).

    Args:
        R: (3, 3) rotation matrix
        v: (3,) or (N, 3) vector(s) to rotate

    Returns:
        rotated vector(s) with the shape of `v`
    """
    if v.ndim == 1:
        return jnp.einsum('ij,j->i', R, v)
    return jnp.einsum('ij,nj->ni', R, v)
