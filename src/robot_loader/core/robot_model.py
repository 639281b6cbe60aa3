"""Parsed robot description records.

These are the typed result of parsing a flattened description: an ordered
collection of links and joints referencing each other by name. Records are
immutable and keep the double-precision values read from the file; the tree
builder converts them to single precision.
"""

from enum import Enum
from typing import Optional, Tuple

from flax import struct

Vec3 = Tuple[float, float, float]


class JointType(str, Enum):
    REVOLUTE = "revolute"
    CONTINUOUS = "continuous"
    PRISMATIC = "prismatic"
    FIXED = "fixed"
    FLOATING = "floating"
    PLANAR = "planar"
    SPHERICAL = "spherical"


@struct.dataclass
class Origin:
    """Offset of a frame relative to its parent frame."""
    xyz: Vec3 = struct.field(pytree_node=False, default=(0.0, 0.0, 0.0))
    rpy: Vec3 = struct.field(pytree_node=False, default=(0.0, 0.0, 0.0))


@struct.dataclass
class Visual:
    """One visual entry of a link.

    Attributes:
        origin: Placement of the geometry in the link frame.
        mesh_filename: Mesh reference as written in the file, or None for
                       primitive geometry (box, cylinder, sphere).
        scale: Non-uniform mesh scale.
    """
    origin: Origin = struct.field(pytree_node=False, default=Origin())
    mesh_filename: Optional[str] = struct.field(pytree_node=False, default=None)
    scale: Vec3 = struct.field(pytree_node=False, default=(1.0, 1.0, 1.0))


@struct.dataclass
class Link:
    name: str = struct.field(pytree_node=False)
    mass: float = struct.field(pytree_node=False, default=0.0)
    visuals: Tuple[Visual, ...] = struct.field(pytree_node=False, default=())


@struct.dataclass
class Joint:
    """Kinematic connection between a parent and a child link.

    Attributes:
        name: Joint name.
        joint_type: Kind of joint as declared in the file.
        parent: Parent link name.
        child: Child link name.
        origin: Joint frame relative to the parent link frame.
        axis: Rotation axis, in the joint frame.
    """
    name: str = struct.field(pytree_node=False)
    joint_type: JointType = struct.field(pytree_node=False)
    parent: str = struct.field(pytree_node=False)
    child: str = struct.field(pytree_node=False)
    origin: Origin = struct.field(pytree_node=False, default=Origin())
    axis: Vec3 = struct.field(pytree_node=False, default=(1.0, 0.0, 0.0))


@struct.dataclass
class RobotDescription:
    """Unordered link/joint graph of one robot, kept in document order."""
    name: str = struct.field(pytree_node=False)
    links: Tuple[Link, ...] = struct.field(pytree_node=False, default=())
    joints: Tuple[Joint, ...] = struct.field(pytree_node=False, default=())

    @property
    def link_names(self) -> Tuple[str, ...]:
        return tuple(link.name for link in self.links)

    def link(self, name: str) -> Link:
        for link in self.links:
            if link.name == name:
                return link
        raise KeyError(f"Link '{name}' not found in robot description")
