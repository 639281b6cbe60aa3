"""Live scene: an arena of spawned body entities.

Entities are addressed by stable integer ids. Each one carries the physics
primitives the host simulation reads (rigid body kind, mass, collider,
joint, collision groups) as plain data. Collider construction is two-phase:
an entity is spawned ``AwaitingCollider`` and becomes ``Ready`` once its mesh
has been decoded.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union

import jax
from flax import struct

from robot_loader.transforms import Transform

logger = logging.getLogger(__name__)

Array = jax.Array
EntityId = int


class RigidBodyKind(Enum):
    FIXED = "fixed"
    DYNAMIC = "dynamic"


class ConstraintKind(Enum):
    REVOLUTE = "revolute"
    FIXED = "fixed"


@struct.dataclass
class CollisionGroups:
    """Membership and filter bit masks of a collider."""
    memberships: int = struct.field(pytree_node=False)
    filters: int = struct.field(pytree_node=False)


@struct.dataclass
class JointConstraint:
    """Constraint data between a parent body and a child body.

    Attributes:
        kind: Revolute or fixed.
        axis: (3,) rotation axis, ignored for fixed constraints.
        local_anchor1: (3,) anchor in the parent body frame.
        local_anchor2: (3,) anchor in the child body frame.
    """
    kind: ConstraintKind = struct.field(pytree_node=False)
    axis: Array
    local_anchor1: Array
    local_anchor2: Array


@struct.dataclass
class ImpulseJoint:
    """A live joint attached to the child entity."""
    parent: EntityId = struct.field(pytree_node=False)
    data: JointConstraint


@struct.dataclass
class PendingJoint:
    """A joint waiting for the child's collider before it is attached."""
    parent: EntityId = struct.field(pytree_node=False)
    data: JointConstraint
    name: str = struct.field(pytree_node=False)


# Drive capabilities of the drivable root part.
@dataclass
class DriveInput:
    vx: float = 0.0
    vy: float = 0.0
    omega: float = 0.0


@dataclass
class Velocity:
    linear: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    angular: Tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass
class ExternalForce:
    force: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    torque: Tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass
class AirDrag:
    coefficient: float
    angular_coefficient: float
    dimensions: Tuple[float, float, float]


@dataclass
class DriveCapabilities:
    air_drag: AirDrag
    drive_input: DriveInput = field(default_factory=DriveInput)
    velocity: Velocity = field(default_factory=Velocity)
    external_force: ExternalForce = field(default_factory=ExternalForce)


@dataclass(frozen=True)
class Material:
    color: Tuple[float, float, float]


@dataclass
class VisualAttachment:
    """A rendered mesh placed relative to its owning entity."""
    mesh: object
    material: Material
    transform: Transform


# Collider states
@dataclass(frozen=True)
class AwaitingCollider:
    """The collider will be a hull of ``mesh`` once it loads, scaled by ``scale``."""
    scale: Tuple[float, float, float]
    mesh: object


@dataclass(frozen=True)
class Ready:
    collider: object


@dataclass(frozen=True)
class NoCollider:
    pass


ColliderState = Union[AwaitingCollider, Ready, NoCollider]


@dataclass
class BodyEntity:
    """One spawned link of a robot."""
    id: EntityId
    name: str
    transform: Transform
    rigid_body: RigidBodyKind = RigidBodyKind.FIXED
    mass: float = 0.0
    robot_part: bool = False
    drive: Optional[DriveCapabilities] = None
    visuals: List[VisualAttachment] = field(default_factory=list)
    state: ColliderState = field(default_factory=NoCollider)
    pending_joint: Optional[PendingJoint] = None
    joint: Optional[ImpulseJoint] = None
    collision_groups: Optional[CollisionGroups] = None
    label: str = ""


class Scene:
    """Id-keyed collection of entities, iterated in spawn order."""

    def __init__(self):
        self._entities: Dict[EntityId, BodyEntity] = {}
        self._next_id: EntityId = 0

    def spawn(self, name: str, transform: Transform, **components) -> BodyEntity:
        entity = BodyEntity(id=self._next_id, name=name, transform=transform, **components)
        self._entities[entity.id] = entity
        self._next_id += 1
        return entity

    def get(self, entity_id: EntityId) -> Optional[BodyEntity]:
        return self._entities.get(entity_id)

    def despawn_robot(self) -> int:
        """Remove every robot-part entity.

        Returns:
            Number of entities removed.
        """
        doomed = [e.id for e in self._entities.values() if e.robot_part]
        for entity_id in doomed:
            del self._entities[entity_id]
        if doomed:
            logger.debug("Despawned %d robot entities", len(doomed))
        return len(doomed)

    def by_name(self, name: str) -> Optional[BodyEntity]:
        for entity in self._entities.values():
            if entity.name == name:
                return entity
        return None

    def awaiting_colliders(self) -> List[BodyEntity]:
        return [e for e in self._entities.values() if isinstance(e.state, AwaitingCollider)]

    def __contains__(self, entity_id: EntityId) -> bool:
        return entity_id in self._entities

    def __iter__(self) -> Iterator[BodyEntity]:
        return iter(list(self._entities.values()))

    def __len__(self) -> int:
        return len(self._entities)
