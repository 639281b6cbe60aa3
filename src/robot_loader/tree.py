"""Kinematic tree construction.

This module turns a parsed RobotDescription into live scene entities: it
infers the root link, walks the parent/child graph depth-first composing
world transforms, and leaves colliders and joints pending until the link
meshes are available.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple

import jax.numpy as jnp
from flax import struct

from robot_loader.assets import AssetServer, resolve_mesh_path
from robot_loader.config import LoaderConfig
from robot_loader.core.robot_model import Joint, JointType, Link, RobotDescription
from robot_loader.core.scene import (
    AirDrag,
    AwaitingCollider,
    BodyEntity,
    ConstraintKind,
    DriveCapabilities,
    EntityId,
    JointConstraint,
    Material,
    NoCollider,
    PendingJoint,
    RigidBodyKind,
    Scene,
    VisualAttachment,
)
from robot_loader.errors import AmbiguousRootLinkError, NoRootLinkError
from robot_loader.transforms import Transform

logger = logging.getLogger(__name__)

ChildMap = Dict[str, List[Tuple[str, Joint]]]

REVOLUTE_TYPES = (JointType.REVOLUTE, JointType.CONTINUOUS)


@struct.dataclass
class SpawnedRobot:
    """Entities created for one robot.

    Attributes:
        root: Entity of the root link.
        entities: Link name to entity id, for every spawned link.
    """
    root: EntityId = struct.field(pytree_node=False)
    entities: Dict[str, EntityId] = struct.field(pytree_node=False)


def build_link_map(description: RobotDescription) -> Dict[str, Link]:
    return {link.name: link for link in description.links}


def build_child_map(description: RobotDescription) -> Tuple[ChildMap, Set[str]]:
    """Group joints by parent link.

    Returns:
        Parent name to ``(child name, joint)`` pairs in document order, and
        the set of every link that is the child of some joint.
    """
    child_map: ChildMap = {}
    all_children: Set[str] = set()
    for joint in description.joints:
        child_map.setdefault(joint.parent, []).append((joint.child, joint))
        all_children.add(joint.child)
    return child_map, all_children


def find_root_link(
    description: RobotDescription,
    all_children: Set[str],
    first_root_wins: bool = False,
) -> str:
    """Find the link that is not the child of any joint.

    Raises:
        NoRootLinkError: Every link has a parent.
        AmbiguousRootLinkError: Several links have no parent and
            ``first_root_wins`` is off.
    """
    candidates = [link.name for link in description.links if link.name not in all_children]
    if not candidates:
        raise NoRootLinkError()
    if len(candidates) > 1:
        if not first_root_wins:
            raise AmbiguousRootLinkError(candidates)
        logger.warning("Several root links %s; using '%s'", candidates, candidates[0])
    return candidates[0]


def make_joint_constraint(joint: Joint) -> JointConstraint:
    """Constraint anchored at the joint offset on the parent side."""
    kind = ConstraintKind.REVOLUTE if joint.joint_type in REVOLUTE_TYPES else ConstraintKind.FIXED
    return JointConstraint(
        kind=kind,
        axis=jnp.asarray(joint.axis, dtype=jnp.float32),
        local_anchor1=jnp.asarray(joint.origin.xyz, dtype=jnp.float32),
        local_anchor2=jnp.zeros(3, dtype=jnp.float32),
    )


def _is_drive_height(transform: Transform, config: LoaderConfig) -> bool:
    # Only the part spawned straight above the origin is drivable.
    translation = [float(v) for v in transform.translation]
    up = config.up_axis
    horizontal = [v for axis, v in enumerate(translation) if axis != up]
    return translation[up] >= config.drive_height_threshold and all(v == 0.0 for v in horizontal)


def _spawn_link(
    scene: Scene,
    link: Link,
    transform: Transform,
    assets: AssetServer,
    config: LoaderConfig,
) -> BodyEntity:
    entity = scene.spawn(
        link.name,
        transform,
        rigid_body=RigidBodyKind.FIXED,
        mass=link.mass if link.mass > 0 else config.default_mass,
        robot_part=True,
        label=link.name,
    )

    if _is_drive_height(transform, config):
        drag = config.air_drag
        entity.drive = DriveCapabilities(
            air_drag=AirDrag(drag.coefficient, drag.angular_coefficient, tuple(drag.dimensions)),
        )

    material = Material(color=tuple(config.visual_color))
    for visual in link.visuals:
        if visual.mesh_filename is None:
            continue
        mesh = assets.load(resolve_mesh_path(visual.mesh_filename, config))
        entity.visuals.append(VisualAttachment(
            mesh=mesh,
            material=material,
            transform=Transform.from_xyz_rpy(visual.origin.xyz, visual.origin.rpy, visual.scale),
        ))
        # The last mesh visual backs the collider.
        entity.state = AwaitingCollider(scale=tuple(visual.scale), mesh=mesh)

    if not entity.visuals:
        entity.state = NoCollider()
        logger.warning("Link '%s' has no mesh visual; it gets no collider", link.name)

    return entity


def spawn_link_recursive(
    scene: Scene,
    link_name: str,
    transform: Transform,
    link_map: Dict[str, Link],
    child_map: ChildMap,
    assets: AssetServer,
    config: LoaderConfig,
    spawned: Dict[str, EntityId],
    visited: Optional[Set[str]] = None,
) -> Optional[EntityId]:
    """Spawn a link and, depth-first, everything below it.

    Returns:
        Id of the spawned entity, or None if the link was already spawned.
    """
    if visited is None:
        visited = set()
    if link_name in visited:
        logger.error("Link '%s' reached twice; skipping the repeat", link_name)
        return None
    visited.add(link_name)

    entity = _spawn_link(scene, link_map[link_name], transform, assets, config)
    spawned[link_name] = entity.id

    for child_name, joint in child_map.get(link_name, []):
        offset = Transform.from_xyz_rpy(joint.origin.xyz, joint.origin.rpy)
        child_id = spawn_link_recursive(
            scene, child_name, transform.compose(offset),
            link_map, child_map, assets, config, spawned, visited,
        )
        if child_id is None:
            continue
        scene.get(child_id).pending_joint = PendingJoint(
            parent=entity.id,
            data=make_joint_constraint(joint),
            name=joint.name,
        )

    return entity.id


def spawn_robot(
    scene: Scene,
    description: RobotDescription,
    assets: AssetServer,
    config: Optional[LoaderConfig] = None,
) -> SpawnedRobot:
    """Spawn every link of a robot, starting from its root link.

    Raises:
        NoRootLinkError: The description has no root link.
        AmbiguousRootLinkError: The description has several root links.
    """
    config = config or LoaderConfig()
    link_map = build_link_map(description)
    child_map, all_children = build_child_map(description)
    root_name = find_root_link(description, all_children, config.first_root_wins)
    logger.info("Spawning robot '%s' from root link '%s'", description.name, root_name)

    spawned: Dict[str, EntityId] = {}
    root_id = spawn_link_recursive(
        scene, root_name, Transform.from_xyz(*config.spawn_translation),
        link_map, child_map, assets, config, spawned,
    )
    return SpawnedRobot(root=root_id, entities=spawned)
