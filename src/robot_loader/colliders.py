"""Deferred collider pipeline.

Entities spawned ``AwaitingCollider`` are polled every step. Once the mesh
has been decoded the entity gets a convex hull collider, becomes dynamic,
and has its pending joint attached.
"""

import logging
from typing import Callable, Optional

import numpy as np

from robot_loader.assets import AssetServer
from robot_loader.config import LoaderConfig
from robot_loader.core.scene import (
    BodyEntity,
    CollisionGroups,
    ImpulseJoint,
    Ready,
    RigidBodyKind,
    Scene,
)
from robot_loader.geometry import ConvexHullShape, convex_hull

logger = logging.getLogger(__name__)

HullFn = Callable[[np.ndarray], Optional[ConvexHullShape]]


def attach_pending_joint(entity: BodyEntity) -> bool:
    pending = entity.pending_joint
    if pending is None:
        return False

    entity.joint = ImpulseJoint(parent=pending.parent, data=pending.data)
    entity.label = f"Joint: {pending.name}"
    entity.pending_joint = None
    logger.info("Attached joint '%s' to link '%s'", pending.name, entity.name)
    return True


def apply_mesh_colliders(
    scene: Scene,
    assets: AssetServer,
    hull: HullFn = convex_hull,
    config: Optional[LoaderConfig] = None,
) -> int:
    """Finalize every entity whose mesh has finished loading.

    Returns:
        Number of entities that received a collider this poll.
    """
    config = config or LoaderConfig()
    finalized = 0
    for entity in scene.awaiting_colliders():
        state = entity.state
        mesh = assets.is_loaded(state.mesh)
        if mesh is None:
            continue

        points = np.asarray(mesh.positions, dtype=np.float32) * np.asarray(state.scale, dtype=np.float32)
        shape = hull(points)
        if shape is None:
            logger.debug("No hull for link '%s' yet; retrying next step", entity.name)
            continue

        entity.state = Ready(collider=shape)
        entity.rigid_body = RigidBodyKind.DYNAMIC
        entity.collision_groups = CollisionGroups(
            memberships=config.robot_collision_group,
            filters=config.environment_collision_group,
        )
        attach_pending_joint(entity)
        finalized += 1

    return finalized
