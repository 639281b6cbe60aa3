"""Tests for the deferred collider pipeline."""

import numpy as np

from robot_loader.colliders import apply_mesh_colliders
from robot_loader.core import (
    AwaitingCollider,
    CollisionGroups,
    Ready,
    RigidBodyKind,
    Scene,
)
from robot_loader.core.robot_model import Joint, JointType, Link, Origin, RobotDescription, Visual
from robot_loader.geometry import convex_hull
from robot_loader.tree import spawn_robot

from conftest import InstantAssetServer

MESH = Visual(mesh_filename="package://bot_description/meshes/part.stl", scale=(2.0, 1.0, 1.0))

TWO_LINKS = RobotDescription(
    name="r",
    links=(Link("base", visuals=(MESH,)), Link("arm", visuals=(MESH,))),
    joints=(Joint(name="elbow", joint_type=JointType.REVOLUTE, parent="base", child="arm",
                  origin=Origin(xyz=(0.0, 0.2, 0.0)), axis=(0.0, 0.0, 1.0)),),
)


def test_loaded_meshes_finalize_entities(instant_assets):
    """Loaded meshes give colliders, dynamic bodies and live joints."""
    scene = Scene()
    spawned = spawn_robot(scene, TWO_LINKS, instant_assets)

    assert apply_mesh_colliders(scene, instant_assets) == 2
    assert scene.awaiting_colliders() == []

    base = scene.get(spawned.entities["base"])
    arm = scene.get(spawned.entities["arm"])
    for entity in (base, arm):
        assert isinstance(entity.state, Ready)
        assert entity.rigid_body is RigidBodyKind.DYNAMIC
        assert entity.collision_groups == CollisionGroups(memberships=0b10, filters=0b01)

    # Vertices are scaled before the hull is computed
    np.testing.assert_allclose(arm.state.collider.hull_points[:, 0].max(), 1.0)
    np.testing.assert_allclose(arm.state.collider.hull_points[:, 1].max(), 0.5)

    assert arm.pending_joint is None
    assert arm.joint.parent == base.id
    np.testing.assert_allclose(arm.joint.data.local_anchor1, [0.0, 0.2, 0.0])
    assert arm.label == "Joint: elbow"
    assert base.joint is None
    assert base.label == "base"

    # Nothing left to do
    assert apply_mesh_colliders(scene, instant_assets) == 0


def test_never_loaded_mesh_stays_pending(never_assets):
    """A mesh that never loads leaves the link fixed and waiting."""
    scene = Scene()
    spawned = spawn_robot(scene, TWO_LINKS, never_assets)

    for _ in range(3):
        assert apply_mesh_colliders(scene, never_assets) == 0

    arm = scene.get(spawned.entities["arm"])
    assert isinstance(arm.state, AwaitingCollider)
    assert arm.rigid_body is RigidBodyKind.FIXED
    assert arm.pending_joint is not None
    assert arm.joint is None


def test_degenerate_hull_is_retried():
    """A flat mesh keeps the entity waiting, and a later hull succeeds."""
    flat = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0]], dtype=np.float32)
    assets = InstantAssetServer(positions=flat)
    scene = Scene()
    spawn_robot(scene, TWO_LINKS, assets)

    assert apply_mesh_colliders(scene, assets) == 0
    assert len(scene.awaiting_colliders()) == 2

    calls = []

    def padded_hull(points):
        calls.append(len(points))
        lifted = np.vstack([points, [[0.0, 0.0, 1.0]]])
        return convex_hull(lifted)

    assert apply_mesh_colliders(scene, assets, hull=padded_hull) == 2
    assert calls == [4, 4]


def test_despawned_entities_are_not_touched(instant_assets):
    """Entities removed before their mesh loads are never finalized."""
    scene = Scene()
    spawn_robot(scene, TWO_LINKS, instant_assets)
    scene.despawn_robot()

    assert apply_mesh_colliders(scene, instant_assets) == 0
    assert len(scene) == 0
