from .robot_model import Joint, JointType, Link, Origin, RobotDescription, Visual
from .scene import (
    AwaitingCollider,
    BodyEntity,
    CollisionGroups,
    ConstraintKind,
    ImpulseJoint,
    JointConstraint,
    NoCollider,
    PendingJoint,
    Ready,
    RigidBodyKind,
    Scene,
)

__all__ = [
    "AwaitingCollider",
    "BodyEntity",
    "CollisionGroups",
    "ConstraintKind",
    "ImpulseJoint",
    "Joint",
    "JointConstraint",
    "JointType",
    "Link",
    "NoCollider",
    "Origin",
    "PendingJoint",
    "Ready",
    "RigidBodyKind",
    "RobotDescription",
    "Scene",
    "Visual",
]
