"""Convex hull colliders built from mesh vertex clouds."""

import logging
from typing import Optional

import numpy as np
from flax import struct
from scipy.spatial import ConvexHull, QhullError

logger = logging.getLogger(__name__)


@struct.dataclass
class ConvexHullShape:
    """Convex collider shape.

    Attributes:
        points: (N, 3) input points the hull was computed from.
        vertices: (M,) indices into ``points`` of the hull vertices.
        simplices: (F, 3) triangle indices into ``points``.
    """
    points: np.ndarray
    vertices: np.ndarray
    simplices: np.ndarray

    @property
    def hull_points(self) -> np.ndarray:
        return self.points[self.vertices]


def convex_hull(points) -> Optional[ConvexHullShape]:
    """Compute the convex hull of a point cloud.

    Returns:
        The hull, or None for fewer than 4 points, non-finite coordinates,
        or a degenerate (flat or collinear) cloud.
    """
    points = np.asarray(points, dtype=np.float32).reshape(-1, 3)
    if len(points) < 4:
        return None
    if not np.all(np.isfinite(points)):
        return None

    try:
        hull = ConvexHull(points)
    except QhullError as e:
        logger.debug("Degenerate point cloud of %d points: %s", len(points), e)
        return None

    return ConvexHullShape(
        points=points,
        vertices=np.asarray(hull.vertices, dtype=np.int32),
        simplices=np.asarray(hull.simplices, dtype=np.int32),
    )
