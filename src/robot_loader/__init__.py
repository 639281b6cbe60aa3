"""
Robot Loader: turns xacro robot descriptions into articulated scene bodies.

The loader flattens macro-description sources, parses the resulting URDF,
spawns one entity per link and attaches convex hull colliders and joints as
the link meshes finish loading.
"""

import logging

from . import transforms
from . import core
from . import io
from .config import LoaderConfig
from .errors import LoaderError
from .loader import (
    DeferredLoadRequest,
    LoadRobotRequest,
    LoaderContext,
    RobotLoader,
    list_available_models,
)
from .logger import setup_logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "transforms",
    "core",
    "io",
    "DeferredLoadRequest",
    "LoadRobotRequest",
    "LoaderConfig",
    "LoaderContext",
    "LoaderError",
    "RobotLoader",
    "list_available_models",
    "setup_logging",
]
