"""Load request handling.

A load request is accepted in one step (the previous robot is despawned
and the model name remembered) and executed at the start of the next one,
so destruction and construction never interleave within a step.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from robot_loader.assets import AssetServer, TrimeshAssetServer
from robot_loader.colliders import HullFn, apply_mesh_colliders
from robot_loader.config import LoaderConfig
from robot_loader.core.scene import Scene
from robot_loader.errors import LoaderError, ModelDirectoryNotFoundError
from robot_loader.geometry import convex_hull
from robot_loader.io.urdf_parser import parse_urdf_string
from robot_loader.io.xacro import find_main_xacro, flatten_xacro, write_flattened
from robot_loader.tree import SpawnedRobot, spawn_robot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadRobotRequest:
    model_name: str


@dataclass(frozen=True)
class DeferredLoadRequest:
    """A request accepted last step, to be built this step."""
    model_name: str


@dataclass
class LoaderContext:
    scene: Scene = field(default_factory=Scene)
    # At most one marker; a newer request replaces an unconsumed one.
    pending: Optional[DeferredLoadRequest] = None


def list_available_models(
    models_root: Union[str, Path],
    suffix: str = "_description",
) -> List[str]:
    """Names of the model directories under ``models_root``, sorted."""
    root = Path(models_root)
    if not root.is_dir():
        logger.warning("Models directory %s does not exist", root)
        return []
    return sorted(p.name for p in root.iterdir() if p.is_dir() and p.name.endswith(suffix))


class RobotLoader:
    """Owns the scene and turns load requests into spawned robots.

    Example:
        loader = RobotLoader()
        loader.step([LoadRobotRequest("robot_description")])
        loader.step()  # builds the robot
        loader.step()  # attaches colliders as meshes finish loading
    """

    def __init__(
        self,
        config: Optional[LoaderConfig] = None,
        assets: Optional[AssetServer] = None,
        hull: HullFn = convex_hull,
        scene: Optional[Scene] = None,
    ):
        self.config = config or LoaderConfig()
        # Only an asset server created here is shut down by close().
        self._owned_assets = assets is None
        self.assets = assets if assets is not None else TrimeshAssetServer(self.config.asset_root)
        self.hull = hull
        self.context = LoaderContext(scene=scene if scene is not None else Scene())

    def close(self) -> None:
        """Shut down the asset server if this loader created it."""
        if self._owned_assets:
            self.assets.shutdown()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    @property
    def scene(self) -> Scene:
        return self.context.scene

    @property
    def pending(self) -> Optional[DeferredLoadRequest]:
        return self.context.pending

    def handle_load_requests(self, requests: Iterable[LoadRobotRequest]) -> None:
        """Despawn the current robot and remember the requested model."""
        for request in requests:
            logger.info("Load requested for model '%s'", request.model_name)
            self.scene.despawn_robot()
            self.assets.clear()
            self.context.pending = DeferredLoadRequest(request.model_name)

    def _build(self, model_name: str) -> SpawnedRobot:
        model_dir = self.config.models_root / model_name
        if not model_dir.is_dir():
            raise ModelDirectoryNotFoundError(model_dir)

        main_file = find_main_xacro(model_dir, self.config)
        logger.info("Loading '%s' from %s", model_name, main_file)

        flattened = flatten_xacro(main_file, self.config.models_root)
        write_flattened(main_file, flattened, self.config)
        description = parse_urdf_string(flattened)
        return spawn_robot(self.scene, description, self.assets, self.config)

    def load_deferred_robot(self) -> Optional[SpawnedRobot]:
        """Build the robot accepted last step, if any.

        Loading failures are logged and leave the scene without a robot.
        """
        request = self.context.pending
        if request is None:
            return None

        try:
            robot = self._build(request.model_name)
        except LoaderError as e:
            logger.error(
                "Failed to load model '%s' from %s: %s",
                request.model_name, self.config.models_root / request.model_name, e,
            )
            return None
        finally:
            self.context.pending = None

        logger.info("Spawned %d links for '%s'", len(robot.entities), request.model_name)
        return robot

    def apply_mesh_colliders(self) -> int:
        return apply_mesh_colliders(self.scene, self.assets, self.hull, self.config)

    def step(self, requests: Iterable[LoadRobotRequest] = ()) -> Optional[SpawnedRobot]:
        """Run one frame of the loader.

        Returns:
            The robot built this step, if any.
        """
        robot = self.load_deferred_robot()
        self.handle_load_requests(requests)
        self.apply_mesh_colliders()
        return robot
