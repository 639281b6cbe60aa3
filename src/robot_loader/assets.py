"""Out-of-band mesh loading.

The loader only ever sees meshes through the ``AssetServer`` protocol:
``load`` hands back a handle immediately and ``is_loaded`` is polled once per
step until the vertex data is available.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

import numpy as np
import trimesh
from flax import struct

from robot_loader.config import LoaderConfig

logger = logging.getLogger(__name__)


@struct.dataclass
class MeshHandle:
    """Opaque reference to a mesh asset, relative to the asset root."""
    path: str = struct.field(pytree_node=False)


@struct.dataclass
class MeshData:
    """Decoded mesh.

    Attributes:
        positions: (N, 3) float32 vertex positions.
    """
    positions: np.ndarray


class AssetServer(Protocol):
    def load(self, path: str) -> MeshHandle:
        ...

    def is_loaded(self, handle: MeshHandle) -> Optional[MeshData]:
        ...

    def clear(self) -> None:
        ...


def resolve_mesh_path(filename: str, config: Optional[LoaderConfig] = None) -> str:
    """Map a description mesh reference to a path under the asset root."""
    config = config or LoaderConfig()
    return filename.replace(config.package_prefix, config.package_asset_dir).replace("\\", "/")


def _decode_mesh(path: Path) -> MeshData:
    mesh = trimesh.load(str(path), force="mesh")
    return MeshData(positions=np.asarray(mesh.vertices, dtype=np.float32).reshape(-1, 3))


class TrimeshAssetServer:
    """Asset server decoding meshes with trimesh on a thread pool.

    Loads are cached by path until ``clear`` is called. A load that fails is
    reported once and dropped from the cache, so the next ``load`` of that
    path decodes the file again.
    """

    def __init__(self, root: Union[str, Path] = "assets", max_workers: Optional[int] = None):
        self.root = Path(root)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="mesh-load")
        self._futures: Dict[str, Future] = {}

    def load(self, path: str) -> MeshHandle:
        if path not in self._futures:
            logger.debug("Loading mesh %s", path)
            self._futures[path] = self._executor.submit(_decode_mesh, self.root / path)
        return MeshHandle(path=path)

    def is_loaded(self, handle: MeshHandle) -> Optional[MeshData]:
        future = self._futures.get(handle.path)
        if future is None or not future.done():
            return None

        error = future.exception()
        if error is not None:
            del self._futures[handle.path]
            logger.error("Failed to load mesh %s: %s", handle.path, error)
            return None
        return future.result()

    def clear(self) -> None:
        """Forget every cached mesh; loads still queued are cancelled."""
        for future in self._futures.values():
            future.cancel()
        if self._futures:
            logger.debug("Dropped %d cached meshes", len(self._futures))
        self._futures.clear()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for outstanding loads.

        Returns:
            True when every submitted load has finished.
        """
        _, not_done = wait(list(self._futures.values()), timeout=timeout)
        return not not_done

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.shutdown()
