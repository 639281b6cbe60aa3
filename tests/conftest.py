"""Shared fixtures: fake asset servers and a scratch copy of the model tree."""

import shutil
from pathlib import Path

import hypothesis
import numpy as np
import pytest

from robot_loader.assets import MeshData, MeshHandle
from robot_loader.config import LoaderConfig

hypothesis.settings.register_profile("ci", max_examples=25, deadline=None)
hypothesis.settings.load_profile("ci")

FIXTURES = Path(__file__).parent / "fixtures"

CUBE = np.array([
    [x, y, z] for x in (-0.5, 0.5) for y in (-0.5, 0.5) for z in (-0.5, 0.5)
], dtype=np.float32)


class InstantAssetServer:
    """Every mesh is a unit cube, available as soon as it is requested."""

    def __init__(self, positions=CUBE):
        self.positions = np.asarray(positions, dtype=np.float32)
        self.requested = []
        self.cleared = 0

    def load(self, path):
        self.requested.append(path)
        return MeshHandle(path=path)

    def is_loaded(self, handle):
        return MeshData(positions=self.positions)

    def clear(self):
        self.cleared += 1


class NeverLoadingAssetServer(InstantAssetServer):
    def is_loaded(self, handle):
        return None


@pytest.fixture
def instant_assets():
    return InstantAssetServer()


@pytest.fixture
def never_assets():
    return NeverLoadingAssetServer()


@pytest.fixture
def assets_dir(tmp_path):
    """Writable copy of the fixture asset tree."""
    target = tmp_path / "assets"
    shutil.copytree(FIXTURES / "assets", target)
    return target


@pytest.fixture
def config(assets_dir):
    return LoaderConfig(models_root=assets_dir / "models", asset_root=assets_dir)
