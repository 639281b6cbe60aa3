"""Loader configuration objects."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple


@dataclass
class AirDragConfig:
    """Drag parameters given to the drivable root part."""

    coefficient: float = 1.0
    angular_coefficient: float = 0.1
    dimensions: Tuple[float, float, float] = (0.5, 0.5, 0.5)


@dataclass
class LoaderConfig:
    """Paths, naming conventions and spawn constants for robot loading."""

    models_root: Path = Path("assets/models")
    # Mesh paths handed to the asset server are relative to this directory.
    asset_root: Path = Path("assets")
    macro_extension: str = ".xacro"
    flattened_extension: str = ".urdf"
    # Stems containing any of these are include fragments, never the main file.
    auxiliary_markers: Tuple[str, ...] = ("materials", "trans")
    package_prefix: str = "package://"
    package_asset_dir: str = "models/"
    model_suffix: str = "_description"

    # Scene is y-up; the root link is dropped from this height.
    spawn_translation: Tuple[float, float, float] = (0.0, 2.0, 0.0)
    up_axis: int = 1
    drive_height_threshold: float = 1.9
    default_mass: float = 5.0
    visual_color: Tuple[float, float, float] = (0.8, 0.8, 0.8)
    air_drag: AirDragConfig = field(default_factory=AirDragConfig)

    robot_collision_group: int = 1 << 1
    environment_collision_group: int = 1 << 0

    # Pick the first candidate instead of failing when several links have no parent.
    first_root_wins: bool = False

    def __post_init__(self):
        self.models_root = Path(self.models_root)
        self.asset_root = Path(self.asset_root)
