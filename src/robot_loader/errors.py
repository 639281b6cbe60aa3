"""Exceptions raised while loading a robot description."""

from pathlib import Path
from typing import Sequence, Union

PathLike = Union[str, Path]


class LoaderError(Exception):
    """Base class for every fatal loading condition."""


class SourceReadError(LoaderError):
    """A description file could not be read from disk."""

    def __init__(self, path: PathLike, reason: str = ""):
        self.path = Path(path)
        message = f"Failed to read file {self.path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ModelDirectoryNotFoundError(LoaderError):
    def __init__(self, path: PathLike):
        self.path = Path(path)
        super().__init__(f"Model directory not found: {self.path}")


class NoMainFileFoundError(LoaderError):
    """The model directory holds no main macro-description file."""

    def __init__(self, model_dir: PathLike):
        self.model_dir = Path(model_dir)
        super().__init__(f"No valid .xacro file found in {self.model_dir}")


class UrdfParseError(LoaderError):
    """The flattened description was rejected by the parser."""


class NoRootLinkError(LoaderError):
    """Every link appears as the child of some joint."""

    def __init__(self):
        super().__init__("No root link found: every link is the child of a joint")


class AmbiguousRootLinkError(LoaderError):
    """More than one link has no parent joint."""

    def __init__(self, candidates: Sequence[str]):
        self.candidates = tuple(candidates)
        super().__init__(f"Expected exactly one root link, found: {list(self.candidates)}")
