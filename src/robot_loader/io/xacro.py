"""Flatten a xacro robot description into a single URDF document.

Only the two macros that description exporters rely on are expanded:
``$(find <package>)`` path substitution and ``<xacro:include filename=.../>``
inlining. Everything else is passed through untouched for the parser to
ignore.
"""

import logging
import os
import posixpath
import re
from pathlib import Path
from typing import Iterator, Optional, Union

from robot_loader.config import LoaderConfig
from robot_loader.errors import NoMainFileFoundError, SourceReadError
from robot_loader.io.source_reader import read_text

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

FIND_PATTERN = re.compile(r"\$\(find\s+([^\)]+)\)")
INCLUDE_PATTERN = re.compile(r'<xacro:include\s+filename="([^"]+)"\s*/>')
XML_DECLARATION_PATTERN = re.compile(r"<\?xml[^>]*\?>")
ROBOT_OPEN_PATTERN = re.compile(r"<\s*robot[^>]*>")
ROBOT_CLOSE_PATTERN = re.compile(r"<\s*/\s*robot\s*>")


def _walk_sorted(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            yield Path(dirpath) / filename


def find_main_xacro(model_dir: PathLike, config: Optional[LoaderConfig] = None) -> Path:
    """Locate the main macro-description file of a model directory.

    The first macro file (in sorted walk order) whose stem does not mark it
    as a material or transmission fragment wins.

    Raises:
        NoMainFileFoundError: No candidate exists below ``model_dir``.
    """
    config = config or LoaderConfig()
    for path in _walk_sorted(Path(model_dir)):
        if path.suffix != config.macro_extension:
            continue
        if any(marker in path.stem for marker in config.auxiliary_markers):
            continue
        return path

    raise NoMainFileFoundError(model_dir)


def resolve_package_paths(text: str, models_root: PathLike) -> str:
    """Replace every ``$(find pkg)`` with ``<models_root>/pkg``."""
    root = str(models_root)
    return FIND_PATTERN.sub(lambda m: posixpath.join(root, m.group(1)), text)


def strip_document_wrapper(text: str) -> str:
    """Drop the XML declaration and the outer <robot> tags of a fragment."""
    text = XML_DECLARATION_PATTERN.sub("", text, count=1)
    text = ROBOT_OPEN_PATTERN.sub("", text, count=1)
    return ROBOT_CLOSE_PATTERN.sub("", text, count=1)


def _include_body(filename: str, models_root: PathLike) -> str:
    try:
        raw = read_text(filename)
    except SourceReadError:
        logger.warning("Include %s could not be read; inlining nothing", filename)
        return ""

    return strip_document_wrapper(resolve_package_paths(raw, models_root))


def inline_includes(text: str, models_root: PathLike) -> str:
    """Replace each include directive with the body of the included file."""
    return INCLUDE_PATTERN.sub(lambda m: _include_body(m.group(1), models_root), text)


def flatten_xacro(path: PathLike, models_root: PathLike) -> str:
    """Resolve a main xacro file into one self-contained description string.

    Raises:
        SourceReadError: The main file could not be read.
    """
    content = read_text(path)
    resolved = resolve_package_paths(content, models_root)
    return inline_includes(resolved, models_root)


def write_flattened(path: PathLike, text: str, config: Optional[LoaderConfig] = None) -> Optional[Path]:
    """Write the flattened description next to its source for inspection.

    Returns:
        The written path, or None when writing failed.
    """
    config = config or LoaderConfig()
    target = Path(path).with_suffix(config.flattened_extension)
    try:
        target.write_text(text, encoding="utf-8")
    except OSError as e:
        logger.warning("Could not write flattened description %s: %s", target, e)
        return None

    logger.debug("Wrote flattened description to %s", target)
    return target
