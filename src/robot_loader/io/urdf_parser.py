"""URDF parser for loading flattened robot descriptions.

This module parses URDF text into the immutable RobotDescription records
consumed by the tree builder.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple, Union

from lxml import etree

from robot_loader.core.robot_model import (
    Joint,
    JointType,
    Link,
    Origin,
    RobotDescription,
    Visual,
    Vec3,
)
from robot_loader.errors import UrdfParseError
from robot_loader.io.source_reader import read_text

logger = logging.getLogger(__name__)


def load_urdf(urdf_path: Union[str, Path]) -> RobotDescription:
    """Load a URDF file and parse it into a RobotDescription.

    Args:
        urdf_path: Path to the URDF file to load.

    Returns:
        RobotDescription: Links and joints in document order.
    """
    return parse_urdf_string(read_text(urdf_path))


def parse_urdf_string(text: str) -> RobotDescription:
    """Parse flattened URDF text.

    Only direct children of <robot> are read: transmission blocks nest their
    own <joint> tags, which are not kinematic joints.

    Raises:
        UrdfParseError: Malformed XML, missing attributes, unknown joint
            types, bad numbers, or inconsistent link references.
    """
    # The text is already decoded; any declared encoding is stale.
    parser = etree.XMLParser(encoding="utf-8", remove_comments=True)
    try:
        root = etree.fromstring(text.encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError as e:
        raise UrdfParseError(f"Malformed description XML: {e}") from e

    if root.tag != "robot":
        raise UrdfParseError(f"Expected <robot> root element, found <{root.tag}>")

    links = [_parse_link(elem) for elem in root.findall("link")]
    joints = [_parse_joint(elem) for elem in root.findall("joint")]
    _check_references(links, joints)

    description = RobotDescription(
        name=root.get("name", ""),
        links=tuple(links),
        joints=tuple(joints),
    )
    logger.debug(
        "Parsed robot '%s': %d links, %d joints",
        description.name, len(links), len(joints),
    )
    return description


def _parse_floats(value: str, count: int, what: str) -> Tuple[float, ...]:
    try:
        numbers = tuple(float(x) for x in value.split())
    except ValueError as e:
        raise UrdfParseError(f"Invalid number in {what}: '{value}'") from e
    if len(numbers) != count:
        raise UrdfParseError(f"Expected {count} values in {what}, got '{value}'")
    return numbers


def _parse_vec3(elem, attr: str, default: Vec3, what: str) -> Vec3:
    if elem is None:
        return default
    value = elem.get(attr)
    if value is None:
        return default
    return _parse_floats(value, 3, what)


def _parse_origin(elem, owner: str) -> Origin:
    if elem is None:
        return Origin()
    return Origin(
        xyz=_parse_vec3(elem, "xyz", (0.0, 0.0, 0.0), f"origin xyz of {owner}"),
        rpy=_parse_vec3(elem, "rpy", (0.0, 0.0, 0.0), f"origin rpy of {owner}"),
    )


def _require(elem, attr: str, what: str) -> str:
    value = elem.get(attr)
    if value is None:
        raise UrdfParseError(f"Missing '{attr}' attribute on {what}")
    return value


def _parse_visual(elem, link_name: str) -> Visual:
    origin = _parse_origin(elem.find("origin"), f"visual of link '{link_name}'")

    mesh_elem = elem.find("geometry/mesh")
    if mesh_elem is None:
        return Visual(origin=origin)

    filename = _require(mesh_elem, "filename", f"mesh of link '{link_name}'")
    scale = _parse_vec3(mesh_elem, "scale", (1.0, 1.0, 1.0), f"mesh scale of link '{link_name}'")
    return Visual(origin=origin, mesh_filename=filename, scale=scale)


def _parse_link(elem) -> Link:
    name = _require(elem, "name", "<link>")

    mass = 0.0
    mass_elem = elem.find("inertial/mass")
    if mass_elem is not None:
        value = _require(mass_elem, "value", f"mass of link '{name}'")
        (mass,) = _parse_floats(value, 1, f"mass of link '{name}'")

    visuals = tuple(_parse_visual(v, name) for v in elem.findall("visual"))
    return Link(name=name, mass=mass, visuals=visuals)


def _parse_joint(elem) -> Joint:
    name = _require(elem, "name", "<joint>")
    type_name = _require(elem, "type", f"joint '{name}'")
    try:
        joint_type = JointType(type_name)
    except ValueError as e:
        raise UrdfParseError(f"Unknown type '{type_name}' for joint '{name}'") from e

    parent_elem = elem.find("parent")
    child_elem = elem.find("child")
    if parent_elem is None or child_elem is None:
        raise UrdfParseError(f"Joint '{name}' needs both <parent> and <child>")

    return Joint(
        name=name,
        joint_type=joint_type,
        parent=_require(parent_elem, "link", f"parent of joint '{name}'"),
        child=_require(child_elem, "link", f"child of joint '{name}'"),
        origin=_parse_origin(elem.find("origin"), f"joint '{name}'"),
        axis=_parse_vec3(elem.find("axis"), "xyz", (1.0, 0.0, 0.0), f"axis of joint '{name}'"),
    )


def _check_references(links: Sequence[Link], joints: Sequence[Joint]) -> None:
    names: Dict[str, Link] = {}
    for link in links:
        if link.name in names:
            raise UrdfParseError(f"Duplicate link name '{link.name}'")
        names[link.name] = link

    children: Dict[str, str] = {}
    for joint in joints:
        for end in (joint.parent, joint.child):
            if end not in names:
                raise UrdfParseError(f"Joint '{joint.name}' references unknown link '{end}'")
        previous: Optional[str] = children.get(joint.child)
        if previous is not None:
            raise UrdfParseError(
                f"Link '{joint.child}' is the child of both '{previous}' and '{joint.name}'"
            )
        children[joint.child] = joint.name
