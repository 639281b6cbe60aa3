from .source_reader import read_text
from .urdf_parser import load_urdf, parse_urdf_string
from .xacro import find_main_xacro, flatten_xacro, write_flattened

__all__ = [
    "find_main_xacro",
    "flatten_xacro",
    "load_urdf",
    "parse_urdf_string",
    "read_text",
    "write_flattened",
]
