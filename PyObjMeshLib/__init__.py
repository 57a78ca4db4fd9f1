from .core.errors import (
    ObjError,
    AllocationError,
    FileAccessError,
    InvalidContextError,
    MalformedInputError,
    MalformedDataError,
    OutOfRangeError,
    InvalidArgumentError,
)
from .core.mesh import Face, Mesh, UNSET
from .core.geometry import unindexed_geometry, indexed_geometry
from .io.obj_loader import load_obj, loads_obj, parse_obj
from .io.obj_writer import save_obj, dumps_obj, write_obj
from .api.loader import ObjFileLoader

__all__ = [
    "ObjError", "AllocationError", "FileAccessError", "InvalidContextError",
    "MalformedInputError", "MalformedDataError", "OutOfRangeError", "InvalidArgumentError",
    "Face", "Mesh", "UNSET",
    "unindexed_geometry", "indexed_geometry",
    "load_obj", "loads_obj", "parse_obj",
    "save_obj", "dumps_obj", "write_obj",
    "ObjFileLoader",
]
