import logging
import os
from typing import Iterator, List, Optional, TextIO, Tuple

from ..core.errors import InvalidArgumentError, InvalidContextError
from ..core.mesh import Mesh
from ..io.obj_loader import load_obj, parse_obj
from ..io.obj_writer import save_obj, write_obj
from ..utils.validation import check_index


logger = logging.getLogger(__name__)


class ObjFileLoader:
    """Owns the meshes of one OBJ file.

    A loader is either fresh or filled by exactly one parse; meshes added with
    ``add_mesh`` are stored as independent copies.
    """

    def __init__(self, path: Optional[str] = None):
        self._meshes: List[Mesh] = []
        if path is not None:
            self.read_file(path)

    @property
    def mesh_count(self) -> int:
        return len(self._meshes)

    @property
    def meshes(self) -> Tuple[Mesh, ...]:
        return tuple(self._meshes)

    def __len__(self) -> int:
        return len(self._meshes)

    def __iter__(self) -> Iterator[Mesh]:
        return iter(list(self._meshes))

    def get_mesh(self, index: int) -> Mesh:
        # the returned mesh is owned by the loader
        return self._meshes[check_index(index, len(self._meshes), "mesh")]

    def get_mesh_by_name(self, name: str) -> Mesh:
        for m in self._meshes:
            if m.name == name:
                return m
        raise KeyError(name)

    def add_mesh(self, mesh: Mesh) -> None:
        if not isinstance(mesh, Mesh):
            raise InvalidArgumentError(f"expected Mesh, got {type(mesh).__name__}")
        self._meshes.append(mesh.copy())

    def _ensure_fresh(self):
        if self._meshes:
            raise InvalidContextError(
                f"loader already holds {len(self._meshes)} mesh(es); parse into a new loader"
            )

    def read_file(self, path) -> None:
        self._ensure_fresh()
        meshes = load_obj(path)
        self._meshes.extend(meshes)
        logger.info("loaded %d mesh(es) from %s", len(meshes), os.fspath(path))

    def read_stream(self, stream: TextIO, source: str = "<stream>") -> None:
        self._ensure_fresh()
        self._meshes.extend(parse_obj(stream, source))

    def write_file(self, path) -> None:
        save_obj(self._meshes, path)

    def write_stream(self, stream: TextIO) -> None:
        write_obj(self._meshes, stream)

    def __repr__(self):
        return f"ObjFileLoader(meshes={len(self._meshes)})"
