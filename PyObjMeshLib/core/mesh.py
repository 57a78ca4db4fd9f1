from dataclasses import dataclass, astuple
from typing import Iterable, Optional, Tuple
import numpy as np

from .errors import AllocationError, InvalidArgumentError
from ..utils.validation import check_index, ensure_face_rows, ensure_triples


UNSET = -1
DEFAULT_MESH_NAME = "default"
FACE_WIDTH = 10


@dataclass(frozen=True)
class Face:
    """Index record of one triangle.

    Vertex, normal and texture indices are 0-based into the owning mesh's
    buffers; ``UNSET`` (-1) marks a corner without that channel.
    A smoothing group of -1 means undefined.
    """
    vert1: int
    vert2: int
    vert3: int
    normal1: int = UNSET
    normal2: int = UNSET
    normal3: int = UNSET
    texture1: int = UNSET
    texture2: int = UNSET
    texture3: int = UNSET
    smoothing_group: int = UNSET

    @property
    def vertices(self) -> Tuple[int, int, int]:
        return (self.vert1, self.vert2, self.vert3)

    @property
    def normals(self) -> Tuple[int, int, int]:
        return (self.normal1, self.normal2, self.normal3)

    @property
    def textures(self) -> Tuple[int, int, int]:
        return (self.texture1, self.texture2, self.texture3)

    def as_row(self) -> Tuple[int, ...]:
        return astuple(self)

    @classmethod
    def from_row(cls, row) -> "Face":
        return cls(*(int(x) for x in row))


def _faces_to_rows(faces) -> np.ndarray:
    if isinstance(faces, Face):
        faces = [faces]
    if isinstance(faces, np.ndarray):
        return ensure_face_rows(faces, FACE_WIDTH)
    rows = []
    for f in faces:
        rows.append(f.as_row() if isinstance(f, Face) else f)
    return ensure_face_rows(rows, FACE_WIDTH)


def _readonly(arr: np.ndarray) -> np.ndarray:
    view = arr.view()
    view.flags.writeable = False
    return view


class Mesh:
    """One named triangle mesh with separately indexed channels.

    ``geometry``, ``normals`` and ``texcoords`` are flat float64 buffers whose
    length is always a multiple of 3. Texture entries are (u, v, w) triples.
    ``faces`` is an (n, 10) int64 array laid out like ``Face.as_row()``.
    Face indices are stored verbatim; they are only checked when geometry is
    extracted.
    """

    def __init__(self, name: str = DEFAULT_MESH_NAME, geometry=None, normals=None, texcoords=None,
                 faces: Optional[Iterable] = None):
        self._name = DEFAULT_MESH_NAME
        self.set_name(name)
        self._geometry = np.empty(0, np.float64)
        self._normals = np.empty(0, np.float64)
        self._texcoords = np.empty(0, np.float64)
        self._faces = np.empty((0, FACE_WIDTH), np.int64)
        if geometry is not None:
            self.set_geometry(geometry)
        if normals is not None:
            self.set_normals(normals)
        if texcoords is not None:
            self.set_texture_data(texcoords)
        if faces is not None:
            self.set_face_data(faces)

    # name
    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str):
        self.set_name(value)

    def set_name(self, name: str) -> None:
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError("mesh name must be a non-empty string")
        self._name = name

    # coordinate channels
    @staticmethod
    def _concat(old: np.ndarray, new: np.ndarray, what: str) -> np.ndarray:
        try:
            return np.concatenate([old, new])
        except MemoryError as exc:
            raise AllocationError(f"cannot grow {what} buffer") from exc

    def set_geometry(self, data) -> None:
        self._geometry = ensure_triples(data, "geometry").copy()

    def add_geometry(self, data) -> None:
        self._geometry = self._concat(self._geometry, ensure_triples(data, "geometry"), "geometry")

    def clear_geometry(self) -> None:
        self._geometry = np.empty(0, np.float64)

    def set_normals(self, data) -> None:
        self._normals = ensure_triples(data, "normals").copy()

    def add_normals(self, data) -> None:
        self._normals = self._concat(self._normals, ensure_triples(data, "normals"), "normals")

    def clear_normals(self) -> None:
        self._normals = np.empty(0, np.float64)

    def set_texture_data(self, data) -> None:
        self._texcoords = ensure_triples(data, "texcoords").copy()

    def add_texture_data(self, data) -> None:
        self._texcoords = self._concat(self._texcoords, ensure_triples(data, "texcoords"), "texcoords")

    def clear_texture_data(self) -> None:
        self._texcoords = np.empty(0, np.float64)

    # faces
    def set_face_data(self, faces) -> None:
        self._faces = _faces_to_rows(faces).copy()

    def add_face_data(self, faces) -> None:
        rows = _faces_to_rows(faces)
        try:
            self._faces = np.vstack([self._faces, rows])
        except MemoryError as exc:
            raise AllocationError("cannot grow face buffer") from exc

    def clear_face_data(self) -> None:
        self._faces = np.empty((0, FACE_WIDTH), np.int64)

    # read-only views
    @property
    def geometry(self) -> np.ndarray:
        return _readonly(self._geometry)

    @property
    def normals(self) -> np.ndarray:
        return _readonly(self._normals)

    @property
    def texcoords(self) -> np.ndarray:
        return _readonly(self._texcoords)

    @property
    def faces(self) -> np.ndarray:
        return _readonly(self._faces)

    # counts
    @property
    def vertex_count(self) -> int:
        return self._geometry.size // 3

    @property
    def normal_count(self) -> int:
        return self._normals.size // 3

    @property
    def texture_count(self) -> int:
        return self._texcoords.size // 3

    @property
    def face_count(self) -> int:
        return self._faces.shape[0]

    # element access
    def get_vertex(self, i) -> np.ndarray:
        i = check_index(i, self.vertex_count, "vertex")
        return self._geometry[3 * i:3 * i + 3].copy()

    def get_normal(self, i) -> np.ndarray:
        i = check_index(i, self.normal_count, "normal")
        return self._normals[3 * i:3 * i + 3].copy()

    def get_texture(self, i) -> np.ndarray:
        i = check_index(i, self.texture_count, "texture")
        return self._texcoords[3 * i:3 * i + 3].copy()

    def get_face(self, i) -> Face:
        i = check_index(i, self.face_count, "face")
        return Face.from_row(self._faces[i])

    def iter_faces(self):
        for row in self._faces:
            yield Face.from_row(row)

    # extraction
    def get_mesh_geometry_unindexed(self, geometry: bool = True, normals: bool = True, texture: bool = True,
                                    scale: float = 1.0, dtype=np.float64):
        from .geometry import unindexed_geometry
        return unindexed_geometry(self, geometry=geometry, normals=normals, texture=texture,
                                  scale=scale, dtype=dtype)

    def get_mesh_geometry(self, scale: float = 1.0, dtype=np.float64):
        from .geometry import indexed_geometry
        return indexed_geometry(self, scale=scale, dtype=dtype)

    # value semantics
    def copy(self) -> "Mesh":
        m = Mesh.__new__(Mesh)
        m._name = self._name
        m._geometry = self._geometry.copy()
        m._normals = self._normals.copy()
        m._texcoords = self._texcoords.copy()
        m._faces = self._faces.copy()
        return m

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        return self.copy()

    def __eq__(self, other):
        if not isinstance(other, Mesh):
            return NotImplemented
        return (self._name == other._name
                and np.array_equal(self._geometry, other._geometry)
                and np.array_equal(self._normals, other._normals)
                and np.array_equal(self._texcoords, other._texcoords)
                and np.array_equal(self._faces, other._faces))

    __hash__ = None

    def __repr__(self):
        return (f"Mesh(name={self._name!r}, vertices={self.vertex_count}, normals={self.normal_count}, "
                f"texcoords={self.texture_count}, faces={self.face_count})")
