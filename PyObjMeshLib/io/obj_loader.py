import io
import logging
import os
from typing import Iterable, List, Optional

import numpy as np

from ..core.errors import FileAccessError, MalformedInputError
from ..core.mesh import DEFAULT_MESH_NAME, FACE_WIDTH, UNSET, Mesh


logger = logging.getLogger(__name__)


class _MeshBuilder:
    """Accumulates one mesh; remembers where its channels start in the file-global numbering."""

    def __init__(self, name: str, v_base: int, n_base: int, t_base: int, lineno: int = 0):
        self.name = name
        self.lineno = lineno
        self.v_base = v_base
        self.n_base = n_base
        self.t_base = t_base
        self.vertices: List[float] = []
        self.normals: List[float] = []
        self.texcoords: List[float] = []
        self.faces: List[tuple] = []

    def build(self) -> Mesh:
        faces = np.asarray(self.faces, np.int64).reshape(-1, FACE_WIDTH)
        return Mesh(self.name, geometry=self.vertices, normals=self.normals,
                    texcoords=self.texcoords, faces=faces)


class ObjParser:
    """Line oriented Wavefront OBJ reader producing one Mesh per ``o``/``g`` block."""

    def __init__(self, source: str = "<stream>"):
        self.source = source
        self.meshes: List[Mesh] = []
        self._current: Optional[_MeshBuilder] = None
        self._nv = 0
        self._nn = 0
        self._nt = 0
        self._smoothing = UNSET
        self._skipped = set()
        self._lineno = 0
        self._line = ""

    def _error(self, message: str) -> MalformedInputError:
        return MalformedInputError(message, self.source, self._lineno, self._line)

    def _finish_mesh(self):
        if self._current is not None:
            mesh = self._current.build()
            logger.debug("%s: mesh '%s' done (%d vertices, %d faces)",
                         self.source, mesh.name, mesh.vertex_count, mesh.face_count)
            self.meshes.append(mesh)
            self._current = None

    def _begin_mesh(self, name: str):
        self._finish_mesh()
        self._current = _MeshBuilder(name, self._nv, self._nn, self._nt, self._lineno)
        logger.debug("%s:%d: begin mesh '%s'", self.source, self._lineno, name)

    def _target(self) -> _MeshBuilder:
        if self._current is None:
            self._begin_mesh(DEFAULT_MESH_NAME)
        return self._current

    def _floats(self, tokens, lo: int, hi: int, keyword: str) -> List[float]:
        if len(tokens) < lo:
            raise self._error(f"'{keyword}' needs at least {lo} values, got {len(tokens)}")
        try:
            return [float(t) for t in tokens[:hi]]
        except ValueError:
            raise self._error(f"invalid number in '{keyword}' directive") from None

    def _resolve(self, tok: str, total: int, base: int, channel: str) -> int:
        try:
            k = int(tok)
        except ValueError:
            raise self._error(f"invalid {channel} index '{tok}'") from None
        if k == 0:
            raise self._error(f"{channel} index 0 is invalid")
        absolute = k - 1 if k > 0 else total + k
        if 0 <= absolute < base:
            raise self._error(
                f"{channel} index {k} refers to a {channel} declared before 'o'/'g' '{self._current.name}' "
                f"(line {self._current.lineno}); each o/g block owns its own {channel} entries"
            )
        if absolute < base or absolute >= total:
            raise self._error(f"{channel} index {k} does not refer to a {channel} of the current object")
        return absolute - base

    def _corner(self, tok: str, mesh: _MeshBuilder):
        parts = tok.split("/")
        if len(parts) > 3 or not parts[0]:
            raise self._error(f"malformed face corner '{tok}'")
        v = self._resolve(parts[0], self._nv, mesh.v_base, "vertex")
        t = UNSET
        n = UNSET
        if len(parts) > 1 and parts[1]:
            t = self._resolve(parts[1], self._nt, mesh.t_base, "texture")
        if len(parts) > 2 and parts[2]:
            n = self._resolve(parts[2], self._nn, mesh.n_base, "normal")
        return v, t, n

    def _face(self, tokens):
        if len(tokens) < 3:
            raise self._error(f"face needs at least 3 corners, got {len(tokens)}")
        mesh = self._target()
        corners = [self._corner(tok, mesh) for tok in tokens]
        c0 = corners[0]
        # fan triangulation for polygons
        for i in range(1, len(corners) - 1):
            c1, c2 = corners[i], corners[i + 1]
            mesh.faces.append((
                c0[0], c1[0], c2[0],
                c0[2], c1[2], c2[2],
                c0[1], c1[1], c2[1],
                self._smoothing,
            ))

    def _smoothing_group(self, tokens):
        if len(tokens) != 1:
            raise self._error("'s' needs exactly one value")
        if tokens[0].lower() == "off":
            self._smoothing = UNSET
            return
        try:
            self._smoothing = int(tokens[0])
        except ValueError:
            raise self._error(f"invalid smoothing group '{tokens[0]}'") from None

    def feed(self, line: str):
        self._lineno += 1
        self._line = line.rstrip("\r\n")
        if self._lineno == 1:
            self._line = self._line.lstrip("\ufeff")
        text = self._line.split("#", 1)[0].strip()
        if not text:
            return
        parts = text.split()
        key, args = parts[0], parts[1:]
        if key == "v":
            self._target().vertices.extend(self._floats(args, 3, 3, key))
            self._nv += 1
        elif key == "vn":
            self._target().normals.extend(self._floats(args, 3, 3, key))
            self._nn += 1
        elif key == "vt":
            uvw = self._floats(args, 1, 3, key)
            uvw += [0.0] * (3 - len(uvw))
            self._target().texcoords.extend(uvw)
            self._nt += 1
        elif key == "f":
            self._face(args)
        elif key in ("o", "g"):
            self._begin_mesh(" ".join(args) if args else DEFAULT_MESH_NAME)
        elif key == "s":
            self._smoothing_group(args)
        elif key not in self._skipped:
            self._skipped.add(key)
            logger.debug("%s:%d: skipping unsupported directive '%s'", self.source, self._lineno, key)

    def close(self) -> List[Mesh]:
        self._finish_mesh()
        logger.info("%s: parsed %d mesh(es), %d vertices, %d normals, %d texcoords",
                    self.source, len(self.meshes), self._nv, self._nn, self._nt)
        return self.meshes


def parse_obj(lines: Iterable[str], source: str = "<stream>") -> List[Mesh]:
    """Parse OBJ text lines into meshes, in file order.

    Raises MalformedInputError on the first bad line; nothing is returned in
    that case.
    """
    parser = ObjParser(source)
    for line in lines:
        parser.feed(line)
    return parser.close()


def loads_obj(text: str, source: str = "<string>") -> List[Mesh]:
    return parse_obj(io.StringIO(text), source)


def load_obj(path) -> List[Mesh]:
    path = os.fspath(path)
    if not os.path.isfile(path):
        raise FileAccessError(path, "no such file")
    try:
        f = open(path, "r", encoding="utf-8-sig", errors="replace")
    except OSError as exc:
        raise FileAccessError(path, exc.strerror or str(exc)) from exc
    with f:
        try:
            return parse_obj(f, source=path)
        except OSError as exc:
            raise FileAccessError(path, exc.strerror or str(exc)) from exc
