import io
import logging
import os
from typing import Iterable, List, TextIO

from ..core.errors import FileAccessError
from ..core.geometry import validate_faces
from ..core.mesh import DEFAULT_MESH_NAME, UNSET, Mesh


logger = logging.getLogger(__name__)

HEADER = "# PyObjMeshLib OBJ export"


def _num(x) -> str:
    return repr(float(x))


def _obj_name(name: str) -> str:
    # names are a single line of whitespace separated words without comments
    return " ".join(name.split("#", 1)[0].split()) or DEFAULT_MESH_NAME


def _triple_lines(key: str, buffer) -> List[str]:
    return [f"{key} {_num(a)} {_num(b)} {_num(c)}" for a, b, c in buffer.reshape(-1, 3)]


def _corner(v: int, t: int, n: int, v_off: int, t_off: int, n_off: int) -> str:
    s = str(v + 1 + v_off)
    if n != UNSET:
        tex = str(t + 1 + t_off) if t != UNSET else ""
        return f"{s}/{tex}/{n + 1 + n_off}"
    if t != UNSET:
        return f"{s}/{t + 1 + t_off}"
    return s


def write_obj(meshes: Iterable[Mesh], stream: TextIO) -> None:
    """Serialize meshes to ``stream`` in OBJ text form.

    Indices are written in the file-global 1-based numbering, so every mesh's
    face indices are offset by the entries written for the meshes before it.
    ``s`` lines appear only where the smoothing group changes.
    """
    meshes = list(meshes)
    for m in meshes:
        validate_faces(m)
    v_off = n_off = t_off = 0
    smoothing = UNSET
    stream.write(HEADER + "\n")
    for m in meshes:
        lines = [f"o {_obj_name(m.name)}"]
        lines += _triple_lines("v", m.geometry)
        lines += _triple_lines("vn", m.normals)
        lines += _triple_lines("vt", m.texcoords)
        for face in m.iter_faces():
            group = face.smoothing_group
            if group != smoothing:
                lines.append("s off" if group == UNSET else f"s {group}")
                smoothing = group
            corners = [
                _corner(v, t, n, v_off, t_off, n_off)
                for v, t, n in zip(face.vertices, face.textures, face.normals)
            ]
            lines.append("f " + " ".join(corners))
        stream.write("\n".join(lines) + "\n")
        v_off += m.vertex_count
        n_off += m.normal_count
        t_off += m.texture_count
    logger.debug("wrote %d mesh(es)", len(meshes))


def dumps_obj(meshes: Iterable[Mesh]) -> str:
    buf = io.StringIO()
    write_obj(meshes, buf)
    return buf.getvalue()


def save_obj(meshes: Iterable[Mesh], path) -> None:
    path = os.fspath(path)
    text = dumps_obj(meshes)
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as exc:
        raise FileAccessError(path, exc.strerror or str(exc)) from exc
    logger.info("saved OBJ to %s", path)
