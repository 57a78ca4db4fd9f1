import numpy as np
from typing import Optional, Tuple

from .errors import MalformedDataError
from .mesh import Mesh, UNSET
from ..utils.validation import ensure_mesh


# column ranges of the face rows, per channel
VERTEX_COLS = slice(0, 3)
NORMAL_COLS = slice(3, 6)
TEXTURE_COLS = slice(6, 9)


def check_face_indices(idx: np.ndarray, count: int, channel: str, allow_unset: bool = True) -> None:
    """Raise MalformedDataError if any index in ``idx`` falls outside the channel."""
    lo = UNSET if allow_unset else 0
    bad = (idx < lo) | (idx >= count)
    if np.any(bad):
        face, corner = np.argwhere(bad)[0]
        raise MalformedDataError(
            f"face {int(face)} corner {int(corner)}: {channel} index {int(idx[face, corner])} "
            f"out of range for {count} {channel} entries"
        )


def validate_faces(mesh: Mesh) -> None:
    ensure_mesh(mesh)
    F = mesh.faces
    check_face_indices(F[:, VERTEX_COLS], mesh.vertex_count, "vertex", allow_unset=False)
    check_face_indices(F[:, NORMAL_COLS], mesh.normal_count, "normal")
    check_face_indices(F[:, TEXTURE_COLS], mesh.texture_count, "texture")


def gather_corners(buffer: np.ndarray, idx: np.ndarray, scale: float, dtype) -> np.ndarray:
    table = np.asarray(buffer, float).reshape(-1, 3)
    flat = idx.reshape(-1)
    out = np.zeros((flat.size, 3), dtype=dtype)
    used = flat != UNSET
    out[used] = table[flat[used]] * scale
    return out.reshape(-1)


def unindexed_geometry(mesh: Mesh, geometry: bool = True, normals: bool = True, texture: bool = True,
                       scale: float = 1.0, dtype=np.float64
                       ) -> Tuple[Optional[np.ndarray], Optional[np.ndarray], Optional[np.ndarray]]:
    """Flatten a mesh into one triple per triangle corner.

    Each requested channel comes back as a flat array of ``face_count * 9``
    values; a channel that is not requested is returned as ``None``. Corners
    without a normal or texture index get a zero triple.
    """
    ensure_mesh(mesh)
    F = mesh.faces
    channels = (
        (geometry, mesh.geometry, VERTEX_COLS, mesh.vertex_count, "vertex"),
        (normals, mesh.normals, NORMAL_COLS, mesh.normal_count, "normal"),
        (texture, mesh.texcoords, TEXTURE_COLS, mesh.texture_count, "texture"),
    )
    for wanted, _, cols, count, channel in channels:
        if wanted:
            check_face_indices(F[:, cols], count, channel, allow_unset=(cols is not VERTEX_COLS))
    out = []
    for wanted, buffer, cols, _, _ in channels:
        out.append(gather_corners(buffer, F[:, cols], scale, dtype) if wanted else None)
    return tuple(out)


def indexed_geometry(mesh: Mesh, scale: float = 1.0, dtype=np.float64):
    """Scaled copies of the coordinate buffers plus a verbatim copy of the face rows."""
    validate_faces(mesh)
    V = np.asarray(mesh.geometry, float) * scale
    N = np.asarray(mesh.normals, float) * scale
    T = np.asarray(mesh.texcoords, float) * scale
    return V.astype(dtype), N.astype(dtype), T.astype(dtype), np.array(mesh.faces, np.int64)
